from typing import Annotated, Any, Optional, Union

from formbind.field_kinds import FieldKind, classify_field_type, list_element_type, type_shape
from formbind.form_models import FileMeta
from formbind.number_types import IntWidth, UInt8


def test_file_meta_and_its_optional_form_are_file_refs():
    assert classify_field_type(FileMeta) is FieldKind.FILE_REF
    assert classify_field_type(FileMeta | None) is FieldKind.FILE_REF
    assert classify_field_type(Optional[FileMeta]) is FieldKind.FILE_REF


def test_list_of_file_meta_is_checked_before_generic_lists():
    assert classify_field_type(list[FileMeta]) is FieldKind.FILE_REF_LIST
    assert classify_field_type(list[FileMeta | None]) is FieldKind.FILE_REF_LIST
    assert classify_field_type(list[Optional[FileMeta]] | None) is FieldKind.FILE_REF_LIST


def test_other_lists_are_scalar_lists():
    assert classify_field_type(list[int]) is FieldKind.SCALAR_LIST
    assert classify_field_type(list[int | None]) is FieldKind.SCALAR_LIST
    assert classify_field_type(list[dict[str, int]]) is FieldKind.SCALAR_LIST
    assert classify_field_type(list) is FieldKind.SCALAR_LIST


def test_everything_else_is_scalar():
    assert classify_field_type(str) is FieldKind.SCALAR
    assert classify_field_type(int | None) is FieldKind.SCALAR
    assert classify_field_type(dict[str, int]) is FieldKind.SCALAR
    assert classify_field_type(tuple[int, ...]) is FieldKind.SCALAR
    assert classify_field_type(Any) is FieldKind.SCALAR


def test_type_shape_makes_optional_and_markers_explicit():
    shape = type_shape(Optional[UInt8])

    assert shape.base is int
    assert shape.optional is True
    assert shape.metadata == (IntWidth(8, signed=False),)


def test_type_shape_keeps_multi_member_unions_intact():
    shape = type_shape(Union[int, str, None])

    assert shape.optional is False
    assert shape.base == Union[int, str, None]


def test_type_shape_merges_outer_and_inner_annotations():
    shape = type_shape(Annotated[Annotated[int, "inner"] | None, "outer"])

    assert shape.base is int
    assert shape.optional is True
    assert shape.metadata == ("outer", "inner")


def test_list_element_type_defaults_to_any_for_bare_lists():
    assert list_element_type(list[str]) is str
    assert list_element_type(list[str] | None) is str
    assert list_element_type(list) is Any
    assert list_element_type(FileMeta) is Any
