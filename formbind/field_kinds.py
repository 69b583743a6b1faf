from __future__ import annotations

import types
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Union, get_args, get_origin

from formbind.form_models import FileMeta


class FieldKind(str, Enum):
    SCALAR = "scalar"
    SCALAR_LIST = "scalar_list"
    FILE_REF = "file_ref"
    FILE_REF_LIST = "file_ref_list"

    @property
    def is_file(self) -> bool:
        return self in (FieldKind.FILE_REF, FieldKind.FILE_REF_LIST)


@dataclass(frozen=True)
class TypeShape:
    """A declared type with its one level of optionality made explicit.

    `base` has both `Annotated` and `Optional` stripped, `metadata` keeps the
    `Annotated` extras (width markers and the like).
    """

    base: Any
    optional: bool = False
    metadata: tuple[Any, ...] = ()


def _split_annotated(tp: Any) -> tuple[Any, tuple[Any, ...]]:
    if get_origin(tp) is Annotated:
        base, *extras = get_args(tp)
        return base, tuple(extras)
    return tp, ()


def type_shape(tp: Any) -> TypeShape:
    base, metadata = _split_annotated(tp)
    optional = False

    if get_origin(base) in (Union, types.UnionType):
        members = get_args(base)
        non_none = [member for member in members if member is not type(None)]
        if len(non_none) == 1 and len(members) == 2:
            optional = True
            base, inner_metadata = _split_annotated(non_none[0])
            metadata = metadata + inner_metadata

    return TypeShape(base=base, optional=optional, metadata=metadata)


def is_file_meta(tp: Any) -> bool:
    return type_shape(tp).base is FileMeta


def is_list_type(tp: Any) -> bool:
    return tp is list or get_origin(tp) is list


def list_element_type(tp: Any) -> Any:
    base = type_shape(tp).base
    args = get_args(base)
    return args[0] if args else Any


def classify_field_type(tp: Any) -> FieldKind:
    base = type_shape(tp).base

    # FileMeta must be recognised before the generic list rule.
    if base is FileMeta:
        return FieldKind.FILE_REF
    if is_list_type(base):
        if is_file_meta(list_element_type(base)):
            return FieldKind.FILE_REF_LIST
        return FieldKind.SCALAR_LIST
    return FieldKind.SCALAR
