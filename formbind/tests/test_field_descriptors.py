from dataclasses import dataclass, field

import pytest
from pydantic import BaseModel, Field

from formbind.errors import MustBeStructError
from formbind.field_descriptors import describe_record, form_key, resolve_source_key
from formbind.field_kinds import FieldKind
from formbind.form_models import FileMeta
from formbind.number_types import UInt16


@dataclass
class Profile:
    Name: str = ""
    nickname: str = field(default="", metadata=form_key("nick"))
    secret: str = field(default="", metadata=form_key("-"))
    blank: int = field(default=0, metadata=form_key(""))
    _internal: str = ""
    avatar: FileMeta | None = field(default=None, metadata=form_key("avatar"))
    tags: list[str] = field(default_factory=list, metadata=form_key("tag"))


class ProfileModel(BaseModel):
    name: str = Field(default="", json_schema_extra=form_key("full_name"))
    port: UInt16 = 0
    skipped: str = Field(default="", json_schema_extra=form_key("-"))


def test_resolve_source_key_falls_back_to_declared_name():
    assert resolve_source_key("Name", None) == ("Name", False)
    assert resolve_source_key("Name", "") == ("Name", False)
    assert resolve_source_key("Name", "name") == ("name", False)


def test_resolve_source_key_skip_marker_short_circuits():
    assert resolve_source_key("Name", "-") == ("", True)


def test_describe_dataclass_keeps_declaration_order():
    descriptors = describe_record(Profile)

    assert [item.name for item in descriptors] == [
        "Name",
        "nickname",
        "secret",
        "blank",
        "_internal",
        "avatar",
        "tags",
    ]


def test_describe_dataclass_resolves_keys_and_flags():
    descriptors = {item.name: item for item in describe_record(Profile)}

    assert descriptors["Name"].key == "Name"
    assert descriptors["nickname"].key == "nick"
    assert descriptors["secret"].skip is True
    assert descriptors["secret"].bindable is False
    assert descriptors["blank"].key == "blank"
    assert descriptors["_internal"].visible is False
    assert descriptors["avatar"].kind is FieldKind.FILE_REF
    assert descriptors["tags"].kind is FieldKind.SCALAR_LIST
    assert descriptors["tags"].key == "tag"


def test_describe_pydantic_model_reads_json_schema_extra():
    descriptors = {item.name: item for item in describe_record(ProfileModel)}

    assert descriptors["name"].key == "full_name"
    assert descriptors["port"].key == "port"
    assert descriptors["port"].annotation == UInt16
    assert descriptors["skipped"].skip is True


def test_describe_record_honours_custom_tag_name():
    @dataclass
    class Tagged:
        title: str = field(default="", metadata=form_key("heading", tag_name="multipart"))

    assert describe_record(Tagged)[0].key == "title"
    assert describe_record(Tagged, "multipart")[0].key == "heading"


def test_describe_record_is_cached_per_type():
    assert describe_record(Profile) is describe_record(Profile)


def test_describe_record_rejects_non_records():
    with pytest.raises(MustBeStructError):
        describe_record(dict)
