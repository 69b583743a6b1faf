from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated, Any, get_type_hints

from pydantic import BaseModel

from formbind.errors import MustBeStructError
from formbind.field_kinds import FieldKind, classify_field_type

DEFAULT_TAG_NAME = "form"
SKIP_MARKER = "-"


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    annotation: Any
    kind: FieldKind
    key: str
    skip: bool
    visible: bool

    @property
    def bindable(self) -> bool:
        return self.visible and not self.skip


def form_key(key: str, tag_name: str = DEFAULT_TAG_NAME) -> dict[str, str]:
    """Source-key annotation for `dataclasses.field(metadata=...)` or
    `pydantic.Field(json_schema_extra=...)`."""

    return {tag_name: key}


def resolve_source_key(name: str, annotation_value: str | None) -> tuple[str, bool]:
    if annotation_value == SKIP_MARKER:
        return "", True
    return annotation_value or name, False


def is_record_type(tp: Any) -> bool:
    if not isinstance(tp, type):
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def _tag_value(mapping: Any, tag_name: str) -> str | None:
    if not isinstance(mapping, Mapping):
        return None
    value = mapping.get(tag_name)
    return value if isinstance(value, str) else None


def _declared_fields(record_type: type, tag_name: str) -> list[tuple[str, Any, str | None]]:
    if issubclass(record_type, BaseModel):
        declared = []
        for name, info in record_type.model_fields.items():
            annotation = info.annotation
            if info.metadata:
                annotation = Annotated[(annotation, *info.metadata)]
            declared.append((name, annotation, _tag_value(info.json_schema_extra, tag_name)))
        return declared

    hints = get_type_hints(record_type, include_extras=True)
    return [
        (item.name, hints.get(item.name, item.type), _tag_value(item.metadata, tag_name))
        for item in dataclasses.fields(record_type)
    ]


@lru_cache(maxsize=None)
def describe_record(record_type: type, tag_name: str = DEFAULT_TAG_NAME) -> tuple[FieldDescriptor, ...]:
    if not is_record_type(record_type):
        raise MustBeStructError()

    descriptors = []
    for name, annotation, tag in _declared_fields(record_type, tag_name):
        key, skip = resolve_source_key(name, tag)
        descriptors.append(
            FieldDescriptor(
                name=name,
                annotation=annotation,
                kind=classify_field_type(annotation),
                key=key,
                skip=skip,
                visible=not name.startswith("_"),
            )
        )
    return tuple(descriptors)
