from __future__ import annotations

import dataclasses
from typing import Any

from formbind.field_descriptors import FieldDescriptor
from formbind.field_kinds import list_element_type, type_shape
from formbind.form_models import FileMeta


def file_value(tp: Any, meta: FileMeta | None) -> FileMeta | None:
    """Shape `meta` for a field declared as `tp`.

    Optional `FileMeta` fields share the source object, bare `FileMeta`
    fields receive their own copy.
    """

    if meta is None:
        return None
    if type_shape(tp).optional:
        return meta
    return dataclasses.replace(meta)


def bind_file(record: Any, descriptor: FieldDescriptor, meta: FileMeta | None) -> None:
    value = file_value(descriptor.annotation, meta)
    if value is None:
        return
    setattr(record, descriptor.name, value)


def bind_files(record: Any, descriptor: FieldDescriptor, metas: list[FileMeta | None]) -> None:
    element_type = list_element_type(descriptor.annotation)
    by_reference = type_shape(element_type).optional

    items: list[FileMeta | None] = []
    for meta in metas:
        value = file_value(element_type, meta)
        if value is None and not by_reference:
            value = FileMeta()
        items.append(value)
    setattr(record, descriptor.name, items)
