from __future__ import annotations

import dataclasses
from typing import Any

from pydantic import BaseModel

from formbind.binder_config import BinderConfig
from formbind.errors import CannotBeNilError, MustBePointerError, MustBeStructError, ParseFailedError
from formbind.field_descriptors import FieldDescriptor, describe_record, is_record_type
from formbind.field_kinds import FieldKind
from formbind.file_binding import bind_file, bind_files
from formbind.form_models import Form
from formbind.scalar_conversion import convert_list, convert_scalar

# Values that cannot be updated in place.
_VALUE_TYPES = (int, float, complex, str, bytes, tuple, frozenset)


def _is_frozen_record(destination: Any) -> bool:
    record_type = type(destination)
    if dataclasses.is_dataclass(record_type):
        return record_type.__dataclass_params__.frozen
    if isinstance(destination, BaseModel):
        return bool(record_type.model_config.get("frozen"))
    return False


def validate_destination(destination: Any) -> None:
    if isinstance(destination, type) or isinstance(destination, _VALUE_TYPES) or _is_frozen_record(destination):
        raise MustBePointerError()
    if destination is None:
        raise CannotBeNilError()
    if not is_record_type(type(destination)):
        raise MustBeStructError()


def _bind_files(form: Form, destination: Any, descriptor: FieldDescriptor) -> None:
    metas = form.get_files(descriptor.key)
    if not metas:
        return
    if descriptor.kind is FieldKind.FILE_REF:
        bind_file(destination, descriptor, metas[0])
    else:
        bind_files(destination, descriptor, metas)


def _bind_values(form: Form, destination: Any, descriptor: FieldDescriptor, config: BinderConfig) -> None:
    raws = form.get_values(descriptor.key)
    if not raws:
        return
    try:
        if descriptor.kind is FieldKind.SCALAR_LIST:
            value = convert_list(descriptor.annotation, raws, descriptor.name)
        else:
            value = convert_scalar(descriptor.annotation, config.pick_value(raws), descriptor.name)
    except ParseFailedError as exc:
        exc.key = descriptor.key
        raise
    setattr(destination, descriptor.name, value)


def convert(form: Form, destination: Any, *, config: BinderConfig | None = None) -> None:
    """Bind `form` into `destination` in place.

    `destination` must be a mutable dataclass or pydantic model instance.
    Fields are processed in declaration order and the first error aborts the
    call. Fields bound before the failing one keep their new values, so on
    error the destination may be partially populated. A list field that fails
    to convert is left untouched.

    Fields whose key is missing from the form, or maps to no entries, keep
    their current value.
    """

    config = config or BinderConfig()
    validate_destination(destination)

    for descriptor in describe_record(type(destination), config.tag_name):
        if not descriptor.bindable:
            continue
        if descriptor.kind.is_file:
            _bind_files(form, destination, descriptor)
        else:
            _bind_values(form, destination, descriptor, config)
