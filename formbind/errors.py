from __future__ import annotations

from typing import Any


class BindingError(ValueError):
    """Base class for everything the form binder raises."""


class MustBePointerError(BindingError):
    def __init__(self, message: str = "destination must be a mutable record instance") -> None:
        super().__init__(message)


class CannotBeNilError(BindingError):
    def __init__(self, message: str = "destination cannot be None") -> None:
        super().__init__(message)


class MustBeStructError(BindingError):
    def __init__(self, message: str = "destination must be a dataclass or pydantic model instance") -> None:
        super().__init__(message)


class InvalidFieldTypeError(BindingError, TypeError):
    """The declared type of a destination field cannot be bound from form text.

    This points at the record definition, not at the submitted data.
    """

    def __init__(self, field_type: Any, field: str | None = None) -> None:
        self.field_type = field_type
        self.field = field
        where = f" on field {field}" if field else ""
        super().__init__(f"invalid field type{where}: {field_type!r}")


class ParseFailedError(BindingError):
    """A field's source text could not be converted to its declared type.

    `field` is the declared attribute name, `cause` the underlying error.
    The cause is also chained as `__cause__`.
    """

    def __init__(self, field: str, cause: BaseException, key: str | None = None) -> None:
        self.field = field
        self.cause = cause
        self.key = key
        super().__init__(f"failed to parse field {field}: {cause}")


class InvalidSyntax(ValueError):
    def __init__(self, func: str, text: str) -> None:
        self.func = func
        self.text = text
        super().__init__(f"{func}: parsing {text!r}: invalid syntax")


class ValueOutOfRange(ValueError):
    def __init__(self, func: str, text: str) -> None:
        self.func = func
        self.text = text
        super().__init__(f"{func}: parsing {text!r}: value out of range")
