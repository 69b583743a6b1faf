from __future__ import annotations

import dataclasses
import math
import re
import struct
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Any, Callable, get_origin, is_typeddict
from uuid import UUID

from pydantic import BaseModel, TypeAdapter
from pydantic.errors import PydanticUserError

from formbind.errors import InvalidFieldTypeError, InvalidSyntax, ParseFailedError, ValueOutOfRange
from formbind.field_kinds import TypeShape, list_element_type, type_shape
from formbind.number_types import INT64_WIDTH, UINT64_WIDTH, FloatWidth, IntWidth


class ScalarKind(str, Enum):
    TEXT_DECODER = "text_decoder"
    STRING = "string"
    SIGNED_INT = "signed_int"
    UNSIGNED_INT = "unsigned_int"
    FLOAT = "float"
    BOOL = "bool"
    COMPLEX = "complex"
    STRUCTURED = "structured"


TEXT_DECODER_METHOD = "from_form_text"

TRUE_LITERALS = {"1", "t", "T", "TRUE", "true", "True"}
FALSE_LITERALS = {"0", "f", "F", "FALSE", "false", "False"}

_SIGNED_DIGITS = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_DIGITS = re.compile(r"[0-9]+")
_FLOAT_TEXT = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?)",
    re.IGNORECASE,
)
_STRUCTURED_ORIGINS = (list, tuple, dict, set, frozenset)


def _decode_enum(enum_type: type[Enum], text: str) -> Enum:
    for member in enum_type:
        if str(member.value) == text:
            return member
    raise ValueError(f"{text!r} is not a valid {enum_type.__name__}")


_BUILTIN_TEXT_DECODERS: dict[type, Callable[[str], Any]] = {
    datetime: datetime.fromisoformat,
    date: date.fromisoformat,
    time: time.fromisoformat,
    UUID: UUID,
    Decimal: Decimal,
}


def text_decoder_for(tp: Any) -> Callable[[bytes], Any] | None:
    """Return the custom text decoder of `tp`, if it has one.

    A type opts in by defining a classmethod `from_form_text(cls, data: bytes)`
    that returns an instance or raises. Any exception it raises is reported
    as a parse failure of the field being bound. A handful of standard
    library types (datetime, date, time, UUID, Decimal, Enum subclasses) are
    decoded from their canonical text form without opting in.
    """

    if not isinstance(tp, type) or get_origin(tp) is not None:
        return None

    custom = getattr(tp, TEXT_DECODER_METHOD, None)
    if callable(custom):
        return custom

    builtin = _BUILTIN_TEXT_DECODERS.get(tp)
    if builtin is not None:
        return lambda data: builtin(data.decode("utf-8"))

    if issubclass(tp, Enum):
        return lambda data: _decode_enum(tp, data.decode("utf-8"))
    return None


def is_structured_type(tp: Any) -> bool:
    if (get_origin(tp) or tp) in _STRUCTURED_ORIGINS:
        return True
    if not isinstance(tp, type) or get_origin(tp) is not None:
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel) or is_typeddict(tp)


@lru_cache(maxsize=None)
def _type_adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


def _marker(shape: TypeShape, marker_type: type) -> Any:
    for item in shape.metadata:
        if isinstance(item, marker_type):
            return item
    return None


def scalar_kind(shape: TypeShape, field_name: str | None = None) -> ScalarKind:
    base = shape.base

    if text_decoder_for(base) is not None:
        return ScalarKind.TEXT_DECODER
    if base is str:
        return ScalarKind.STRING
    if base is bool:
        return ScalarKind.BOOL
    if base is int:
        width = _marker(shape, IntWidth) or INT64_WIDTH
        return ScalarKind.SIGNED_INT if width.signed else ScalarKind.UNSIGNED_INT
    if base is float:
        return ScalarKind.FLOAT
    if base is complex:
        return ScalarKind.COMPLEX
    if is_structured_type(base):
        try:
            _type_adapter(base)
        except PydanticUserError as exc:
            raise InvalidFieldTypeError(base, field_name) from exc
        return ScalarKind.STRUCTURED
    raise InvalidFieldTypeError(base, field_name)


def parse_int(text: str, width: IntWidth = INT64_WIDTH) -> int:
    func = "parse_int" if width.signed else "parse_uint"
    pattern = _SIGNED_DIGITS if width.signed else _UNSIGNED_DIGITS
    if not pattern.fullmatch(text):
        raise InvalidSyntax(func, text)

    value = int(text)
    widest = INT64_WIDTH if width.signed else UINT64_WIDTH
    if not widest.min_value <= value <= widest.max_value:
        raise ValueOutOfRange(func, text)
    # Narrowing is checked: values that do not fit the declared width are rejected.
    if not width.min_value <= value <= width.max_value:
        raise ValueOutOfRange(func, text)
    return value


def _to_float32(value: float, func: str, text: str) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError as exc:
        raise ValueOutOfRange(func, text) from exc


def parse_float(text: str, width: FloatWidth | None = None, func: str = "parse_float") -> float:
    if not _FLOAT_TEXT.fullmatch(text):
        raise InvalidSyntax(func, text)

    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        raise ValueOutOfRange(func, text)
    if width is not None and width.bits == 32:
        value = _to_float32(value, func, text)
    return value


def parse_bool(text: str) -> bool:
    if text in TRUE_LITERALS:
        return True
    if text in FALSE_LITERALS:
        return False
    raise InvalidSyntax("parse_bool", text)


def _split_complex(body: str) -> tuple[str, str]:
    # The imaginary part starts at the last sign that is not an exponent sign.
    for index in range(len(body) - 1, 0, -1):
        if body[index] in "+-" and body[index - 1] not in "eE":
            return body[:index], body[index:]
    return "", body


def parse_complex(text: str, width: FloatWidth | None = None) -> complex:
    func = "parse_complex"
    body = text
    if len(body) >= 2 and body[0] == "(" and body[-1] == ")":
        body = body[1:-1]

    if not body.endswith("i"):
        return complex(parse_float(body, width, func), 0.0)

    real_text, imag_text = _split_complex(body[:-1])
    if not imag_text:
        raise InvalidSyntax(func, text)
    try:
        real = parse_float(real_text, width, func) if real_text else 0.0
        imag = parse_float(imag_text, width, func)
    except InvalidSyntax as exc:
        raise InvalidSyntax(func, text) from exc
    return complex(real, imag)


def _convert_text_decoder(shape: TypeShape, raw: str) -> Any:
    decoder = text_decoder_for(shape.base)
    return decoder(raw.encode("utf-8"))


def _convert_string(shape: TypeShape, raw: str) -> str:
    return raw


def _convert_int(shape: TypeShape, raw: str) -> int:
    return parse_int(raw, _marker(shape, IntWidth) or INT64_WIDTH)


def _convert_float(shape: TypeShape, raw: str) -> float:
    return parse_float(raw, _marker(shape, FloatWidth))


def _convert_bool(shape: TypeShape, raw: str) -> bool:
    return parse_bool(raw)


def _convert_complex(shape: TypeShape, raw: str) -> complex:
    return parse_complex(raw, _marker(shape, FloatWidth))


def _convert_structured(shape: TypeShape, raw: str) -> Any:
    return _type_adapter(shape.base).validate_json(raw, strict=True)


_CONVERTERS: dict[ScalarKind, Callable[[TypeShape, str], Any]] = {
    ScalarKind.TEXT_DECODER: _convert_text_decoder,
    ScalarKind.STRING: _convert_string,
    ScalarKind.SIGNED_INT: _convert_int,
    ScalarKind.UNSIGNED_INT: _convert_int,
    ScalarKind.FLOAT: _convert_float,
    ScalarKind.BOOL: _convert_bool,
    ScalarKind.COMPLEX: _convert_complex,
    ScalarKind.STRUCTURED: _convert_structured,
}


def convert_scalar(tp: Any, raw: str, field_name: str) -> Any:
    """Convert one form string to the declared type `tp`.

    An optional `tp` converts to its inner type; the result is always the
    converted value, never None. Raises `InvalidFieldTypeError` when `tp` is
    not bindable and `ParseFailedError` when `raw` does not convert.
    """

    shape = type_shape(tp)
    kind = scalar_kind(shape, field_name)
    if kind is ScalarKind.TEXT_DECODER:
        # Any failure inside a custom decoder is a failure to parse this field.
        try:
            return _convert_text_decoder(shape, raw)
        except Exception as exc:
            raise ParseFailedError(field_name, exc) from exc
    try:
        return _CONVERTERS[kind](shape, raw)
    except (ValueError, ArithmeticError) as exc:
        raise ParseFailedError(field_name, exc) from exc


def convert_list(tp: Any, raws: list[str], field_name: str) -> list[Any]:
    element_type = list_element_type(tp)
    return [convert_scalar(element_type, raw, field_name) for raw in raws]
