from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, TypeVar

from fastapi import HTTPException, Request

from formbind.binder import convert
from formbind.binder_config import BinderConfig, load_binder_config
from formbind.errors import BindingError, ParseFailedError
from formbind.form_models import Form

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


def bind_form_data(form: Form, record_type: type[RecordT], config: BinderConfig | None = None) -> RecordT:
    """Instantiate `record_type` with its defaults and bind `form` into it.

    Every field of `record_type` needs a default; a record that cannot be
    built without arguments is a server-side fault.

    Bad input raises a 400 `HTTPException`, a record the binder cannot handle
    raises a 500.
    """

    try:
        destination = record_type()
    except (TypeError, ValueError) as exc:
        logger.error("Cannot instantiate %s for form binding: %s", record_type.__name__, exc)
        raise HTTPException(
            status_code=500,
            detail={"status": "error", "message": f"cannot instantiate {record_type.__name__}: {exc}", "field": None},
        ) from exc

    try:
        convert(form, destination, config=config or load_binder_config())
    except ParseFailedError as exc:
        logger.warning("Form field %s rejected: %s", exc.field, exc.cause)
        raise HTTPException(
            status_code=400,
            detail={"status": "error", "message": str(exc), "field": exc.field},
        ) from exc
    except BindingError as exc:
        logger.error("Cannot bind form into %s: %s", record_type.__name__, exc)
        raise HTTPException(
            status_code=500,
            detail={"status": "error", "message": str(exc), "field": getattr(exc, "field", None)},
        ) from exc
    return destination


def form_dependency(
    record_type: type[RecordT],
    *,
    config: BinderConfig | None = None,
) -> Callable[[Request], Awaitable[Any]]:
    async def _dependency(request: Request) -> RecordT:
        form_data = await request.form()
        return bind_form_data(Form.from_form_data(form_data), record_type, config)

    _dependency.__name__ = f"bind_{record_type.__name__.lower()}_form"
    return _dependency
