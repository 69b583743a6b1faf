from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO

from starlette.datastructures import FormData, UploadFile


@dataclass(frozen=True)
class FileMeta:
    """Metadata of one uploaded file.

    `content` is the handle to the uploaded bytes as produced by the form
    layer. The binder copies or references FileMeta values but never reads
    or mutates them.
    """

    filename: str = ""
    size: int = 0
    content_type: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    content: BinaryIO | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_upload(cls, upload: UploadFile) -> FileMeta:
        return cls(
            filename=upload.filename or "",
            size=upload.size or 0,
            content_type=upload.content_type,
            headers=dict(upload.headers.items()),
            content=upload.file,
        )


@dataclass
class Form:
    """A decoded multipart submission: text values and file metadata per key."""

    values: dict[str, list[str]] = field(default_factory=dict)
    files: dict[str, list[FileMeta]] = field(default_factory=dict)

    def get_values(self, key: str) -> list[str]:
        return self.values.get(key) or []

    def get_files(self, key: str) -> list[FileMeta]:
        return self.files.get(key) or []

    @classmethod
    def from_form_data(cls, form_data: FormData) -> Form:
        values: dict[str, list[str]] = {}
        files: dict[str, list[FileMeta]] = {}
        for key, item in form_data.multi_items():
            if isinstance(item, UploadFile):
                files.setdefault(key, []).append(FileMeta.from_upload(item))
            else:
                values.setdefault(key, []).append(item)
        return cls(values=values, files=files)
