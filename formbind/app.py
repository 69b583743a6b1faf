from __future__ import annotations

from dataclasses import dataclass, field

from fastapi import Depends, FastAPI

from formbind.binder_config import load_binder_config
from formbind.fastapi_binding import form_dependency
from formbind.field_descriptors import form_key
from formbind.form_models import FileMeta

app = FastAPI(title="Form Binding API")


@dataclass
class SubmissionForm:
    name: str = field(default="", metadata=form_key("name"))
    age: int = field(default=0, metadata=form_key("age"))
    hobbies: list[str] = field(default_factory=list, metadata=form_key("hobbies"))
    file: FileMeta | None = field(default=None, metadata=form_key("file"))
    attachments: list[FileMeta] = field(default_factory=list, metadata=form_key("attachments"))


def _file_summary(meta: FileMeta) -> dict:
    return {"filename": meta.filename, "size": meta.size, "content_type": meta.content_type}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/config")
def binder_config():
    return load_binder_config().to_dict()


@app.post("/submit")
def submit(submission: SubmissionForm = Depends(form_dependency(SubmissionForm))):
    return {
        "status": "success",
        "submission": {
            "name": submission.name,
            "age": submission.age,
            "hobbies": submission.hobbies,
            "file": _file_summary(submission.file) if submission.file else None,
            "attachments": [_file_summary(meta) for meta in submission.attachments],
        },
    }
