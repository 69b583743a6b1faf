from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

from formbind.field_descriptors import DEFAULT_TAG_NAME


class DuplicatePolicy(str, Enum):
    """Which entry a single-valued field takes when its key repeats."""

    FIRST = "first"
    FIRST_NON_EMPTY = "first_non_empty"


@dataclass(frozen=True)
class BinderConfig:
    tag_name: str = DEFAULT_TAG_NAME
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.FIRST

    def pick_value(self, values: list[str]) -> str:
        if self.duplicate_policy is DuplicatePolicy.FIRST_NON_EMPTY:
            return next((value for value in values if value), values[0])
        return values[0]

    def to_dict(self) -> dict:
        return {"tag_name": self.tag_name, "duplicate_policy": self.duplicate_policy.value}


def list_duplicate_policies() -> list[str]:
    return [policy.value for policy in DuplicatePolicy]


def load_binder_config() -> BinderConfig:
    tag_name = (os.getenv("FORMBIND_TAG_NAME") or "").strip() or DEFAULT_TAG_NAME
    selected = (os.getenv("FORMBIND_DUPLICATE_POLICY") or "").strip().lower() or DuplicatePolicy.FIRST.value

    try:
        policy = DuplicatePolicy(selected)
    except ValueError:
        raise ValueError(
            f"Unknown duplicate policy '{selected}'. "
            f"Available policies: {', '.join(list_duplicate_policies())}."
        ) from None
    return BinderConfig(tag_name=tag_name, duplicate_policy=policy)
