"""Schema of the serialized task collection.

The whole collection is stored as one JSON array of task records. Anything
that does not match these models is rejected instead of being loaded.
"""
from __future__ import annotations

from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    StrictBool,
    StrictStr,
    StringConstraints,
    model_validator,
)

from task_tracker.domain.enums import Priority

# Ids are opaque and kept verbatim; only the user-entered text fields are trimmed.
TrimmedText = Annotated[StrictStr, StringConstraints(strip_whitespace=True, min_length=1)]


class TaskRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: StrictStr = Field(min_length=1)
    title: TrimmedText
    deadline: TrimmedText
    priority: Priority
    completed: StrictBool


class TaskCollection(RootModel[list[TaskRecord]]):
    @model_validator(mode="after")
    def check_unique_ids(self) -> "TaskCollection":
        seen: set[str] = set()
        for record in self.root:
            if record.id in seen:
                raise ValueError(f"duplicate task id {record.id!r}")
            seen.add(record.id)
        return self
