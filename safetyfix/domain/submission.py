from __future__ import annotations

import datetime as dt
from dataclasses import astuple, dataclass
from typing import Any, Mapping

# Columns a caller may supply on create, in insert order.
SUBMISSION_COLUMNS: tuple[str, ...] = (
    "shopName",
    "phoneNumber",
    "dropOffType",
    "vehicleYear",
    "vehicleMake",
    "vehicleModel",
    "vehicleIssueDescription",
    "moduleCount",
    "singleStageCount",
    "dualStageCount",
    "threeStageCount",
    "buckleCount",
)

BOOL_COLUMNS: tuple[str, ...] = ("isDone", "isPrinted")

# status flag -> paired timestamp column
STATUS_TIMESTAMPS: dict[str, str] = {
    "isDone": "doneAt",
    "isPrinted": "printedAt",
}


@dataclass(frozen=True)
class SubmissionFields:
    """Caller-supplied part of a submission. Anything left as None is stored as NULL."""

    shopName: str | None = None
    phoneNumber: str | None = None
    dropOffType: str | None = None
    vehicleYear: int | None = None
    vehicleMake: str | None = None
    vehicleModel: str | None = None
    vehicleIssueDescription: str | None = None
    moduleCount: int | None = None
    singleStageCount: int | None = None
    dualStageCount: int | None = None
    threeStageCount: int | None = None
    buckleCount: int | None = None

    def values(self) -> tuple[Any, ...]:
        return astuple(self)




def utc_now_iso(now: dt.datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T09:30:00.123Z."""
    ts = now or dt.datetime.now(dt.timezone.utc)
    return ts.astimezone(dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


class StatusUpdate:
    """
    Accumulates (column, value) pairs for a partial status update and emits a
    single parameterized UPDATE statement.

    Setting a flag always writes its timestamp too: true -> now, false -> NULL.
    Re-setting a flag to true refreshes the timestamp.
    """

    def __init__(self, now: str | None = None):
        self._now = now
        self._pairs: list[tuple[str, Any]] = []

    def set_flag(self, column: str, value: bool | None) -> "StatusUpdate":
        if value is None:
            return self
        if column not in STATUS_TIMESTAMPS:
            raise KeyError(f"not a status column: {column}")
        flag = bool(value)
        self._pairs.append((column, 1 if flag else 0))
        self._pairs.append((STATUS_TIMESTAMPS[column], (self._now or utc_now_iso()) if flag else None))
        return self

    @property
    def pairs(self) -> list[tuple[str, Any]]:
        return list(self._pairs)

    def is_empty(self) -> bool:
        return not self._pairs

    def build(self, submission_id: int) -> tuple[str, list[Any]]:
        if self.is_empty():
            raise ValueError("no fields to update")
        assignments = ", ".join(f"{col} = ?" for col, _ in self._pairs)
        params = [v for _, v in self._pairs]
        params.append(submission_id)
        return f"UPDATE submissions SET {assignments} WHERE id = ?", params


def row_to_dict(row: Mapping[str, Any]) -> dict[str, Any]:
    out = dict(row)
    for col in BOOL_COLUMNS:
        if col in out and out[col] is not None:
            out[col] = bool(out[col])
    return out
