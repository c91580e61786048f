from __future__ import annotations

import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, field_validator

from ..auth import require_user
from ..domain.submission import SubmissionFields
from ..errors import AppError, BadRequestError, NotFoundError, StorageError
from ..logs import LogContext
from ..services.submission_svc import create_submission, list_submissions, update_submission_status

logger = logging.getLogger(__name__)

router = APIRouter()

TEXT_FIELDS = (
    "customerName", "shopName", "phoneNumber", "dropOffType",
    "vehicleMake", "vehicleModel", "vehicleIssueDescription",
)
INT_FIELDS = (
    "vehicleYear", "moduleCount", "singleStageCount",
    "dualStageCount", "threeStageCount", "buckleCount",
)


def _text_or_none(v: Any) -> str | None:
    if v is None or isinstance(v, str):
        return v
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return None


def _int_or_none(v: Any) -> int | None:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        return int(v) if v.is_integer() else None
    if isinstance(v, str):
        try:
            return int(v.strip())
        except ValueError:
            return None
    return None


class SubmissionCreate(BaseModel):
    """Intake form payload. Every field is optional and malformed values become None."""

    customerName: Optional[str] = None
    shopName: Optional[str] = None
    phoneNumber: Optional[str] = None
    dropOffType: Optional[str] = None
    vehicleYear: Optional[int] = None
    vehicleMake: Optional[str] = None
    vehicleModel: Optional[str] = None
    vehicleIssueDescription: Optional[str] = None
    moduleCount: Optional[int] = None
    singleStageCount: Optional[int] = None
    dualStageCount: Optional[int] = None
    threeStageCount: Optional[int] = None
    buckleCount: Optional[int] = None

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def _coerce_text(cls, v):
        return _text_or_none(v)

    @field_validator(*INT_FIELDS, mode="before")
    @classmethod
    def _coerce_int(cls, v):
        return _int_or_none(v)

    def to_fields(self) -> SubmissionFields:
        # the form's customerName is stored in the shopName column
        shop = self.customerName if self.customerName is not None else self.shopName
        return SubmissionFields(
            shopName=shop,
            phoneNumber=self.phoneNumber,
            dropOffType=self.dropOffType,
            vehicleYear=self.vehicleYear,
            vehicleMake=self.vehicleMake,
            vehicleModel=self.vehicleModel,
            vehicleIssueDescription=self.vehicleIssueDescription,
            moduleCount=self.moduleCount,
            singleStageCount=self.singleStageCount,
            dualStageCount=self.dualStageCount,
            threeStageCount=self.threeStageCount,
            buckleCount=self.buckleCount,
        )


class StatusUpdateBody(BaseModel):
    isDone: Optional[bool] = None
    isPrinted: Optional[bool] = None


FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_submission_body(request: Request) -> SubmissionCreate:
    """Accept the intake payload as JSON or as a posted HTML form."""
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        data: Any = {k: v for k, v in form.items() if isinstance(v, str)}
    else:
        raw = await request.body()
        if not raw.strip():
            return SubmissionCreate()
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise BadRequestError(f"unparseable submission body: {e}") from e
        if not isinstance(data, dict):
            raise BadRequestError(f"submission body must be an object, got {type(data).__name__}")
    return SubmissionCreate.model_validate(data)


@router.post("/api/submit", status_code=201)
def api_submit(body: SubmissionCreate = Depends(read_submission_body)):
    log = LogContext("CREATE_SUBMISSION")
    log.set_payload(body.model_dump(exclude_none=True))
    try:
        new_id = create_submission(body.to_fields(), log)
        log.write("OK")
        return {"message": "Form submitted successfully!", "id": new_id}
    except AppError as e:
        log.write("ERROR", str(e))
        raise
    except Exception as e:
        logger.exception("Error inserting data")
        log.write("ERROR", "internal error")
        raise StorageError(str(e), public_message="Failed to submit form.") from e


@router.get("/api/submissions")
def api_submissions(showAll: Optional[str] = None, user: str = Depends(require_user)):
    try:
        return list_submissions(include_completed=(showAll == "true"))
    except AppError:
        raise
    except Exception as e:
        logger.exception("Error fetching submissions")
        raise StorageError(str(e), public_message="Could not retrieve submissions.") from e


@router.post("/api/submissions/{submission_id}/status")
def api_submission_status(
    submission_id: int,
    body: Optional[StatusUpdateBody] = None,
    user: str = Depends(require_user),
):
    body = body or StatusUpdateBody()
    log = LogContext("UPDATE_SUBMISSION_STATUS", user=user)
    log.set_payload(body.model_dump(exclude_none=True))
    try:
        changed = update_submission_status(submission_id, body.isDone, body.isPrinted, log)
        if changed == 0:
            raise NotFoundError(f"no submission with ID {submission_id}")
        log.write("OK")
        return {"message": "Status updated successfully."}
    except AppError as e:
        log.write("ERROR", str(e))
        raise
    except Exception as e:
        logger.exception("Error updating status for ID %s", submission_id)
        log.write("ERROR", "internal error")
        raise StorageError(str(e), public_message="Failed to update status.") from e
