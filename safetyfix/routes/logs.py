from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from ..auth import require_user
from ..errors import StorageError
from ..logs import search_logs

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/logs/search")
def api_logs_search(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=200),
    action: str | None = None,
    query: str | None = None,
    ts_from: str | None = None,
    ts_to: str | None = None,
    user: str = Depends(require_user),
):
    try:
        total, items = search_logs(query, action, ts_from, ts_to, page, size)
    except Exception as e:
        logger.exception("Error searching operation log")
        raise StorageError(str(e), public_message="Could not retrieve operation log.") from e
    return {"total": total, "items": items}
