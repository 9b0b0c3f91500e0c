import logging

from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from host_registry import db

logger = logging.getLogger(__name__)

router = APIRouter()


def _ping_database() -> None:
    try:
        db.connect().command("ping")
    except PyMongoError as exc:
        raise db.HostStoreError(f"MongoDB ping failed: {exc}") from exc


@router.get("", summary="Service health")
async def health() -> JSONResponse:
    """
    Report whether the service can reach its document store.

    Returns 200 when a ping to MongoDB succeeds and 503 Service Unavailable
    otherwise.
    """
    try:
        await run_in_threadpool(_ping_database)
    except db.HostStoreError as exc:
        logger.warning("Health check failed: %s", exc)
        return JSONResponse(
            {"status": "degraded", "database": "down"},
            status_code=503,
        )

    return JSONResponse({"status": "ok", "database": "up"})
