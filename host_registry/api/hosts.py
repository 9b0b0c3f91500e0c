import json
import logging
from typing import List, Union

from fastapi import APIRouter, BackgroundTasks, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from host_registry.db import HostStoreError
from host_registry.models.host import Host
from host_registry.services import host_repository, host_sweeper

logger = logging.getLogger(__name__)

router = APIRouter()

_JSON_ERROR = {"content": {"application/json": {}}}
_TEXT_ERROR = {"content": {"text/plain": {}}}


def _bad_request() -> JSONResponse:
    return JSONResponse({"body": "Body must be JSON."}, status_code=400)


def _store_failure(exc: HostStoreError, message: str) -> Response:
    # Error detail stays in the log; the client gets a generic JSON message sent as text/plain
    return Response(
        content=json.dumps({"body": message}),
        status_code=exc.status_code or 500,
        media_type="text/plain",
    )


def _declares_json(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.lower().startswith("application/json")


@router.post(
    "",
    response_model=Host,
    response_model_exclude_unset=True,
    summary="Register a host",
    responses={400: _JSON_ERROR, 500: _TEXT_ERROR},
)
async def create_host(request: Request) -> Union[Host, Response]:
    """
    Store the JSON request body as a new host document.

    The body must be sent with an application/json content type and be a JSON
    object; otherwise a 400 is returned without touching the database. Store
    failures are answered with the error's status code (default 500).
    """
    if not _declares_json(request):
        return _bad_request()

    try:
        payload = await request.json()
    except ValueError:
        return _bad_request()
    if not isinstance(payload, dict):
        return _bad_request()

    try:
        repository = host_repository.get_host_repository()
        host = await run_in_threadpool(repository.create, payload)
    except HostStoreError as exc:
        logger.warning("Could not create host: %s", exc)
        return _store_failure(exc, "Could not create the host.")

    logger.info("Created host %s: %s", host.id, host.model_dump(by_alias=True))
    return host


@router.get(
    "",
    response_model=List[Host],
    response_model_exclude_unset=True,
    summary="List active hosts",
    responses={500: _TEXT_ERROR},
)
async def list_hosts(
    background_tasks: BackgroundTasks,
) -> Union[List[Host], Response]:
    """
    Return all hosts that are not expired.

    Expired hosts are left out of the response and deleted in the background
    after the response is sent; a failing delete is ignored. The response is
    built from the single snapshot read here, not from a second query.
    """
    try:
        repository = host_repository.get_host_repository()
        hosts = await run_in_threadpool(repository.find_all)
    except HostStoreError as exc:
        logger.warning("Could not fetch hosts: %s", exc)
        return _store_failure(exc, "Could not fetch the hosts.")

    active, expired_ids = host_sweeper.split_expired(hosts)
    for host_id in expired_ids:
        background_tasks.add_task(host_sweeper.discard_host, repository, host_id)

    if expired_ids:
        logger.info("Sweeping %d expired host(s)", len(expired_ids))
    return active
