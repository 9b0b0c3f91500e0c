import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from host_registry.config import get_settings
from host_registry.db import HostStoreError
from host_registry.models.host import Host
from host_registry.services.host_repository import HostRepository

logger = logging.getLogger(__name__)


def is_expired(host: Host, now: datetime, stale_after_ms: float) -> bool:
    """
    Return True if the host was last written more than stale_after_ms
    milliseconds ago.

    Hosts without an updatedAt timestamp never expire. Naive timestamps are
    read as UTC.
    """
    updated_at = host.updated_at
    if updated_at is None:
        return False
    if updated_at.tzinfo is None:
        updated_at = updated_at.replace(tzinfo=timezone.utc)

    age_ms = (now - updated_at) / timedelta(milliseconds=1)
    return age_ms > stale_after_ms


def split_expired(
    hosts: List[Host],
    now: Optional[datetime] = None,
    stale_after_ms: Optional[float] = None,
) -> Tuple[List[Host], List[str]]:
    """
    Split a snapshot of hosts into (active hosts, ids of expired hosts).

    The active list is the input minus the expired ids, in input order. No
    further store access happens here; the caller decides what to do with the
    expired ids.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    if stale_after_ms is None:
        stale_after_ms = get_settings().host_stale_after_ms

    expired_ids = [host.id for host in hosts if is_expired(host, now, stale_after_ms)]
    active = [host for host in hosts if host.id not in expired_ids]
    return active, expired_ids


def discard_host(repository: HostRepository, host_id: str) -> None:
    """
    Best-effort delete of an expired host.

    Runs detached from the request that found the host expired. A failed
    delete is only logged: the host stays in the store and is swept again on
    a later listing.
    """
    try:
        repository.delete_by_id(host_id)
    except HostStoreError as exc:
        logger.debug("Ignoring failed delete of expired host %s: %s", host_id, exc)
    else:
        logger.debug("Deleted expired host %s", host_id)
