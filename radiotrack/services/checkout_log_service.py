import logging
from datetime import datetime, timezone

from radiotrack.errors import BadRequestError
from radiotrack.schemas.checkout_log import ArchiveInfo, CheckoutLogEntry, CheckoutOperation
from radiotrack.services.concurrency import run_with_retry
from radiotrack.storage import RecordStore, snapshot_name

logger = logging.getLogger(__name__)

CHECKOUT_LOG = "checkout-log"
ARCHIVE_FOLDER = "checkout-log-archives"


def append_entry(
    store: RecordStore,
    radio_id: str | None,
    user_id: str | None,
    operation: str | CheckoutOperation | None,
) -> CheckoutLogEntry:
    if not radio_id or not user_id or not operation:
        raise BadRequestError("Missing required fields")
    try:
        operation = CheckoutOperation(operation)
    except ValueError:
        raise BadRequestError(f"Unknown operation '{operation}'")

    entry = CheckoutLogEntry(
        radio_id=radio_id,
        user_id=user_id,
        operation=operation,
        date=datetime.now(timezone.utc),
    )
    record = entry.model_dump(by_alias=True, mode="json")

    def _append():
        with store.locked(CHECKOUT_LOG):
            snap = store.load(CHECKOUT_LOG)
            store.save(CHECKOUT_LOG, [*snap.records, record], expected_version=snap.version)

    run_with_retry(_append)
    logger.info(f"AUDIT: {operation.value} radio '{radio_id}' user '{user_id}'")
    return entry


def query_entries(store: RecordStore, radio_id: str | None = None, user_id: str | None = None) -> list[CheckoutLogEntry]:
    """Entries in arrival order; the filters are combined (both must match)."""
    entries = [CheckoutLogEntry.model_validate(r) for r in store.load(CHECKOUT_LOG).records]
    if radio_id:
        entries = [e for e in entries if e.radio_id == radio_id]
    if user_id:
        entries = [e for e in entries if e.user_id == user_id]
    return entries


def archive_and_clear(store: RecordStore) -> ArchiveInfo:
    """Copy the live log to a timestamped snapshot, then empty it."""
    with store.locked(CHECKOUT_LOG):
        snap = store.load(CHECKOUT_LOG)
        name = snapshot_name(store, ARCHIVE_FOLDER, CHECKOUT_LOG)
        store.save(name, snap.records)
        store.save(CHECKOUT_LOG, [], expected_version=snap.version)
    logger.info(f"AUDIT: archived {len(snap.records)} checkout log entries to '{name}'")
    return ArchiveInfo(name=name, entries=len(snap.records))


def list_archives(store: RecordStore) -> list[ArchiveInfo]:
    return [
        ArchiveInfo(name=name, entries=len(store.load(name).records))
        for name in store.list_collections(f"{ARCHIVE_FOLDER}/")
    ]
