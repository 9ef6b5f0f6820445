import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone

from radiotrack.errors import BadRequestError, ConflictError, NotFoundError
from radiotrack.schemas.checkout_log import CheckoutOperation
from radiotrack.schemas.radio import CommentKind, CommentRequest, Radio, RadioCreate, RadioUpsert
from radiotrack.storage import RecordStore
import radiotrack.services.checkout_log_service as checkout_log

logger = logging.getLogger(__name__)

RADIOS = "radios"

# Radio IDs are "<model><index>", e.g. "TR01"; the model may be blank
_RADIO_ID_RE = re.compile(r"^([a-zA-Z]*)(\d+)$")

_COMMENT_PREFIXES = {
    CommentKind.damage: "Damage Report: ",
    CommentKind.nonfunctional: "Nonfunctional Report: ",
}


@dataclass(frozen=True)
class LedgerEvent:
    user_id: str
    operation: CheckoutOperation


def transition_checkout(old_user: str | None, new_user: str | None) -> list[LedgerEvent]:
    """Ledger events implied by changing a radio's holder from `old_user` to `new_user`.

    A direct hand-over from one holder to another yields a check-in for the
    previous holder followed by a check-out for the new one.
    """
    old_user = old_user or None
    new_user = new_user or None
    if old_user == new_user:
        return []
    events = []
    if old_user is not None:
        events.append(LedgerEvent(old_user, CheckoutOperation.check_in))
    if new_user is not None:
        events.append(LedgerEvent(new_user, CheckoutOperation.check_out))
    return events


def radio_sort_key(radio_id: str) -> tuple:
    """Blank-model IDs first, then by model alphabetically, then by numeric index.

    IDs that are not "<model><index>" go last, in plain string order.
    """
    match = _RADIO_ID_RE.match(radio_id)
    if match is None:
        return (True, False, "", "", 0, radio_id)
    model, index = match.groups()
    return (False, model != "", model.lower(), model, int(index), radio_id)


def _load(store: RecordStore) -> tuple[list[Radio], str]:
    snap = store.load(RADIOS)
    return [Radio.model_validate(r) for r in snap.records], snap.version


def _save(store: RecordStore, radios: list[Radio], version: str) -> None:
    store.save(RADIOS, [r.model_dump(by_alias=True, mode="json") for r in radios], expected_version=version)


def _index_of(radios: list[Radio], radio_id: str) -> int | None:
    return next((i for i, r in enumerate(radios) if r.radio_id == radio_id), None)


def list_radios(store: RecordStore, radio_id: str | None = None, user_id: str | None = None) -> list[Radio]:
    if radio_id and user_id:
        raise BadRequestError("Filter by radioID or by userID, not both")
    radios, _ = _load(store)
    if radio_id:
        radios = [r for r in radios if r.radio_id == radio_id]
    elif user_id:
        radios = [r for r in radios if r.checked_out_user == user_id]
    return sorted(radios, key=lambda r: radio_sort_key(r.radio_id))


def get_radio(store: RecordStore, radio_id: str) -> Radio:
    radios, _ = _load(store)
    idx = _index_of(radios, radio_id)
    if idx is None:
        raise NotFoundError("Radio not found.")
    return radios[idx]


def create_radio(store: RecordStore, data: RadioCreate) -> Radio:
    radio_id = (data.radio_id or "").strip()
    name = (data.name or "").strip()
    if not radio_id or not name:
        raise BadRequestError("ID and Name are required.")
    with store.locked(RADIOS):
        radios, version = _load(store)
        if _index_of(radios, radio_id) is not None:
            raise ConflictError("A radio with this ID already exists.")
        radio = Radio(radio_id=radio_id, name=name)
        radios.append(radio)
        _save(store, radios, version)
    logger.info(f"Radio '{radio_id}' ({name}) added")
    return radio


def _apply_update(radio: Radio, data: RadioUpsert, now: datetime) -> Radio:
    fields = data.model_fields_set
    changes = {}
    if "name" in fields and data.name:
        changes["name"] = data.name
    if "comments" in fields and data.comments is not None:
        changes["comments"] = data.comments

    nonfunctional = radio.nonfunctional
    if "nonfunctional" in fields and data.nonfunctional is not None:
        nonfunctional = data.nonfunctional
    partially_damaged = radio.partially_damaged
    if nonfunctional:
        partially_damaged = False
    elif "partially_damaged" in fields and data.partially_damaged is not None:
        partially_damaged = data.partially_damaged
    changes["nonfunctional"] = nonfunctional
    changes["partially_damaged"] = partially_damaged

    holder = radio.checked_out_user
    if "checked_out_user" in fields:
        holder = data.checked_out_user or None
    checkout_date = radio.checkout_date
    if holder is None:
        checkout_date = None
    elif "checkout_date" in fields and data.checkout_date is not None:
        checkout_date = data.checkout_date
    elif holder != radio.checked_out_user or checkout_date is None:
        checkout_date = now
    changes["checked_out_user"] = holder
    changes["checkout_date"] = checkout_date

    return radio.model_copy(update=changes)


def upsert_radio(store: RecordStore, data: RadioUpsert) -> Radio:
    """Create the radio if it does not exist, then apply the supplied fields.

    Checkout state changes are written to the checkout log before the radio
    itself is saved. The two writes are independent.
    """
    radio_id = (data.radio_id or "").strip()
    if not radio_id:
        raise BadRequestError("ID is required.")
    with store.locked(RADIOS):
        radios, version = _load(store)
        idx = _index_of(radios, radio_id)
        if idx is None:
            radios.append(Radio(radio_id=radio_id, name=(data.name or "").strip() or radio_id))
            idx = len(radios) - 1
            logger.info(f"Radio '{radio_id}' added by upsert")
        current = radios[idx]
        updated = _apply_update(current, data, datetime.now(timezone.utc))

        for event in transition_checkout(current.checked_out_user, updated.checked_out_user):
            checkout_log.append_entry(store, radio_id, event.user_id, event.operation)

        radios[idx] = updated
        _save(store, radios, version)
    return updated


def check_out(store: RecordStore, radio_id: str, user_id: str, force: bool = False) -> Radio:
    if not user_id:
        raise BadRequestError("userID is required.")
    with store.locked(RADIOS):
        radio = get_radio(store, radio_id)
        if radio.checked_out_user and not force:
            raise ConflictError("Radio is already checked out.")
        return upsert_radio(store, RadioUpsert(radio_id=radio_id, checked_out_user=user_id))


def check_in(store: RecordStore, radio_id: str) -> Radio:
    with store.locked(RADIOS):
        get_radio(store, radio_id)
        return upsert_radio(store, RadioUpsert(radio_id=radio_id, checked_out_user=None))


def append_comment(store: RecordStore, radio_id: str, data: CommentRequest) -> Radio:
    """Append a timestamped note to the radio's comments; reports also set the condition flag."""
    with store.locked(RADIOS):
        radio = get_radio(store, radio_id)
        timestamp = datetime.now().strftime("%m/%d/%Y, %I:%M:%S %p")
        line = f"[{timestamp} by {data.author}] {_COMMENT_PREFIXES.get(data.kind, '')}{data.comment}"
        fields = {"comments": f"{radio.comments}\n{line}" if radio.comments else line}
        if data.kind == CommentKind.damage:
            fields["partially_damaged"] = True
        elif data.kind == CommentKind.nonfunctional:
            fields["nonfunctional"] = True
        return upsert_radio(store, RadioUpsert(radio_id=radio_id, **fields))


def delete_radio(store: RecordStore, radio_id: str) -> Radio:
    with store.locked(RADIOS):
        radios, version = _load(store)
        idx = _index_of(radios, radio_id)
        if idx is None:
            raise NotFoundError("Radio not found.")
        radio = radios.pop(idx)
        _save(store, radios, version)
    logger.info(f"Radio '{radio_id}' deleted")
    return radio


def initialize_default_inventory(store: RecordStore, size: int, name: str) -> list[Radio]:
    """Create radios "1".."size" named `name`; IDs that already exist are left alone."""
    with store.locked(RADIOS):
        radios, version = _load(store)
        existing = {r.radio_id for r in radios}
        created = [Radio(radio_id=str(i), name=name) for i in range(1, size + 1) if str(i) not in existing]
        if created:
            radios.extend(created)
            _save(store, radios, version)
    logger.info(f"Default inventory initialized: {len(created)} radios created")
    return created
