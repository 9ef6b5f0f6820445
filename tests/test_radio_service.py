"""Unit tests for the equipment inventory and its checkout transitions."""
import pytest

from radiotrack.errors import BadRequestError, ConflictError, NotFoundError
from radiotrack.schemas.checkout_log import CheckoutOperation
from radiotrack.schemas.radio import CommentKind, CommentRequest, RadioCreate, RadioUpsert
from radiotrack.services.radio_service import LedgerEvent, radio_sort_key, transition_checkout
import radiotrack.services.checkout_log_service as log_svc
import radiotrack.services.radio_service as svc


# ─── transition_checkout ─────────────────────────────────────────────────────

def test_transition_none_to_user_is_check_out():
    assert transition_checkout(None, "u1") == [LedgerEvent("u1", CheckoutOperation.check_out)]


def test_transition_user_to_none_is_check_in():
    assert transition_checkout("u1", None) == [LedgerEvent("u1", CheckoutOperation.check_in)]


def test_transition_unchanged_is_nothing():
    assert transition_checkout(None, None) == []
    assert transition_checkout("u1", "u1") == []


def test_transition_handover_checks_in_previous_holder_first():
    assert transition_checkout("u1", "u2") == [
        LedgerEvent("u1", CheckoutOperation.check_in),
        LedgerEvent("u2", CheckoutOperation.check_out),
    ]


def test_transition_empty_string_means_available():
    assert transition_checkout("", None) == []
    assert transition_checkout("u1", "") == [LedgerEvent("u1", CheckoutOperation.check_in)]


# ─── ordering ────────────────────────────────────────────────────────────────

def test_radio_sort_key_orders_numeric_then_model():
    ids = ["TR10", "2", "TR2", "BS1", "10", "1"]
    assert sorted(ids, key=radio_sort_key) == ["1", "2", "10", "BS1", "TR2", "TR10"]


def test_radio_sort_key_puts_free_form_ids_last():
    ids = ["TR-01", "SPARE", "TR2", "1"]
    assert sorted(ids, key=radio_sort_key) == ["1", "TR2", "SPARE", "TR-01"]


# ─── create / list / delete ──────────────────────────────────────────────────

def test_create_radio_defaults(store):
    svc.create_radio(store, RadioCreate(radio_id="R9", name="Handheld"))
    radios = svc.list_radios(store, radio_id="R9")
    assert len(radios) == 1
    radio = radios[0]
    assert radio.comments == ""
    assert radio.partially_damaged is False
    assert radio.nonfunctional is False
    assert radio.checked_out_user is None
    assert radio.checkout_date is None


def test_create_radio_duplicate_leaves_store_unchanged(store):
    svc.create_radio(store, RadioCreate(radio_id="R1", name="First"))
    before = store.load(svc.RADIOS)
    with pytest.raises(ConflictError):
        svc.create_radio(store, RadioCreate(radio_id="R1", name="Second"))
    assert store.load(svc.RADIOS) == before


def test_create_radio_requires_id_and_name(store):
    with pytest.raises(BadRequestError):
        svc.create_radio(store, RadioCreate(radio_id="R1"))
    with pytest.raises(BadRequestError):
        svc.create_radio(store, RadioCreate(name="No ID"))


def test_list_radios_rejects_both_filters(store):
    with pytest.raises(BadRequestError):
        svc.list_radios(store, radio_id="R1", user_id="u1")


def test_list_radios_by_user(store):
    svc.create_radio(store, RadioCreate(radio_id="R1", name="A"))
    svc.create_radio(store, RadioCreate(radio_id="R2", name="A"))
    svc.check_out(store, "R2", "u1")
    assert [r.radio_id for r in svc.list_radios(store, user_id="u1")] == ["R2"]


def test_delete_radio(store):
    svc.create_radio(store, RadioCreate(radio_id="R1", name="A"))
    svc.delete_radio(store, "R1")
    assert svc.list_radios(store) == []
    with pytest.raises(NotFoundError):
        svc.delete_radio(store, "R1")


def test_initialize_default_inventory_skips_existing(store):
    svc.create_radio(store, RadioCreate(radio_id="3", name="Custom"))
    created = svc.initialize_default_inventory(store, 5, "ICOM")
    assert [r.radio_id for r in created] == ["1", "2", "4", "5"]
    radios = svc.list_radios(store)
    assert [r.radio_id for r in radios] == ["1", "2", "3", "4", "5"]
    assert radios[2].name == "Custom"


# ─── upsert: condition flags ─────────────────────────────────────────────────

def test_upsert_creates_missing_radio(store):
    radio = svc.upsert_radio(store, RadioUpsert(radio_id="NEW1", comments="spare"))
    assert radio.name == "NEW1"
    assert svc.get_radio(store, "NEW1").comments == "spare"


def test_nonfunctional_clears_partially_damaged(store):
    svc.create_radio(store, RadioCreate(radio_id="R1", name="A"))
    svc.upsert_radio(store, RadioUpsert(radio_id="R1", partially_damaged=True))
    radio = svc.upsert_radio(store, RadioUpsert(radio_id="R1", nonfunctional=True))
    assert radio.nonfunctional is True
    assert radio.partially_damaged is False


def test_partially_damaged_ignored_while_nonfunctional(store):
    svc.create_radio(store, RadioCreate(radio_id="R1", name="A"))
    svc.upsert_radio(store, RadioUpsert(radio_id="R1", nonfunctional=True))
    radio = svc.upsert_radio(store, RadioUpsert(radio_id="R1", partially_damaged=True))
    assert radio.partially_damaged is False

    radio = svc.upsert_radio(store, RadioUpsert(radio_id="R1", nonfunctional=True, partially_damaged=True))
    assert radio.partially_damaged is False


def test_partially_damaged_honoured_when_nonfunctional_cleared(store):
    svc.create_radio(store, RadioCreate(radio_id="R1", name="A"))
    svc.upsert_radio(store, RadioUpsert(radio_id="R1", nonfunctional=True))
    radio = svc.upsert_radio(store, RadioUpsert(radio_id="R1", nonfunctional=False, partially_damaged=True))
    assert radio.nonfunctional is False
    assert radio.partially_damaged is True


def test_flags_never_both_true(store):
    svc.create_radio(store, RadioCreate(radio_id="R1", name="A"))
    updates = [
        {"partially_damaged": True},
        {"nonfunctional": True},
        {"partially_damaged": True},
        {"nonfunctional": False},
        {"partially_damaged": True, "nonfunctional": True},
        {"nonfunctional": False, "partially_damaged": True},
    ]
    for fields in updates:
        radio = svc.upsert_radio(store, RadioUpsert(radio_id="R1", **fields))
        assert not (radio.partially_damaged and radio.nonfunctional)


# ─── upsert: checkout state ──────────────────────────────────────────────────

def test_check_out_logs_single_entry(store):
    svc.create_radio(store, RadioCreate(radio_id="radioX", name="A"))
    radio = svc.upsert_radio(store, RadioUpsert(radio_id="radioX", checked_out_user="u1"))

    assert radio.checked_out_user == "u1"
    assert radio.checkout_date is not None
    entries = log_svc.query_entries(store)
    assert len(entries) == 1
    assert (entries[0].radio_id, entries[0].user_id, entries[0].operation) == (
        "radioX", "u1", CheckoutOperation.check_out,
    )


def test_check_in_logs_single_entry(store):
    svc.create_radio(store, RadioCreate(radio_id="radioX", name="A"))
    svc.upsert_radio(store, RadioUpsert(radio_id="radioX", checked_out_user="u1"))
    radio = svc.upsert_radio(store, RadioUpsert(radio_id="radioX", checked_out_user=None))

    assert radio.checked_out_user is None
    assert radio.checkout_date is None
    check_ins = [e for e in log_svc.query_entries(store) if e.operation == CheckoutOperation.check_in]
    assert len(check_ins) == 1
    assert (check_ins[0].radio_id, check_ins[0].user_id) == ("radioX", "u1")


def test_upsert_without_checkout_field_keeps_holder(store):
    svc.create_radio(store, RadioCreate(radio_id="R1", name="A"))
    checked_out = svc.upsert_radio(store, RadioUpsert(radio_id="R1", checked_out_user="u1"))
    radio = svc.upsert_radio(store, RadioUpsert(radio_id="R1", comments="scratched"))
    assert radio.checked_out_user == "u1"
    assert radio.checkout_date == checked_out.checkout_date
    assert len(log_svc.query_entries(store)) == 1


def test_checkout_date_null_iff_holder_null(store):
    svc.create_radio(store, RadioCreate(radio_id="R1", name="A"))
    sequence = [
        RadioUpsert(radio_id="R1", checkout_date="2024-07-01T10:00:00Z"),
        RadioUpsert(radio_id="R1", checked_out_user="u1"),
        RadioUpsert(radio_id="R1", checked_out_user="u2", checkout_date="2024-07-01T12:00:00Z"),
        RadioUpsert(radio_id="R1", checked_out_user=None, checkout_date="2024-07-01T12:00:00Z"),
        RadioUpsert(radio_id="R1", comments="x"),
    ]
    for update in sequence:
        radio = svc.upsert_radio(store, update)
        assert (radio.checkout_date is None) == (radio.checked_out_user is None)


def test_handover_logs_check_in_then_check_out(store):
    svc.create_radio(store, RadioCreate(radio_id="R1", name="A"))
    svc.upsert_radio(store, RadioUpsert(radio_id="R1", checked_out_user="u1"))
    svc.upsert_radio(store, RadioUpsert(radio_id="R1", checked_out_user="u2"))

    ops = [(e.user_id, e.operation) for e in log_svc.query_entries(store, radio_id="R1")]
    assert ops == [
        ("u1", CheckoutOperation.check_out),
        ("u1", CheckoutOperation.check_in),
        ("u2", CheckoutOperation.check_out),
    ]


def test_check_out_refuses_held_radio_unless_forced(store):
    svc.create_radio(store, RadioCreate(radio_id="R1", name="A"))
    svc.check_out(store, "R1", "u1")
    with pytest.raises(ConflictError):
        svc.check_out(store, "R1", "u2")
    assert svc.get_radio(store, "R1").checked_out_user == "u1"

    radio = svc.check_out(store, "R1", "u2", force=True)
    assert radio.checked_out_user == "u2"


def test_check_out_unknown_radio(store):
    with pytest.raises(NotFoundError):
        svc.check_out(store, "missing", "u1")


def test_check_in_available_radio_logs_nothing(store):
    svc.create_radio(store, RadioCreate(radio_id="R1", name="A"))
    svc.check_in(store, "R1")
    assert log_svc.query_entries(store) == []


# ─── comments ────────────────────────────────────────────────────────────────

def test_append_comment_keeps_previous_notes(store):
    svc.create_radio(store, RadioCreate(radio_id="R1", name="A"))
    svc.append_comment(store, "R1", CommentRequest(author="Sam", comment="Battery weak"))
    radio = svc.append_comment(store, "R1", CommentRequest(author="Alex", comment="Replaced battery"))

    lines = radio.comments.split("\n")
    assert len(lines) == 2
    assert lines[0].endswith("by Sam] Battery weak")
    assert lines[1].endswith("by Alex] Replaced battery")


def test_damage_report_sets_flag(store):
    svc.create_radio(store, RadioCreate(radio_id="R1", name="A"))
    radio = svc.append_comment(store, "R1", CommentRequest(author="Sam", comment="Cracked", kind=CommentKind.damage))
    assert "Damage Report: Cracked" in radio.comments
    assert radio.partially_damaged is True

    radio = svc.append_comment(store, "R1", CommentRequest(
        author="Sam", comment="Dead", kind=CommentKind.nonfunctional,
    ))
    assert "Nonfunctional Report: Dead" in radio.comments
    assert radio.nonfunctional is True
    assert radio.partially_damaged is False
