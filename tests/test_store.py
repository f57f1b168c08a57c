"""Tests for the appointment store and its derived transactions."""
import pytest

from cronos import storage
from cronos.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from cronos.repositories import Repositories
from cronos.schemas import (
    AppointmentStatus, PaymentMethod, PaymentStatus, TransactionStatus, TransactionType,
)
from cronos.storage import MemoryPersistence
from cronos.store import AppointmentStore
from tests.conftest import FIXED_NOW


class FailingTransactionsPersistence(MemoryPersistence):
    """Memory backend that refuses to write the transactions collection."""

    def store_all(self, collection, records):
        if collection == storage.TRANSACTIONS:
            raise PersistenceError("disk full")
        super().store_all(collection, records)


class BrokenTransactionsPersistence(MemoryPersistence):
    def store_all(self, collection, records):
        if collection == storage.TRANSACTIONS:
            raise RuntimeError("driver crashed")
        super().store_all(collection, records)


class TestSave:

    def test_saves_and_lists(self, store, make_appt):
        result = store.save(make_appt("a", "09:00", "10:00"))

        assert result.appointment.id == "a"
        assert result.warnings == []
        assert [a.id for a in store.list()] == ["a"]

    def test_rejects_end_before_start(self, store, make_appt):
        with pytest.raises(ValidationError):
            store.save(make_appt("a", "10:00", "09:00"))

    def test_rejects_empty_interval(self, store, make_appt):
        with pytest.raises(ValidationError):
            store.save(make_appt("a", "10:00", "10:00"))

    def test_overlap_with_same_provider_conflicts(self, store, make_appt):
        store.save(make_appt("a", "09:00", "10:00", provider_id="p1"))

        with pytest.raises(ConflictError) as exc:
            store.save(make_appt("b", "09:30", "10:30", provider_id="p1"))

        assert exc.value.conflicting_ids == ["a"]
        assert [a.id for a in store.list()] == ["a"]

    def test_overlap_with_other_provider_is_allowed(self, store, make_appt):
        store.save(make_appt("a", "09:00", "10:00", provider_id="p1"))
        store.save(make_appt("b", "09:00", "10:00", provider_id="p2"))

        assert len(store.list()) == 2

    def test_touching_appointments_are_allowed(self, store, make_appt):
        store.save(make_appt("a", "09:00", "10:00"))
        store.save(make_appt("b", "10:00", "11:00"))

        assert len(store.list()) == 2

    def test_cancelled_slot_can_be_rebooked(self, store, make_appt):
        a = make_appt("a", "09:00", "10:00")
        store.save(a)
        a.status = AppointmentStatus.cancelled
        store.save(a)

        store.save(make_appt("b", "09:30", "10:30"))

        assert {x.id for x in store.list()} == {"a", "b"}

    def test_resaving_same_slot_is_allowed(self, store, make_appt):
        store.save(make_appt("a", "09:00", "10:00", provider_id="p1"))
        store.save(make_appt("a", "09:00", "10:00", provider_id="p1", notes="edited"))

        appts = store.list()
        assert len(appts) == 1
        assert appts[0].notes == "edited"

    def test_editing_into_another_booking_conflicts(self, store, make_appt):
        store.save(make_appt("a", "09:00", "10:00"))
        store.save(make_appt("b", "10:00", "11:00"))

        with pytest.raises(ConflictError):
            store.save(make_appt("b", "09:30", "10:30"))


class TestDerivedTransaction:

    def test_first_paid_save_creates_one_transaction(self, store, repos, make_appt):
        appt = make_appt(
            "a", "09:00", "10:00", provider_id="p1",
            payment_status=PaymentStatus.paid, price=50,
        )

        result = store.save(appt)
        store.save(appt)

        txs = repos.transactions.list()
        assert len(txs) == 1
        tx = txs[0]
        assert result.transaction == tx
        assert tx.type == TransactionType.income
        assert tx.status == TransactionStatus.paid
        assert tx.amount == 50
        assert tx.related_appointment_id == "a"
        assert tx.provider_id == "p1"
        assert tx.date == FIXED_NOW
        assert tx.description == "Agendamento: Corte"

    def test_default_payment_method_is_money(self, store, repos, make_appt):
        store.save(make_appt("a", "09:00", "10:00", payment_status=PaymentStatus.paid, price=30))

        assert repos.transactions.list()[0].payment_method == PaymentMethod.money

    def test_uses_appointment_payment_method(self, store, repos, make_appt):
        store.save(make_appt(
            "a", "09:00", "10:00",
            payment_status=PaymentStatus.paid, price=30, payment_method=PaymentMethod.pix,
        ))

        assert repos.transactions.list()[0].payment_method == PaymentMethod.pix

    @pytest.mark.parametrize("kwargs", [
        {"payment_status": PaymentStatus.pending, "price": 50},
        {"payment_status": PaymentStatus.paid, "price": 0},
        {"payment_status": PaymentStatus.paid},
        {},
    ])
    def test_no_transaction_unless_paid_with_price(self, store, repos, make_appt, kwargs):
        store.save(make_appt("a", "09:00", "10:00", **kwargs))

        assert repos.transactions.list() == []

    def test_price_change_after_payment_is_not_synced(self, store, repos, make_appt):
        appt = make_appt("a", "09:00", "10:00", payment_status=PaymentStatus.paid, price=50)
        store.save(appt)
        appt.price = 80
        store.save(appt)

        txs = repos.transactions.list()
        assert [t.amount for t in txs] == [50]

    def test_delete_keeps_transaction(self, store, repos, make_appt):
        store.save(make_appt("a", "09:00", "10:00", payment_status=PaymentStatus.paid, price=50))

        store.delete("a")

        assert store.list() == []
        assert len(repos.transactions.list()) == 1

    def test_transaction_failure_is_a_warning(self, make_appt):
        repos = Repositories(FailingTransactionsPersistence())
        store = AppointmentStore(repos, clock=lambda: FIXED_NOW)

        result = store.save(make_appt("a", "09:00", "10:00", payment_status=PaymentStatus.paid, price=50))

        assert result.transaction is None
        assert len(result.warnings) == 1
        assert "disk full" in result.warnings[0]
        assert [a.id for a in store.list()] == ["a"]

    def test_unexpected_transaction_error_is_a_warning(self, make_appt):
        repos = Repositories(BrokenTransactionsPersistence())
        store = AppointmentStore(repos, clock=lambda: FIXED_NOW)

        result = store.save(make_appt("a", "09:00", "10:00", payment_status=PaymentStatus.paid, price=50))

        assert result.transaction is None
        assert "driver crashed" in result.warnings[0]
        assert store.get("a").price == 50


class TestCancelAndDelete:

    def test_cancel_marks_status(self, store, make_appt):
        store.save(make_appt("a", "09:00", "10:00"))

        cancelled = store.cancel("a")

        assert cancelled.status == AppointmentStatus.cancelled
        assert store.get("a").status == AppointmentStatus.cancelled

    def test_cancel_twice_conflicts(self, store, make_appt):
        store.save(make_appt("a", "09:00", "10:00"))
        store.cancel("a")

        with pytest.raises(ConflictError):
            store.cancel("a")

    def test_get_unknown_raises(self, store):
        with pytest.raises(NotFoundError):
            store.get("missing")

    def test_delete_unknown_is_noop(self, store, make_appt):
        store.save(make_appt("a", "09:00", "10:00"))

        store.delete("missing")

        assert len(store.list()) == 1
