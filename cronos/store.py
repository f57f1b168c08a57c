# cronos/store.py

from datetime import datetime
from typing import Callable, List, Optional

from . import storage
from .core import find_conflicts, has_conflict
from .errors import ConflictError, CronosError, NotFoundError, ValidationError
from .logging_config import get_logger
from .repositories import Repositories, dump
from .schemas import (
    Appointment, AppointmentStatus, PaymentMethod, PaymentStatus, SaveResult,
    Transaction, TransactionStatus, TransactionType,
)

logger = get_logger(__name__)

CONFLICT_MESSAGE = "Conflict detected: this time is already booked for this provider."


class AppointmentStore:
    """
    Owns the appointments collection.

    Every write is a locked read-modify-write of the whole collection. A save
    is accepted only when it does not overlap another live booking of the
    same provider.
    """

    def __init__(
        self,
        repos: Repositories,
        default_payment_method: PaymentMethod = PaymentMethod.money,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.repos = repos
        self.persistence = repos.persistence
        self.lock = repos.lock
        self.default_payment_method = PaymentMethod(default_payment_method)
        self.clock = clock

    def list(self) -> List[Appointment]:
        return [Appointment.model_validate(r) for r in self.persistence.load(storage.APPOINTMENTS)]

    def get(self, appointment_id: str) -> Appointment:
        for appt in self.list():
            if appt.id == appointment_id:
                return appt
        raise NotFoundError(f"Appointment '{appointment_id}' not found")

    def has_conflict(self, start, end, provider_id=None, exclude_id=None) -> bool:
        return has_conflict(start, end, provider_id, exclude_id, self.list())

    def save(self, appointment: Appointment) -> SaveResult:
        # 1) Validate interval
        if appointment.end <= appointment.start:
            raise ValidationError("End time must be after start time")

        with self.lock:
            records = self.persistence.load(storage.APPOINTMENTS)
            existing = [Appointment.model_validate(r) for r in records]

            # 2) Reject overlaps with other live bookings
            if has_conflict(
                appointment.start, appointment.end,
                appointment.provider_id, appointment.id, existing,
            ):
                clashes = find_conflicts(
                    appointment.start, appointment.end,
                    appointment.provider_id, appointment.id, existing,
                )
                logger.info(
                    "appointment_conflict",
                    id=appointment.id,
                    provider_id=appointment.provider_id,
                    conflicts=[c.id for c in clashes],
                )
                raise ConflictError(CONFLICT_MESSAGE, [c.id for c in clashes])

            # 3) Upsert and persist
            payload = dump(appointment)
            for i, record in enumerate(records):
                if record.get("id") == appointment.id:
                    records[i] = payload
                    break
            else:
                records.append(payload)
            self.persistence.store_all(storage.APPOINTMENTS, records)
            logger.info(
                "appointment_saved",
                id=appointment.id,
                provider_id=appointment.provider_id,
                status=appointment.status.value,
            )

            # 4) Derived transaction, never fails the save
            result = SaveResult(appointment=appointment)
            try:
                result.transaction = self._record_payment(appointment)
            except Exception as e:
                error = e.message if isinstance(e, CronosError) else str(e)
                logger.warning("transaction_autocreate_failed", id=appointment.id, error=error, exc_info=True)
                result.warnings.append(f"Appointment saved, but its transaction was not recorded: {error}")

        return result

    def _record_payment(self, appointment: Appointment) -> Optional[Transaction]:
        if appointment.payment_status != PaymentStatus.paid:
            return None
        if not appointment.price or appointment.price <= 0:
            return None

        transactions = self.repos.transactions.list()
        if any(t.related_appointment_id == appointment.id for t in transactions):
            return None

        tx = Transaction(
            description=f"Agendamento: {appointment.title}",
            amount=appointment.price,
            type=TransactionType.income,
            status=TransactionStatus.paid,
            date=self.clock(),
            payment_method=appointment.payment_method or self.default_payment_method,
            related_appointment_id=appointment.id,
            provider_id=appointment.provider_id,
        )
        self.repos.transactions.save(tx)
        logger.info("transaction_autocreated", id=tx.id, appointment_id=appointment.id, amount=tx.amount)
        return tx

    def cancel(self, appointment_id: str) -> Appointment:
        with self.lock:
            appt = self.get(appointment_id)
            if appt.status == AppointmentStatus.cancelled:
                raise ConflictError("Appointment already cancelled", [appt.id])
            appt.status = AppointmentStatus.cancelled
            # cancelling can never create an overlap
            self.save(appt)
        return appt

    def delete(self, appointment_id: str) -> None:
        # derived transactions outlive the appointment
        with self.lock:
            records = self.persistence.load(storage.APPOINTMENTS)
            kept = [r for r in records if r.get("id") != appointment_id]
            self.persistence.store_all(storage.APPOINTMENTS, kept)
        logger.info("appointment_deleted", id=appointment_id)
