# cronos/repositories.py

import threading
from datetime import date
from typing import Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

from . import storage
from .availability import date_key, default_week, exception_seed, resolve, validate_schedule
from .errors import NotFoundError, ValidationError
from .logging_config import get_logger
from .schemas import (
    Client, CustomField, CustomFieldType, DayException, DaySchedule, Event,
    Provider, Service, Transaction, Weekday,
)
from .storage import Persistence

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


def dump(model: BaseModel) -> dict:
    return model.model_dump(mode="json")


class CollectionRepository(Generic[T]):
    """Flat CRUD over one collection. Records are keyed by their `id`."""

    def __init__(self, persistence: Persistence, collection: str, model: Type[T], lock=None):
        self.persistence = persistence
        self.collection = collection
        self.model = model
        self.lock = lock or threading.RLock()

    def list(self) -> List[T]:
        return [self.model.model_validate(r) for r in self.persistence.load(self.collection)]

    def get(self, item_id: str) -> T:
        for item in self.list():
            if item.id == item_id:
                return item
        raise NotFoundError(f"{self.model.__name__} '{item_id}' not found")

    def find(self, item_id: str) -> Optional[T]:
        try:
            return self.get(item_id)
        except NotFoundError:
            return None

    def save(self, item: T) -> T:
        with self.lock:
            records = self.persistence.load(self.collection)
            payload = dump(item)
            for i, record in enumerate(records):
                if record.get("id") == item.id:
                    records[i] = payload
                    break
            else:
                records.append(payload)
            self.persistence.store_all(self.collection, records)
        logger.info("record_saved", collection=self.collection, id=item.id)
        return item

    def delete(self, item_id: str) -> None:
        with self.lock:
            records = self.persistence.load(self.collection)
            kept = [r for r in records if r.get("id") != item_id]
            self.persistence.store_all(self.collection, kept)
        logger.info("record_deleted", collection=self.collection, id=item_id)


class AvailabilityRepository:
    def __init__(self, persistence: Persistence, lock=None):
        self.persistence = persistence
        self.lock = lock or threading.RLock()

    # --- weekly template ---

    def get_week(self) -> dict:
        records = self.persistence.load(storage.AVAILABILITY)
        if not records:
            return default_week()
        return {r["day"]: DaySchedule.model_validate(r["schedule"]) for r in records}

    def save_week(self, week: dict) -> dict:
        keys = {getattr(k, "value", k) for k in week}
        missing = [d.value for d in Weekday if d.value not in keys]
        if missing:
            raise ValidationError(f"Weekly availability is missing: {', '.join(missing)}")
        unknown = sorted(keys - {d.value for d in Weekday})
        if unknown:
            raise ValidationError(f"Unknown weekday keys: {', '.join(unknown)}")

        normalized = {getattr(k, "value", k): v for k, v in week.items()}
        for day, schedule in normalized.items():
            problems = validate_schedule(schedule)
            if problems:
                raise ValidationError(f"{day}: {'; '.join(problems)}")

        records = [{"day": d.value, "schedule": dump(normalized[d.value])} for d in Weekday]
        with self.lock:
            self.persistence.store_all(storage.AVAILABILITY, records)
        logger.info("weekly_availability_saved")
        return {d.value: normalized[d.value] for d in Weekday}

    # --- exceptions ---

    def list_exceptions(self) -> List[DayException]:
        return [DayException.model_validate(r) for r in self.persistence.load(storage.EXCEPTIONS)]

    def save_exception(self, exception: DayException) -> DayException:
        problems = validate_schedule(exception.schedule)
        if problems:
            raise ValidationError("; ".join(problems))

        key = date_key(exception.date)
        with self.lock:
            records = self.persistence.load(storage.EXCEPTIONS)
            payload = dump(exception)
            for i, record in enumerate(records):
                if record.get("date") == key:
                    records[i] = payload
                    break
            else:
                records.append(payload)
            self.persistence.store_all(storage.EXCEPTIONS, records)
        logger.info("availability_exception_saved", date=key, active=exception.schedule.active)
        return exception

    def delete_exception(self, day: date) -> None:
        key = date_key(day)
        with self.lock:
            records = self.persistence.load(storage.EXCEPTIONS)
            self.persistence.store_all(
                storage.EXCEPTIONS, [r for r in records if r.get("date") != key]
            )
        logger.info("availability_exception_deleted", date=key)

    def resolve(self, day: date) -> DaySchedule:
        return resolve(day, self.get_week(), self.list_exceptions())

    def exception_seed(self, day: date) -> DaySchedule:
        return exception_seed(day, self.get_week(), self.list_exceptions())


class FormConfigRepository:
    def __init__(self, persistence: Persistence, lock=None):
        self.persistence = persistence
        self.lock = lock or threading.RLock()

    def get_fields(self) -> List[CustomField]:
        return [CustomField.model_validate(r) for r in self.persistence.load(storage.FORM_CONFIG)]

    def save_fields(self, fields: List[CustomField]) -> List[CustomField]:
        ids = [f.id for f in fields]
        if len(ids) != len(set(ids)):
            raise ValidationError("Custom field ids must be unique")
        for field in fields:
            if field.type == CustomFieldType.select and not field.options:
                raise ValidationError(f"Field '{field.label}' needs at least one option")

        with self.lock:
            self.persistence.store_all(storage.FORM_CONFIG, [dump(f) for f in fields])
        logger.info("form_config_saved", fields=len(fields))
        return fields


class Repositories:
    """All collections of one backing store, sharing a single writer lock."""

    def __init__(self, persistence: Persistence):
        self.persistence = persistence
        self.lock = threading.RLock()
        self.clients = CollectionRepository(persistence, storage.CLIENTS, Client, self.lock)
        self.services = CollectionRepository(persistence, storage.SERVICES, Service, self.lock)
        self.providers = CollectionRepository(persistence, storage.PROVIDERS, Provider, self.lock)
        self.events = CollectionRepository(persistence, storage.EVENTS, Event, self.lock)
        self.transactions = CollectionRepository(
            persistence, storage.TRANSACTIONS, Transaction, self.lock
        )
        self.availability = AvailabilityRepository(persistence, self.lock)
        self.form_config = FormConfigRepository(persistence, self.lock)
