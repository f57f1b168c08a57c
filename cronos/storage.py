# cronos/storage.py

"""
Collection-oriented persistence.

Every collection is read and written as a whole: `load` returns all of its
records and `store_all` replaces them. Callers serialise their own
read-modify-write cycles (see the repositories and the appointment store).
"""

import copy
from abc import ABC, abstractmethod
from typing import Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .db import init_db, make_engine
from .errors import PersistenceError
from .logging_config import get_logger
from .models import CollectionRecord

logger = get_logger(__name__)

APPOINTMENTS = "appointments"
CLIENTS = "clients"
SERVICES = "services"
PROVIDERS = "providers"
AVAILABILITY = "availability"
EXCEPTIONS = "exceptions"
EVENTS = "events"
FORM_CONFIG = "form_config"
TRANSACTIONS = "transactions"

COLLECTIONS = (
    APPOINTMENTS, CLIENTS, SERVICES, PROVIDERS, AVAILABILITY,
    EXCEPTIONS, EVENTS, FORM_CONFIG, TRANSACTIONS,
)


class Persistence(ABC):

    @abstractmethod
    def load(self, collection: str) -> List[dict]:
        ...

    @abstractmethod
    def store_all(self, collection: str, records: List[dict]) -> None:
        ...

    def is_empty(self, collection: str) -> bool:
        return not self.load(collection)


class MemoryPersistence(Persistence):
    def __init__(self):
        self._data: Dict[str, List[dict]] = {name: [] for name in COLLECTIONS}

    def load(self, collection: str) -> List[dict]:
        return copy.deepcopy(self._data.get(collection, []))

    def store_all(self, collection: str, records: List[dict]) -> None:
        self._data[collection] = copy.deepcopy(list(records))


class SqlPersistence(Persistence):
    def __init__(self, engine):
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: str) -> "SqlPersistence":
        engine = make_engine(database_url)
        init_db(engine)
        return cls(engine)

    def load(self, collection: str) -> List[dict]:
        try:
            with Session(self.engine) as session:
                rows = session.exec(
                    select(CollectionRecord)
                    .where(CollectionRecord.collection == collection)
                    .order_by(CollectionRecord.position)
                ).all()
                return [dict(row.payload) for row in rows]
        except SQLAlchemyError as e:
            logger.error("collection_load_failed", collection=collection, error=str(e))
            raise PersistenceError(f"Could not load '{collection}'") from e

    def store_all(self, collection: str, records: List[dict]) -> None:
        with Session(self.engine) as session:
            try:
                existing = session.exec(
                    select(CollectionRecord).where(CollectionRecord.collection == collection)
                ).all()
                for row in existing:
                    session.delete(row)
                session.flush()
                for position, payload in enumerate(records):
                    session.add(CollectionRecord(collection=collection, position=position, payload=payload))
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                logger.error("collection_store_failed", collection=collection, error=str(e))
                raise PersistenceError(f"Could not store '{collection}'") from e


def build_persistence(database_url: str) -> Persistence:
    if database_url.startswith("memory://"):
        return MemoryPersistence()
    return SqlPersistence.from_url(database_url)
