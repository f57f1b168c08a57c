# cronos/data.py

from datetime import datetime, timedelta

from . import storage
from .logging_config import get_logger
from .repositories import dump
from .schemas import (
    Client, Event, PaymentMethod, Provider, Service, Transaction,
    TransactionStatus, TransactionType,
)
from .storage import Persistence

logger = get_logger(__name__)


def demo_records(now: datetime) -> dict:
    return {
        storage.CLIENTS: [
            Client(id="1", name="Maria Silva", email="maria@example.com", phone="11999999999", created_at=now),
            Client(id="2", name="João Santos", email="joao@example.com", phone="11988888888", created_at=now),
        ],
        storage.SERVICES: [
            Service(id="1", name="Corte de Cabelo", duration_minutes=45, price=50),
            Service(id="2", name="Barba", duration_minutes=30, price=30),
        ],
        storage.PROVIDERS: [
            Provider(id="1", name="Carlos Barbeiro"),
            Provider(id="2", name="Ana Cabeleireira"),
        ],
        storage.EVENTS: [
            Event(
                id="1",
                name="Workshop de Tendências",
                date=now + timedelta(days=5),
                duration_minutes=120,
                capacity=50,
                speaker="Ana Cabeleireira",
                attendees=["1", "2"],
            ),
        ],
        storage.TRANSACTIONS: [
            Transaction(
                id="1", description="Corte de Cabelo (João)", amount=50,
                type=TransactionType.income, status=TransactionStatus.paid,
                date=now - timedelta(days=1), payment_method=PaymentMethod.pix,
            ),
            Transaction(
                id="2", description="Conta de Luz", amount=150,
                type=TransactionType.expense, status=TransactionStatus.paid,
                date=now - timedelta(days=2), payment_method=PaymentMethod.boleto,
            ),
        ],
    }


def seed(persistence: Persistence, now: datetime = None) -> list:
    """Fill empty collections with demo data. Returns the seeded collection names."""
    now = now or datetime.now()
    seeded = []
    for collection, items in demo_records(now).items():
        if not persistence.is_empty(collection):
            continue
        persistence.store_all(collection, [dump(i) for i in items])
        seeded.append(collection)

    if seeded:
        logger.info("demo_data_seeded", collections=seeded)
    return seeded
