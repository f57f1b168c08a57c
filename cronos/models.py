# cronos/models.py

from typing import Any, Dict, Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column


class CollectionRecord(SQLModel, table=True):
    """One record of a named collection, stored as its JSON payload."""

    __tablename__ = "collection_records"
    __table_args__ = (
        UniqueConstraint("collection", "position", name="uq_collection_position"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    collection: str = Field(index=True)
    position: int
    payload: Dict[str, Any] = Field(sa_column=Column(JSON, nullable=False))
