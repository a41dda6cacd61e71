"""Key-value entries holding serialized state blobs."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Text, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class KeyValueEntry(Base):
    """One serialized blob under a (versioned) key."""

    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(Text, primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<KeyValueEntry key={self.key}>"
