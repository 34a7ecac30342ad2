from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.config.database import Base


class KeyValueEntry(Base):
    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String(512), primary_key=True)
    value: Mapped[str] = mapped_column(Text)
    # Epoch seconds; NULL never expires.
    expires_at: Mapped[float | None] = mapped_column(nullable=True, index=True)
