"""Key-value entry model backing the record store."""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lounge.db.base import Base
from lounge.models.mixins import TimestampMixin


class KeyValueEntry(TimestampMixin, Base):
    __tablename__ = "kv_store"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Bumped on every flush; a stale UPDATE matches no row and raises StaleDataError
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<KeyValueEntry {self.key} v{self.version}>"
