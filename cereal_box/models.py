"""SQLAlchemy model for the visitor counter."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# The counter table only ever holds this row
SINGLETON_ID = 1


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class VisitorCounter(Base):
    """Singleton row tracking total visits."""

    __tablename__ = "visitor_counter"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    last_visit: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
