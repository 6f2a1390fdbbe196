from datetime import date as calendar_date, datetime
from sqlalchemy import Integer, String, DateTime, Date, Boolean, ForeignKey, Text, UniqueConstraint, JSON
from sqlalchemy.orm import relationship, Mapped, mapped_column

from storehours.db.base import Base


# helpers
now = datetime.utcnow


class Establishment(Base):
    __tablename__ = "establishments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    slug: Mapped[str] = mapped_column(String(128), unique=True, index=True)
    timezone: Mapped[str | None] = mapped_column(String(64), nullable=True)  # IANA name, e.g. "America/Sao_Paulo"
    allow_orders_when_closed: Mapped[bool] = mapped_column(Boolean, default=False)
    show_schedule_on_menu: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    weekly_hours: Mapped[list["EstablishmentHours"]] = relationship(
        "EstablishmentHours", back_populates="establishment", cascade="all, delete-orphan"
    )
    overrides: Mapped[list["EstablishmentHoursOverride"]] = relationship(
        "EstablishmentHoursOverride", back_populates="establishment", cascade="all, delete-orphan"
    )


class EstablishmentHours(Base):
    __tablename__ = "establishment_hours"
    __table_args__ = (
        UniqueConstraint("estab_id", "day_of_week", name="uq_establishment_hours_day"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    estab_id: Mapped[int] = mapped_column(ForeignKey("establishments.id", ondelete="CASCADE"), index=True)
    day_of_week: Mapped[int] = mapped_column(Integer)  # 0=Monday .. 6=Sunday
    enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    intervals: Mapped[list] = mapped_column(JSON, default=list)  # [{"open": "11:00", "close": "23:00"}]
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    establishment: Mapped[Establishment] = relationship("Establishment", back_populates="weekly_hours")


class EstablishmentHoursOverride(Base):
    __tablename__ = "establishment_hours_overrides"
    __table_args__ = (
        UniqueConstraint("estab_id", "date", name="uq_establishment_hours_overrides_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    estab_id: Mapped[int] = mapped_column(ForeignKey("establishments.id", ondelete="CASCADE"), index=True)
    date: Mapped[calendar_date] = mapped_column(Date, index=True)  # local calendar date of the establishment
    is_closed: Mapped[bool] = mapped_column(Boolean, default=False)
    intervals: Mapped[list | None] = mapped_column(JSON, nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    establishment: Mapped[Establishment] = relationship("Establishment", back_populates="overrides")
