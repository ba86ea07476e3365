from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field as PydanticField, field_serializer
from sqlalchemy import DateTime, text
from sqlmodel import Field, Index, SQLModel

from models.location import GeoPoint
from utils.datetime_helpers import ensure_utc, format_utc_datetime

OPEN_SESSION_CLAUSE = text("clock_out_timestamp IS NULL")


# One Shift: Opened by Clock-In, Closed by Clock-Out. Never Deleted.
class ClockRecord(SQLModel, table=True):
    __tablename__ = "clock_records"

    __table_args__ = (
        # Index for queries filtering by worker
        Index("ix_clock_records_worker_id", "worker_id"),
        # Index for range queries on clock-in time (dashboards)
        Index("ix_clock_records_clock_in_timestamp", "clock_in_timestamp"),
        # Composite index for the per-worker "since midnight" / history queries
        Index("ix_clock_records_worker_id_clock_in", "worker_id", "clock_in_timestamp"),
        # At most one open session per worker; makes clock-in an atomic
        # create-if-no-open-session on both PostgreSQL and SQLite
        Index(
            "ux_clock_records_one_open_per_worker",
            "worker_id",
            unique=True,
            postgresql_where=OPEN_SESSION_CLAUSE,
            sqlite_where=OPEN_SESSION_CLAUSE,
        ),
    )

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    worker_id: str
    worker_display_name: str
    clock_in_timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )
    clock_in_lat: float
    clock_in_lng: float
    clock_in_note: Optional[str] = Field(default=None)
    clock_out_timestamp: Optional[datetime] = Field(
        default=None, sa_type=DateTime(timezone=True)
    )
    clock_out_lat: Optional[float] = Field(default=None)
    clock_out_lng: Optional[float] = Field(default=None)
    clock_out_note: Optional[str] = Field(default=None)

    @property
    def is_open(self) -> bool:
        return self.clock_out_timestamp is None

    @property
    def clock_in_at(self) -> datetime:
        # SQLite hands back naive datetimes; everything is stored as UTC
        return ensure_utc(self.clock_in_timestamp)

    @property
    def clock_out_at(self) -> Optional[datetime]:
        if self.clock_out_timestamp is None:
            return None
        return ensure_utc(self.clock_out_timestamp)

    @property
    def clock_in_location(self) -> GeoPoint:
        return GeoPoint(lat=self.clock_in_lat, lng=self.clock_in_lng)

    @property
    def clock_out_location(self) -> Optional[GeoPoint]:
        if self.clock_out_lat is None or self.clock_out_lng is None:
            return None
        return GeoPoint(lat=self.clock_out_lat, lng=self.clock_out_lng)


class ClockInRequest(BaseModel):
    latitude: float | None = PydanticField(default=None, ge=-90, le=90)
    longitude: float | None = PydanticField(default=None, ge=-180, le=180)
    # Set by the client when the device could not produce a fix
    location_error: str | None = None
    note: str | None = None


# Partial clock-out update; omitted fields keep their stored value
class ClockOutRequest(BaseModel):
    clock_out_location: GeoPoint | None = None
    clock_out_note: str | None = None


class ClockRecordRead(BaseModel):
    id: str
    worker_id: str
    worker_display_name: str
    clock_in_timestamp: datetime
    clock_in_location: GeoPoint
    clock_in_note: Optional[str] = None
    clock_out_timestamp: Optional[datetime] = None
    clock_out_location: Optional[GeoPoint] = None
    clock_out_note: Optional[str] = None
    duration: str = "-"

    @field_serializer("clock_in_timestamp", "clock_out_timestamp")
    def serialize_timestamps(self, dt: Optional[datetime]) -> Optional[str]:
        """Ensure timestamps are formatted as UTC with Z suffix"""
        return format_utc_datetime(dt)

    @classmethod
    def from_record(cls, record: ClockRecord, duration: str = "-") -> "ClockRecordRead":
        return cls(
            id=record.id,
            worker_id=record.worker_id,
            worker_display_name=record.worker_display_name,
            clock_in_timestamp=record.clock_in_at,
            clock_in_location=record.clock_in_location,
            clock_in_note=record.clock_in_note,
            clock_out_timestamp=record.clock_out_at,
            clock_out_location=record.clock_out_location,
            clock_out_note=record.clock_out_note,
            duration=duration,
        )
