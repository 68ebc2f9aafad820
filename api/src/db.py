"""Relational store for log entries and daily cost aggregates."""

from datetime import date, datetime, timezone

from sqlalchemy import (
    JSON, Column, Date, DateTime, Index, Integer, MetaData, Numeric, String, Table,
    UniqueConstraint, create_engine, func, select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

metadata = MetaData()


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


logs = Table(
    "logs",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("timestamp", DateTime, nullable=False, default=utcnow),
    Column("category", String(50), nullable=False),
    Column("action", String(255), nullable=False),
    Column("details", JSON, default=dict),
    Column("session_id", String(100)),
    Column("duration_ms", Integer),
    Column("cost", Numeric(10, 6, asdecimal=False)),
    Column("created_at", DateTime, default=utcnow),
)
Index("idx_logs_timestamp", logs.c.timestamp.desc())
Index("idx_logs_category", logs.c.category)
Index("idx_logs_session", logs.c.session_id)

costs = Table(
    "costs",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("date", Date, nullable=False),
    Column("service", String(100), nullable=False),
    Column("metric", String(100), nullable=False),
    Column("value", Numeric(15, 6, asdecimal=False), nullable=False),
    Column("unit", String(50)),
    Column("created_at", DateTime, default=utcnow),
    UniqueConstraint("date", "service", "metric"),
)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into naive UTC. Naive input is taken as UTC.

    Raises ValueError for anything that is not ISO-8601 or that falls outside
    the representable UTC range.
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError as exc:
            raise ValueError(f"{value!r} is out of range") from exc
    return parsed


def format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat(timespec="milliseconds") + "Z"


def create_db_engine(url: str) -> Engine:
    if url in ("sqlite://", "sqlite:///:memory:"):
        # Share the single in-memory database across threads and connections.
        return create_engine(url, connect_args={"check_same_thread": False},
                             poolclass=StaticPool)
    return create_engine(url, pool_pre_ping=True)


class LogDatabase:
    def __init__(self, engine: Engine):
        self._engine = engine

    @classmethod
    def from_url(cls, url: str) -> "LogDatabase":
        return cls(create_db_engine(url))

    @property
    def engine(self) -> Engine:
        return self._engine

    def init(self) -> None:
        """Create tables and indexes that do not exist yet. Safe to repeat."""
        metadata.create_all(self._engine, checkfirst=True)

    def insert_log(self, entry: dict) -> int:
        timestamp = entry.get("timestamp")
        values = {
            "timestamp": parse_timestamp(timestamp) if timestamp else utcnow(),
            "category": entry["category"],
            "action": entry["action"],
            "details": entry.get("details") or {},
            "session_id": entry.get("session_id"),
            "duration_ms": entry.get("duration_ms"),
            "cost": entry.get("cost"),
        }
        with self._engine.begin() as conn:
            result = conn.execute(logs.insert().values(**values))
            return result.inserted_primary_key[0]

    def query_logs(self, category: str | None = None, session_id: str | None = None,
                   start: datetime | None = None, end: datetime | None = None,
                   limit: int = 100, offset: int = 0) -> list[dict]:
        """Return matching entries newest first. *start* and *end* are inclusive."""
        query = select(logs)
        if category:
            query = query.where(logs.c.category == category)
        if session_id:
            query = query.where(logs.c.session_id == session_id)
        if start is not None:
            query = query.where(logs.c.timestamp >= start)
        if end is not None:
            query = query.where(logs.c.timestamp <= end)
        query = query.order_by(logs.c.timestamp.desc(), logs.c.id.desc()).limit(limit).offset(offset)

        with self._engine.connect() as conn:
            return [_log_row(row) for row in conn.execute(query).mappings()]

    def count_logs(self) -> int:
        with self._engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(logs)).scalar_one()

    def record_cost(self, day: date, service: str, metric: str, value: float,
                    unit: str | None = None) -> None:
        """Set the value of one (date, service, metric) aggregate."""
        key = (costs.c.date == day) & (costs.c.service == service) & (costs.c.metric == metric)
        with self._engine.begin() as conn:
            existing = conn.execute(select(costs.c.id).where(key)).scalar_one_or_none()
            if existing is None:
                conn.execute(costs.insert().values(date=day, service=service, metric=metric,
                                                   value=value, unit=unit))
            else:
                conn.execute(costs.update().where(costs.c.id == existing)
                             .values(value=value, unit=unit))

    def daily_costs(self, day: date) -> list[dict]:
        query = (
            select(costs.c.service, costs.c.metric, func.sum(costs.c.value).label("total"),
                   costs.c.unit)
            .where(costs.c.date == day)
            .group_by(costs.c.service, costs.c.metric, costs.c.unit)
            .order_by(costs.c.service, costs.c.metric)
        )
        with self._engine.connect() as conn:
            return [
                {"service": r.service, "metric": r.metric,
                 "total": float(r.total), "unit": r.unit}
                for r in conn.execute(query)
            ]


def _log_row(row) -> dict:
    return {
        "id": row["id"],
        "timestamp": format_timestamp(row["timestamp"]),
        "category": row["category"],
        "action": row["action"],
        "details": row["details"] or {},
        "session_id": row["session_id"],
        "duration_ms": row["duration_ms"],
        "cost": row["cost"],
        "created_at": format_timestamp(row["created_at"]),
    }
