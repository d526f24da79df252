"""SQL-backed store built on SQLModel.

Tables mirror the domain models; surgery team and fee maps are stored as JSON
columns. Schema management is left to the deployment (``create_tables`` exists
for development databases and tests).
"""

from collections.abc import Generator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

import arrow
from loguru import logger
from sqlalchemy import JSON, DateTime
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Field, Session, SQLModel, create_engine, select
from tenacity import before_sleep_log, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from surgery_agenda.event_bus import EventBus, Subscription
from surgery_agenda.exceptions import StoreUnavailableError, StoreWriteError
from surgery_agenda.logging import setup_sqlalchemy_logging
from surgery_agenda.settings import Settings
from surgery_agenda.models.domain import Doctor, Hospital, InsurancePlan, Surgery
from surgery_agenda.store.deltas import DELTA_TYPES, SurgeryInserted, SurgeryUpdated
from surgery_agenda.store.interface import DeltaHandler, StoreSnapshot, SurgeryStore


def _utcnow() -> datetime:
    return arrow.utcnow().datetime


class SurgeryRecord(SQLModel, table=True):
    """Surgery row."""

    __tablename__ = "surgeries"

    id: str = Field(primary_key=True)
    patient_name: str = ""
    main_surgeon_id: str = Field(index=True)
    participant_ids: list[str] = Field(sa_type=JSON, default_factory=list)
    scheduled_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True), index=True)
    hospital_id: str | None = None
    insurance_id: str | None = None
    auth_status: str
    status: str
    fees: dict[str, float] = Field(sa_type=JSON, default_factory=dict)
    material_cost: float = 0.0
    assistant_cost: float = 0.0
    scrub_cost: float = 0.0
    anesthesia_cost: float = 0.0
    facility_cost: float = 0.0
    notes: str = ""
    pre_op_attachment: str | None = None
    post_op_attachment: str | None = None
    created_at: datetime = Field(default_factory=_utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=_utcnow, sa_type=DateTime(timezone=True))


class DoctorRecord(SQLModel, table=True):
    """Doctor row."""

    __tablename__ = "doctors"

    id: str = Field(primary_key=True)
    name: str
    email: str = ""
    color: str = ""
    is_admin: bool = False


class HospitalRecord(SQLModel, table=True):
    """Hospital row."""

    __tablename__ = "hospitals"

    id: str = Field(primary_key=True)
    name: str


class InsurancePlanRecord(SQLModel, table=True):
    """Insurance plan row."""

    __tablename__ = "insurance_plans"

    id: str = Field(primary_key=True)
    name: str


def surgery_to_row(surgery: Surgery) -> dict[str, Any]:
    data = surgery.model_dump()
    data["participant_ids"] = list(surgery.participant_ids)
    data["auth_status"] = surgery.auth_status.value
    data["status"] = surgery.status.value
    data["fees"] = dict(surgery.fees)
    return data


def row_to_surgery(record: SurgeryRecord) -> Surgery:
    data = record.model_dump(exclude={"created_at", "updated_at"})
    return Surgery.model_validate(data)


def create_store_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine suitable for ``database_url``.

    SQLite URLs get a shared single connection so in-memory databases survive
    across sessions; other databases get a pre-pinged connection pool. With
    ``echo`` the SQL log goes through loguru.
    """
    if echo:
        setup_sqlalchemy_logging()
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_recycle=3600,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
    )


class SqlSurgeryStore(SurgeryStore):
    """Store persisting to any SQLAlchemy-supported database.

    Deltas are published on ``bus`` only after a successful commit.
    """

    def __init__(self, engine: Engine, bus: EventBus | None = None) -> None:
        self.engine = engine
        self.bus = bus or EventBus()

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False, bus: EventBus | None = None) -> "SqlSurgeryStore":
        return cls(create_store_engine(database_url, echo=echo), bus=bus)

    @classmethod
    def from_settings(cls, settings: Settings, bus: EventBus | None = None) -> "SqlSurgeryStore":
        """Build the store from ``database_url`` and ``sql_log``."""
        if not settings.database_url:
            raise ValueError("database_url is not configured")
        return cls.from_url(settings.database_url, echo=settings.sql_log, bus=bus)

    def create_tables(self) -> None:
        """Create missing tables (development and tests only)."""
        SQLModel.metadata.create_all(self.engine)
        logger.info("SqlSurgeryStore: tables created")

    def dispose(self) -> None:
        logger.info("Closing database connections")
        self.engine.dispose()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        reraise=True,
        retry=retry_if_exception_type(OperationalError),
        before_sleep=before_sleep_log(logger, "DEBUG"),
    )
    def _open_session(self) -> Session:
        """Open a session and check out its connection so failures surface here."""
        session = Session(self.engine)
        try:
            session.connection()
        except OperationalError:
            session.close()
            raise
        return session

    @contextmanager
    def _session(self, operation: str) -> Generator[Session]:
        """Yield a session, translating database errors into store errors."""
        try:
            session = self._open_session()
        except OperationalError as e:
            raise StoreUnavailableError(operation, str(e)) from e

        try:
            yield session
        except OperationalError as e:
            session.rollback()
            logger.error(f"SqlSurgeryStore: {operation} failed: {e}")
            raise StoreUnavailableError(operation, str(e)) from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"SqlSurgeryStore: {operation} failed: {e}")
            raise StoreWriteError(operation, str(e)) from e
        finally:
            session.close()

    def load_snapshot(self) -> StoreSnapshot:
        with self._session("load_snapshot") as session:
            surgeries = tuple(row_to_surgery(r) for r in session.exec(select(SurgeryRecord)).all())
            doctors = tuple(Doctor.model_validate(r.model_dump()) for r in session.exec(select(DoctorRecord)).all())
            hospitals = tuple(Hospital.model_validate(r.model_dump()) for r in session.exec(select(HospitalRecord)).all())
            plans = tuple(InsurancePlan.model_validate(r.model_dump()) for r in session.exec(select(InsurancePlanRecord)).all())
        logger.debug(f"SqlSurgeryStore: loaded {len(surgeries)} surgeries")
        return StoreSnapshot(
            surgeries=surgeries,
            doctors=doctors,
            hospitals=hospitals,
            insurance_plans=plans,
            loaded_at=arrow.utcnow().isoformat(),
        )

    def save_surgery(self, surgery: Surgery) -> Surgery:
        with self._session("save_surgery") as session:
            existing = session.get(SurgeryRecord, surgery.id)
            row = surgery_to_row(surgery)
            if existing is None:
                session.add(SurgeryRecord(**row))
            else:
                existing.sqlmodel_update({**row, "updated_at": _utcnow()})
                session.add(existing)
            session.commit()
        logger.debug(f"SqlSurgeryStore: saved surgery {surgery.id} (new={existing is None})")
        self.bus.emit_sync(SurgeryInserted(surgery=surgery) if existing is None else SurgeryUpdated(surgery=surgery))
        return surgery

    def subscribe(self, handler: DeltaHandler) -> Subscription:
        return self.bus.subscribe(DELTA_TYPES, handler)

    def _upsert(self, operation: str, record_type: type[SQLModel], values: dict[str, Any]) -> None:
        with self._session(operation) as session:
            existing = session.get(record_type, values["id"])
            if existing is None:
                session.add(record_type(**values))
            else:
                existing.sqlmodel_update(values)
                session.add(existing)
            session.commit()

    def _delete(self, operation: str, record_type: type[SQLModel], record_id: str) -> bool:
        with self._session(operation) as session:
            existing = session.get(record_type, record_id)
            if existing is None:
                return False
            session.delete(existing)
            session.commit()
            return True

    def save_doctor(self, doctor: Doctor) -> Doctor:
        self._upsert("save_doctor", DoctorRecord, doctor.model_dump())
        return doctor

    def delete_doctor(self, doctor_id: str) -> bool:
        return self._delete("delete_doctor", DoctorRecord, doctor_id)

    def save_hospital(self, hospital: Hospital) -> Hospital:
        self._upsert("save_hospital", HospitalRecord, hospital.model_dump())
        return hospital

    def delete_hospital(self, hospital_id: str) -> bool:
        return self._delete("delete_hospital", HospitalRecord, hospital_id)

    def save_insurance_plan(self, plan: InsurancePlan) -> InsurancePlan:
        self._upsert("save_insurance_plan", InsurancePlanRecord, plan.model_dump())
        return plan

    def delete_insurance_plan(self, plan_id: str) -> bool:
        return self._delete("delete_insurance_plan", InsurancePlanRecord, plan_id)
