"""SQLModel-backed store.

Daily rows are unique on (date, location_id) and cascade-delete with their
saved location. Bulk writes run in a single transaction.
"""

import datetime
from typing import Any, List, Optional, Sequence

from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint, delete, event, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Field, Session, SQLModel, create_engine, select

from ..errors import StorageError
from ..models import RECORD_VERSION, DailyAstronomyRecord, NamedPhase, Preferences, SavedLocation, TemporaryLocation

# stays under SQLite's bound-parameter limit
_DELETE_CHUNK = 500


class SavedLocationRow(SQLModel, table=True):
    __tablename__ = "saved_location"  # type: ignore[assignment]

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=200)
    lat: float
    lon: float
    is_primary: bool = Field(default=False)


class DailyAstronomyRow(SQLModel, table=True):
    __tablename__ = "daily_astronomy"  # type: ignore[assignment]
    __table_args__ = (UniqueConstraint("date", "location_id", name="uq_daily_astronomy_date_location"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    date: datetime.date = Field(index=True)
    location_id: int = Field(
        sa_column=Column(Integer, ForeignKey("saved_location.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    percentage_visible: int
    is_waxing: bool
    phase: Optional[str] = Field(default=None, max_length=20)
    sunrise: Optional[str] = Field(default=None, max_length=5)
    sunset: Optional[str] = Field(default=None, max_length=5)
    moonrise: Optional[str] = Field(default=None, max_length=5)
    moonset: Optional[str] = Field(default=None, max_length=5)
    version: int = Field(default=RECORD_VERSION)


class PreferencesRow(SQLModel, table=True):
    __tablename__ = "user_preferences"  # type: ignore[assignment]

    id: Optional[int] = Field(default=None, primary_key=True)
    active_location_id: Optional[int] = Field(default=None)
    temp_name: Optional[str] = Field(default=None, max_length=200)
    temp_lat: Optional[float] = Field(default=None)
    temp_lon: Optional[float] = Field(default=None)
    default_view: str = Field(default="month", max_length=10)
    show_lunar_info: bool = Field(default=True)
    show_holidays: bool = Field(default=True)
    notifications: bool = Field(default=False)


def _to_location(row: SavedLocationRow) -> SavedLocation:
    return SavedLocation(id=row.id, name=row.name, lat=row.lat, lon=row.lon, is_primary=row.is_primary)  # type: ignore[arg-type]


def _to_record(row: DailyAstronomyRow) -> DailyAstronomyRecord:
    return DailyAstronomyRecord(
        date=row.date,
        percentage_visible=row.percentage_visible,
        is_waxing=row.is_waxing,
        phase=NamedPhase(row.phase) if row.phase else None,
        sunrise=row.sunrise,
        sunset=row.sunset,
        moonrise=row.moonrise,
        moonset=row.moonset,
        location_id=row.location_id,
        version=row.version,
    )


def _to_preferences(row: PreferencesRow) -> Preferences:
    temp = None
    if row.temp_lat is not None and row.temp_lon is not None:
        temp = TemporaryLocation(name=row.temp_name or "", lat=row.temp_lat, lon=row.temp_lon)
    return Preferences(
        active_location_id=row.active_location_id,
        temp_location=temp,
        default_view=row.default_view,
        show_lunar_info=row.show_lunar_info,
        show_holidays=row.show_holidays,
        notifications=row.notifications,
    )


def _to_rows(location_id: int, records: Sequence[DailyAstronomyRecord]) -> List[DailyAstronomyRow]:
    """One row per date; a later record for the same date wins."""
    rows = {}
    for rec in records:
        rows[rec.date] = DailyAstronomyRow(
            date=rec.date,
            location_id=location_id,
            percentage_visible=rec.percentage_visible,
            is_waxing=rec.is_waxing,
            phase=rec.phase.value if rec.phase else None,
            sunrise=rec.sunrise,
            sunset=rec.sunset,
            moonrise=rec.moonrise,
            moonset=rec.moonset,
            version=rec.version,
        )
    return list(rows.values())


class SqlStore:
    def __init__(self, url: str) -> None:
        kwargs: dict[str, Any] = {}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in {"sqlite://", "sqlite:///:memory:"}:
                kwargs["poolclass"] = StaticPool
        self.engine = create_engine(url, **kwargs)
        if url.startswith("sqlite"):
            event.listen(self.engine, "connect", _enable_sqlite_fk)
        SQLModel.metadata.create_all(self.engine)

    # Saved locations ----------------------------------------------------

    def _clear_primary(self, session: Session, keep: Optional[int] = None) -> None:
        for row in session.exec(select(SavedLocationRow).where(SavedLocationRow.is_primary == True)):  # noqa: E712
            if row.id != keep:
                row.is_primary = False
                session.add(row)

    def create_location(self, name: str, lat: float, lon: float, is_primary: bool = False) -> SavedLocation:
        with Session(self.engine) as session:
            if is_primary:
                self._clear_primary(session)
            row = SavedLocationRow(name=name, lat=lat, lon=lon, is_primary=is_primary)
            session.add(row)
            session.commit()
            session.refresh(row)
            return _to_location(row)

    def get_location(self, location_id: int) -> Optional[SavedLocation]:
        with Session(self.engine) as session:
            row = session.get(SavedLocationRow, location_id)
            return _to_location(row) if row else None

    def list_locations(self) -> List[SavedLocation]:
        with Session(self.engine) as session:
            stmt = select(SavedLocationRow).order_by(SavedLocationRow.is_primary.desc(), SavedLocationRow.name)  # type: ignore[attr-defined]
            return [_to_location(row) for row in session.exec(stmt)]

    def _apply_patch(self, session: Session, row: SavedLocationRow, patch: dict) -> None:
        if patch.get("is_primary"):
            self._clear_primary(session, keep=row.id)
        for key, value in patch.items():
            if not hasattr(row, key) or key == "id":
                raise ValueError(f"unknown location field: {key}")
            setattr(row, key, value)
        session.add(row)

    def update_location(self, location_id: int, **patch: Any) -> Optional[SavedLocation]:
        with Session(self.engine) as session:
            row = session.get(SavedLocationRow, location_id)
            if row is None:
                return None
            self._apply_patch(session, row, patch)
            session.commit()
            session.refresh(row)
            return _to_location(row)

    def delete_location(self, location_id: int) -> bool:
        with Session(self.engine) as session:
            row = session.get(SavedLocationRow, location_id)
            if row is None:
                return False
            # explicit delete keeps the cascade on engines without FK enforcement
            session.execute(delete(DailyAstronomyRow).where(DailyAstronomyRow.location_id == location_id))
            session.delete(row)
            session.commit()
            return True

    # Daily astronomy rows -----------------------------------------------

    def replace_range(self, location_id: int, records: Sequence[DailyAstronomyRecord]) -> int:
        if not records:
            return 0
        dates = sorted({rec.date for rec in records})
        try:
            with Session(self.engine) as session:
                if session.get(SavedLocationRow, location_id) is None:
                    raise StorageError(f"saved location {location_id} does not exist")
                for i in range(0, len(dates), _DELETE_CHUNK):
                    session.execute(
                        delete(DailyAstronomyRow).where(
                            DailyAstronomyRow.location_id == location_id,
                            DailyAstronomyRow.date.in_(dates[i : i + _DELETE_CHUNK]),  # type: ignore[attr-defined]
                        )
                    )
                rows = _to_rows(location_id, records)
                session.add_all(rows)
                session.commit()
                return len(rows)
        except SQLAlchemyError as exc:
            raise StorageError("bulk insert of daily astronomy failed", details={"location_id": location_id}) from exc

    def replace_all(self, location_id: int, records: Sequence[DailyAstronomyRecord], **patch: Any) -> SavedLocation:
        try:
            with Session(self.engine) as session:
                row = session.get(SavedLocationRow, location_id)
                if row is None:
                    raise StorageError(f"saved location {location_id} does not exist")
                self._apply_patch(session, row, patch)
                session.execute(delete(DailyAstronomyRow).where(DailyAstronomyRow.location_id == location_id))
                # leaving the block without commit rolls all of the above back
                session.add_all(_to_rows(location_id, records))
                session.commit()
                session.refresh(row)
                return _to_location(row)
        except SQLAlchemyError as exc:
            raise StorageError("replacing daily astronomy failed", details={"location_id": location_id}) from exc

    def query_range(self, location_id: int, start: datetime.date, end: datetime.date) -> List[DailyAstronomyRecord]:
        try:
            with Session(self.engine) as session:
                stmt = (
                    select(DailyAstronomyRow)
                    .where(
                        DailyAstronomyRow.location_id == location_id,
                        DailyAstronomyRow.date >= start,  # type: ignore[operator]
                        DailyAstronomyRow.date <= end,  # type: ignore[operator]
                    )
                    .order_by(DailyAstronomyRow.date)
                )
                return [_to_record(row) for row in session.exec(stmt)]
        except SQLAlchemyError as exc:
            raise StorageError("reading daily astronomy failed", details={"location_id": location_id}) from exc

    def delete_records(self, location_id: int) -> int:
        try:
            with Session(self.engine) as session:
                result = session.execute(delete(DailyAstronomyRow).where(DailyAstronomyRow.location_id == location_id))
                session.commit()
                return result.rowcount or 0
        except SQLAlchemyError as exc:
            raise StorageError("deleting daily astronomy failed", details={"location_id": location_id}) from exc

    def count_records(self, location_id: int) -> int:
        try:
            with Session(self.engine) as session:
                stmt = select(func.count()).select_from(DailyAstronomyRow).where(DailyAstronomyRow.location_id == location_id)
                return session.exec(stmt).one()
        except SQLAlchemyError as exc:
            raise StorageError("counting daily astronomy failed", details={"location_id": location_id}) from exc

    # Preferences --------------------------------------------------------

    def _prefs_row(self, session: Session) -> PreferencesRow:
        row = session.exec(select(PreferencesRow)).first()
        if row is None:
            row = PreferencesRow()
            session.add(row)
            session.commit()
            session.refresh(row)
        return row

    def get_preferences(self) -> Preferences:
        with Session(self.engine) as session:
            return _to_preferences(self._prefs_row(session))

    def save_preferences(self, prefs: Preferences) -> Preferences:
        with Session(self.engine) as session:
            row = self._prefs_row(session)
            row.active_location_id = prefs.active_location_id
            temp = prefs.temp_location
            row.temp_name = temp.name if temp else None
            row.temp_lat = temp.lat if temp else None
            row.temp_lon = temp.lon if temp else None
            row.default_view = prefs.default_view
            row.show_lunar_info = prefs.show_lunar_info
            row.show_holidays = prefs.show_holidays
            row.notifications = prefs.notifications
            session.add(row)
            session.commit()
            session.refresh(row)
            return _to_preferences(row)


def _enable_sqlite_fk(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
