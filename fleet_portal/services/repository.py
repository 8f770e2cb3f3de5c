# fleet_portal/services/repository.py
"""
Entity repositories.

Two layers per entity:
  - SqlDataAccess: the data-access collaborator. fetch_all / create / update /
    delete against one SQLAlchemy model. The store assigns id, created_at and
    updated_at. Any SQLAlchemy failure is rolled back and re-raised as
    DataAccessError.
  - Repository: the in-memory collection the rest of the core works on.
    refresh() replaces the collection only when the fetch succeeds, so a failed
    refresh leaves the previous view intact. Reads are location-filtered through
    the access policy; writes check the same policy first.
"""

from contextlib import contextmanager
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fleet_portal.exceptions import DataAccessError, RecordNotFound, ValidationError
from fleet_portal.models.booking import Booking
from fleet_portal.models.parts_order import PartsOrder
from fleet_portal.models.service_record import ServiceRecord
from fleet_portal.models.trainer import Trainer
from fleet_portal.models.user import User
from fleet_portal.models.vehicle import Vehicle
from fleet_portal.schemas.actor import Actor
from fleet_portal.services.access_policy import can_access, can_access_location, filter_records
from fleet_portal.utils.logger import get_logger
from fleet_portal.utils.time_utils import utcnow

logger = get_logger(__name__)

DEFERRED_COMMIT = "deferred_commit"


@contextmanager
def unit_of_work(db: Session):
    """
    Run several data-access writes as one commit.

    Writes inside the block only flush. The block commits once on exit; any
    exception rolls every write back and is re-raised.
    """
    if db.info.get(DEFERRED_COMMIT):
        yield db
        return
    db.info[DEFERRED_COMMIT] = True
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise DataAccessError(f"Transaction failed: {e}") from e
    except Exception:
        db.rollback()
        raise
    finally:
        db.info.pop(DEFERRED_COMMIT, None)


class SqlDataAccess:
    """Data-access collaborator for one ORM model."""

    def __init__(self, db: Session, model, order_by=None):
        self.db = db
        self.model = model
        self.order_by = order_by if order_by is not None else (model.created_at.desc(), model.id.desc())

    @property
    def name(self) -> str:
        return self.model.__tablename__

    def _commit(self) -> None:
        # Inside unit_of_work the caller commits once for all writes.
        if self.db.info.get(DEFERRED_COMMIT):
            self.db.flush()
        else:
            self.db.commit()

    def fetch_all(self) -> list:
        try:
            return self.db.query(self.model).order_by(*self.order_by).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DataAccessError(f"Failed to load {self.name}: {e}") from e

    def get(self, record_id: int):
        try:
            return self.db.get(self.model, record_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DataAccessError(f"Failed to load {self.name} #{record_id}: {e}") from e

    def create(self, fields: dict):
        now = utcnow()
        record = self.model(**fields)
        if hasattr(self.model, "created_at"):
            record.created_at = now
            record.updated_at = now
        try:
            self.db.add(record)
            self._commit()
            self.db.refresh(record)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DataAccessError(f"Failed to create {self.name}: {e}") from e
        return record

    def update(self, record_id: int, fields: dict):
        record = self.get(record_id)
        if record is None:
            raise RecordNotFound(f"{self.name} #{record_id} not found")
        for key, value in fields.items():
            setattr(record, key, value)
        if hasattr(self.model, "updated_at"):
            record.updated_at = utcnow()
        try:
            self._commit()
            self.db.refresh(record)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DataAccessError(f"Failed to update {self.name} #{record_id}: {e}") from e
        return record

    def delete(self, record_id: int) -> None:
        record = self.get(record_id)
        if record is None:
            raise RecordNotFound(f"{self.name} #{record_id} not found")
        try:
            self.db.delete(record)
            self._commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DataAccessError(f"Failed to delete {self.name} #{record_id}: {e}") from e


class Repository:
    """Location-scoped, refreshable view over one entity collection."""

    def __init__(self, data_access, location_field: str = "location", location_required: bool = True):
        self.data_access = data_access
        self.location_field = location_field
        self.location_required = location_required
        self.records: list = []
        self.error: Optional[str] = None
        self.loaded = False

    @property
    def name(self) -> str:
        return getattr(self.data_access, "name", type(self).__name__)

    def refresh(self) -> bool:
        """Reload from the store. On failure keep the current records and record the error."""
        try:
            records = self.data_access.fetch_all()
        except DataAccessError as e:
            self.error = e.message
            logger.error(f"[{self.name}] refresh failed, keeping {len(self.records)} cached records: {e.message}")
            return False
        self.records = list(records)
        self.error = None
        self.loaded = True
        return True

    def load(self) -> list:
        """Refresh and return all records, raising DataAccessError if the store is down."""
        if not self.refresh():
            raise DataAccessError(self.error or f"Failed to load {self.name}")
        return self.records

    def visible(self, actor: Optional[Actor]) -> list:
        return filter_records(actor, self.records)

    def find(self, actor: Optional[Actor], record_id: int):
        """Visible record by id. Missing and hidden records both raise RecordNotFound."""
        if not self.loaded:
            self.load()
        for record in self.records:
            if record.id == record_id and can_access(actor, record):
                return record
        raise RecordNotFound(f"{self.name} #{record_id} not found")

    def _check_location(self, actor: Optional[Actor], fields: dict) -> None:
        if self.location_field not in fields:
            return
        if not fields[self.location_field] and self.location_required:
            raise ValidationError("Location is required", field=self.location_field)
        if not can_access_location(actor, fields[self.location_field]):
            raise ValidationError(
                f"Location '{fields[self.location_field]}' is outside your assigned location",
                field=self.location_field,
            )

    def create(self, actor: Optional[Actor], fields: dict):
        self._check_location(actor, fields)
        record = self.data_access.create(fields)
        self.records.insert(0, record)
        logger.info(f"[{self.name}] created #{record.id}")
        return record

    def update(self, actor: Optional[Actor], record_id: int, fields: dict):
        self.find(actor, record_id)
        self._check_location(actor, fields)
        record = self.data_access.update(record_id, fields)
        self.records = [record if r.id == record_id else r for r in self.records]
        logger.info(f"[{self.name}] updated #{record_id}: {sorted(fields)}")
        return record

    def delete(self, actor: Optional[Actor], record_id: int) -> None:
        self.find(actor, record_id)
        self.data_access.delete(record_id)
        self.records = [r for r in self.records if r.id != record_id]
        logger.info(f"[{self.name}] deleted #{record_id}")


# Where each entity keeps its location, for write-side policy checks.
LOCATION_FIELDS: dict[Any, str] = {
    Vehicle: "location",
    Booking: "requested_location",
    User: "location",
    Trainer: "location",
    ServiceRecord: "academy_location",
    PartsOrder: "location",
}

# Users may be unassigned (trainers, super admins); user_service enforces per-role rules.
OPTIONAL_LOCATION = {User}


def repository_for(db: Session, model) -> Repository:
    return Repository(SqlDataAccess(db, model), location_field=LOCATION_FIELDS[model],
                      location_required=model not in OPTIONAL_LOCATION)
