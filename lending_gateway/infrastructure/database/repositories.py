"""Data access layer - record store over SQLAlchemy sessions"""

import uuid
from typing import Any, Dict, List, Optional
from sqlalchemy import Uuid
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from lending_gateway.domain.exceptions import ConflictError, StoreUnavailableError
from lending_gateway.domain.store import LOANS, REFERRALS, Record
from lending_gateway.infrastructure.database.models import Base, LoanRecord, ReferralRecord

COLLECTIONS = {
    LOANS: LoanRecord,
    REFERRALS: ReferralRecord,
}


class SqlRecordStore:
    """
    RecordStore implementation; every write commits on its own.

    Uniqueness violations surface as ConflictError, any other database
    failure as StoreUnavailableError. The session is rolled back in both
    cases so it stays usable for the rest of the request.
    """

    def __init__(self, db: Session):
        self.db = db

    def insert(self, collection: str, record: Record) -> Record:
        """Add a row and return it as stored, with id and defaults filled in"""
        row = self._model(collection)(**record)
        self.db.add(row)
        self._commit(collection)
        return self._refresh(row)

    def get_one(self, collection: str, filters: Record) -> Optional[Record]:
        """First row matching all filters, or None"""
        model = self._model(collection)
        conditions = self._conditions(model, filters)
        if conditions is None:
            return None

        try:
            row = self.db.query(model).filter(*conditions).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreUnavailableError(f"Lookup in {collection} failed: {e}") from e

        return self._to_record(row) if row is not None else None

    def list_ordered(
        self,
        collection: str,
        filters: Record,
        order_by: str,
        descending: bool = True,
    ) -> List[Record]:
        """Rows matching all filters, sorted on one column"""
        model = self._model(collection)
        conditions = self._conditions(model, filters)
        if conditions is None:
            return []

        column = getattr(model, order_by)
        try:
            rows = (
                self.db.query(model)
                .filter(*conditions)
                .order_by(column.desc() if descending else column.asc())
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreUnavailableError(f"Listing {collection} failed: {e}") from e

        return [self._to_record(row) for row in rows]

    def upsert(self, collection: str, key: str, record: Record) -> Record:
        """Update the row whose `key` column matches, inserting if there is none"""
        model = self._model(collection)
        try:
            row = self.db.query(model).filter(getattr(model, key) == record[key]).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreUnavailableError(f"Lookup in {collection} failed: {e}") from e

        if row is None:
            return self.insert(collection, record)

        for field, value in record.items():
            setattr(row, field, value)
        self._commit(collection)
        return self._refresh(row)

    @staticmethod
    def _model(collection: str) -> type:
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}") from None

    @staticmethod
    def _conditions(model: type, filters: Record) -> Optional[List[Any]]:
        """Equality conditions; None when a value can never match (malformed UUID)"""
        conditions = []
        for key, value in filters.items():
            column = model.__table__.columns[key]
            if isinstance(column.type, Uuid) and not isinstance(value, uuid.UUID):
                try:
                    value = uuid.UUID(str(value))
                except ValueError:
                    return None
            conditions.append(getattr(model, key) == value)
        return conditions

    @staticmethod
    def _to_record(row: Base) -> Dict[str, Any]:
        return {column.key: getattr(row, column.key) for column in row.__table__.columns}

    def _commit(self, collection: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(f"Duplicate record in {collection}") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreUnavailableError(f"Write to {collection} failed: {e}") from e

    def _refresh(self, row: Base) -> Record:
        try:
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreUnavailableError(f"Reading back {row.__tablename__} failed: {e}") from e
        return self._to_record(row)
