"""
Base PublicApi gateway providing DTO-only CRUD operations.

A gateway is the only sanctioned entry point to one backing model. Every
read returns DTOs, lists of DTOs, or plain scalars; raw ORM records never
leave this module.
"""

import importlib
import logging
from collections.abc import Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy import func, select, update
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from dto.base import Dto
from exceptions import ConfigurationError, DatabaseError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

D = TypeVar('D', bound=Dto)

FieldErrors = Dict[str, List[str]]

# pydantic error types that mean "value is missing or blank"
_BLANK_ERRORS = {'missing', 'string_too_short', 'string_pattern_mismatch', 'none_required'}


@dataclass
class BatchCreateResult(Generic[D]):
    """
    Outcome of batch_create_detailed.

    created holds the DTOs of the rows that were saved; errors is parallel to
    the input list, with None for entries that were saved.
    """

    created: List[D] = field(default_factory=list)
    errors: List[Optional[FieldErrors]] = field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return sum(1 for errors in self.errors if errors)


def _normalize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _merge_errors(target: FieldErrors, extra: FieldErrors) -> FieldErrors:
    for name, messages in extra.items():
        target.setdefault(name, []).extend(messages)
    return target


def _pydantic_errors(error: PydanticValidationError) -> FieldErrors:
    errors: FieldErrors = {}
    for item in error.errors():
        name = str(item['loc'][0]) if item['loc'] else 'base'
        message = "can't be blank" if item['type'] in _BLANK_ERRORS else item['msg']
        errors.setdefault(name, []).append(message)
    return errors


class PublicApi(Generic[D]):
    """
    Generic gateway bound to one SQLAlchemy model and one DTO class.

    Subclasses configure:
        model_class: model class, or "module.Class" string resolved on first use
        dto_class: Dto subclass used to wrap every record
        record_schema: optional pydantic model validated before each save
        unique_fields: fields that must be unique across the table

    Usage:
        class UserPublicApi(PublicApi[UserDto]):
            model_class = "models.User"
            dto_class = UserDto

        UserPublicApi(db).find(1)
    """

    model_class: Union[Type[Any], str, None] = None
    dto_class: Optional[Type[D]] = None
    record_schema: Optional[Type[BaseModel]] = None
    unique_fields: Tuple[str, ...] = ()

    def __init__(self, db: Session, autocommit: bool = True):
        """
        Initialize the gateway.

        Args:
            db: SQLAlchemy database session
            autocommit: Commit after every write (default). When False, writes
                are only flushed and the caller owns the transaction.
        """
        self.db = db
        self.autocommit = autocommit

    # ========================================
    # Configuration
    # ========================================

    @classmethod
    def resolve_model(cls) -> Type[Any]:
        """
        Resolve model_class, importing it by name the first time.

        Raises:
            ConfigurationError: If model_class is missing or cannot be imported
        """
        cached = cls.__dict__.get('_resolved_model')
        if cached is not None:
            return cached

        target = cls.model_class
        if target is None:
            raise ConfigurationError(
                f"{cls.__name__} has no model_class configured",
                missing_keys=['model_class']
            )

        if isinstance(target, str):
            module_name, _, class_name = target.rpartition('.')
            try:
                model = getattr(importlib.import_module(module_name), class_name)
            except (ImportError, AttributeError, ValueError) as e:
                raise ConfigurationError(
                    f"Cannot resolve model_class {target!r} for {cls.__name__}"
                ) from e
        else:
            model = target

        cls._resolved_model = model
        return model

    @classmethod
    def resolve_dto(cls) -> Type[D]:
        if cls.dto_class is None:
            raise ConfigurationError(
                f"{cls.__name__} has no dto_class configured",
                missing_keys=['dto_class']
            )
        return cls.dto_class

    @property
    def model(self) -> Type[Any]:
        return self.resolve_model()

    def _columns(self) -> Dict[str, Any]:
        mapper = sa_inspect(self.model)
        return {attr.key: getattr(self.model, attr.key) for attr in mapper.column_attrs}

    def _primary_key(self):
        mapper = sa_inspect(self.model)
        return getattr(self.model, mapper.get_property_by_column(mapper.primary_key[0]).key)

    def _column(self, name: str):
        column = self._columns().get(name)
        if column is None:
            raise ConfigurationError(f"{self.model.__name__} has no field '{name}'")
        return column

    def _conditions(self, predicate: Mapping) -> list:
        """Translate an exact-equality predicate map into SQL conditions."""
        conditions = []
        for name, value in predicate.items():
            column = self._column(name)
            if isinstance(value, (list, tuple, set, frozenset)):
                conditions.append(column.in_([_normalize(v) for v in value]))
            elif value is None:
                conditions.append(column.is_(None))
            else:
                conditions.append(column == _normalize(value))
        return conditions

    def _select(self, predicate: Optional[Mapping] = None) -> Select:
        stmt = select(self.model)
        if predicate:
            stmt = stmt.where(*self._conditions(predicate))
        return stmt.order_by(self._primary_key())

    # ========================================
    # Wrapping
    # ========================================

    def wrap(self, record: Any) -> Optional[D]:
        """Wrap a single record into its DTO (None stays None)."""
        if record is None:
            return None
        return self.resolve_dto()(record)

    def wrap_collection(self, records) -> List[D]:
        """Wrap records into DTOs, preserving order."""
        return [self.wrap(record) for record in records]

    # ========================================
    # Read operations
    # ========================================

    def find(self, id: Any) -> Optional[D]:
        """Find a record by primary key, or None."""
        return self.wrap(self.db.get(self.model, id))

    def find_by(self, **predicate: Any) -> Optional[D]:
        """First record matching all predicate fields, or None."""
        record = self.db.scalars(self._select(predicate).limit(1)).first()
        return self.wrap(record)

    def all(self) -> List[D]:
        return self.wrap_collection(self.db.scalars(self._select()).all())

    def where(self, **predicate: Any) -> List[D]:
        """
        All records matching the predicate.

        A list/tuple/set value matches any of its members.
        """
        return self.wrap_collection(self.db.scalars(self._select(predicate)).all())

    def first(self, limit: int = 1) -> Union[Optional[D], List[D]]:
        """
        First record by primary key, or the first `limit` records.

        Returns:
            A single DTO (or None) when limit == 1, otherwise a list
        """
        if limit < 0:
            raise ValueError("limit must be non-negative")
        records = self.db.scalars(self._select().limit(limit)).all()
        if limit == 1:
            return self.wrap(records[0] if records else None)
        return self.wrap_collection(records)

    def last(self, limit: int = 1) -> Union[Optional[D], List[D]]:
        """
        Last record by primary key, or the last `limit` records in ascending order.
        """
        if limit < 0:
            raise ValueError("limit must be non-negative")
        stmt = select(self.model).order_by(self._primary_key().desc()).limit(limit)
        records = list(reversed(self.db.scalars(stmt).all()))
        if limit == 1:
            return self.wrap(records[0] if records else None)
        return self.wrap_collection(records)

    def count(self) -> int:
        return self.db.scalar(select(func.count()).select_from(self.model))

    def count_where(self, **predicate: Any) -> int:
        stmt = select(func.count()).select_from(self.model).where(*self._conditions(predicate))
        return self.db.scalar(stmt)

    def exists(self, **predicate: Any) -> bool:
        stmt = select(self._primary_key()).where(*self._conditions(predicate)).limit(1)
        return self.db.scalars(stmt).first() is not None

    def pluck(self, *fields: str) -> list:
        """
        Raw column values, bypassing DTO construction.

        Returns:
            A list of scalars for one field, or of tuples for several
        """
        return self.pluck_where({}, *fields)

    def pluck_where(self, predicate: Mapping, *fields: str) -> list:
        if not fields:
            raise ValueError("pluck requires at least one field")

        columns = [self._column(name) for name in fields]
        stmt = select(*columns).where(*self._conditions(predicate)).order_by(self._primary_key())
        if len(columns) == 1:
            return list(self.db.scalars(stmt).all())
        return [tuple(row) for row in self.db.execute(stmt).all()]

    def query(self, refine: Callable[[Select], Select]) -> List[D]:
        """
        Run a custom query and wrap the results.

        Args:
            refine: Receives select(model) and returns a refined Select

        Example:
            api.query(lambda q: q.where(User.role == "admin").order_by(User.email))
        """
        records = self.db.scalars(refine(select(self.model))).all()
        for record in records:
            if not isinstance(record, self.model):
                raise ConfigurationError(
                    f"{type(self).__name__}.query must select {self.model.__name__} rows, "
                    f"got {type(record).__name__}"
                )
        return self.wrap_collection(records)

    # ========================================
    # Validation and persistence helpers
    # ========================================

    def _assign(self, record: Any, attributes: Mapping) -> FieldErrors:
        columns = self._columns()
        errors: FieldErrors = {}
        for name, value in attributes.items():
            if name not in columns:
                errors.setdefault(name, []).append(f"is not an attribute of {self.model.__name__}")
                continue
            setattr(record, name, _normalize(value))
        return errors

    def _validate(self, record: Any) -> FieldErrors:
        # Pending changes on `record` must not be flushed by the lookups below
        with self.db.no_autoflush:
            values = {name: getattr(record, name) for name in self._columns()}
            errors: FieldErrors = {}

            if self.record_schema is not None:
                data = {name: value for name, value in values.items() if value is not None}
                try:
                    self.record_schema.model_validate(data)
                except PydanticValidationError as e:
                    _merge_errors(errors, _pydantic_errors(e))

            primary_key = self._primary_key()
            record_id = values[primary_key.key]
            for name in self.unique_fields:
                if values[name] is None:
                    continue
                stmt = select(primary_key).where(self._column(name) == values[name])
                if record_id is not None:
                    stmt = stmt.where(primary_key != record_id)
                if self.db.scalars(stmt.limit(1)).first() is not None:
                    errors.setdefault(name, []).append("has already been taken")

        return errors

    def _discard(self, record: Any) -> None:
        """Throw away unsaved attribute changes on a persistent record."""
        if sa_inspect(record).persistent:
            self.db.expire(record)

    def _commit(self) -> None:
        if self.autocommit:
            self.db.commit()
        else:
            self.db.flush()

    @contextmanager
    def _transaction(self, operation: str):
        """
        Run a write inside a SAVEPOINT.

        A constraint violation rolls back only this savepoint, so the
        session (and the caller's earlier writes) stays usable.

        Raises:
            DatabaseError: If the database rejected the write
        """
        try:
            with self.db.begin_nested():
                yield
        except IntegrityError as e:
            raise DatabaseError(operation, f"{self.model.__name__} {operation} failed: {e.orig}") from e
        self._commit()

    def _write(self, record: Any, attributes: Mapping) -> FieldErrors:
        try:
            with self.db.begin_nested():
                errors = self._assign(record, attributes)
                if not errors:
                    errors = self._validate(record)
                if errors:
                    self._discard(record)
                    return errors
                self.db.add(record)
                self.db.flush()
        except IntegrityError as e:
            logger.debug(f"{self.model.__name__} rejected by database: {e.orig}")
            return {'base': [str(e.orig)]}
        self._commit()
        return {}

    def _raise_invalid(self, errors: FieldErrors) -> None:
        messages = ", ".join(f"{name} {message}" for name, items in errors.items() for message in items)
        raise ValidationError(f"{self.model.__name__} validation failed: {messages}", invalid_fields=errors)

    # ========================================
    # CRUD Operations
    # ========================================

    def _create(self, attributes: Mapping) -> Tuple[Any, FieldErrors]:
        record = self.model()
        errors = self._write(record, attributes)
        if not errors:
            logger.debug(f"{self.model.__name__} created id={getattr(record, self._primary_key().key)}")
        return record, errors

    def create(self, **attributes: Any) -> Optional[D]:
        """
        Create a new record.

        Returns:
            DTO, or None if validation failed
        """
        record, errors = self._create(attributes)
        return None if errors else self.wrap(record)

    def create_or_raise(self, **attributes: Any) -> D:
        """
        Create a new record.

        Raises:
            ValidationError: With field messages if validation failed
        """
        record, errors = self._create(attributes)
        if errors:
            self._raise_invalid(errors)
        return self.wrap(record)

    def batch_create(self, attributes_list: List[Mapping]) -> List[D]:
        """
        Create several records, one save per entry.

        Entries that fail validation are skipped; use batch_create_detailed
        to learn which ones and why.
        """
        return self.batch_create_detailed(attributes_list).created

    def batch_create_detailed(self, attributes_list: List[Mapping]) -> BatchCreateResult[D]:
        result: BatchCreateResult[D] = BatchCreateResult()
        for attributes in attributes_list:
            record, errors = self._create(attributes)
            if errors:
                result.errors.append(errors)
            else:
                result.created.append(self.wrap(record))
                result.errors.append(None)
        return result

    def update(self, id: Any, **attributes: Any) -> Optional[D]:
        """
        Update a record by primary key.

        Returns:
            DTO, or None if the record does not exist or validation failed
        """
        record = self.db.get(self.model, id)
        if record is None:
            return None
        if self._write(record, attributes):
            return None
        logger.debug(f"{self.model.__name__} updated id={id}")
        return self.wrap(record)

    def update_or_raise(self, id: Any, **attributes: Any) -> D:
        """
        Update a record by primary key.

        Raises:
            NotFoundError: If no record has this id
            ValidationError: If validation failed
        """
        record = self.db.get(self.model, id)
        if record is None:
            raise NotFoundError(self.model.__name__, id)
        errors = self._write(record, attributes)
        if errors:
            self._raise_invalid(errors)
        logger.debug(f"{self.model.__name__} updated id={id}")
        return self.wrap(record)

    def update_by(self, predicate: Mapping, **attributes: Any) -> int:
        """
        Bulk update matching records without validation.

        Returns:
            Number of rows updated
        """
        if not attributes:
            return 0
        values = {self._column(name).key: _normalize(value) for name, value in attributes.items()}
        stmt = update(self.model).where(*self._conditions(predicate)).values(**values)
        with self._transaction("update_by"):
            result = self.db.execute(stmt.execution_options(synchronize_session='fetch'))
        logger.debug(f"{self.model.__name__} bulk update touched {result.rowcount} rows")
        return result.rowcount

    def delete(self, id: Any) -> bool:
        """
        Delete a record by primary key.

        Returns:
            True if deleted, False if not found
        """
        record = self.db.get(self.model, id)
        if record is None:
            return False
        with self._transaction("delete"):
            self.db.delete(record)
            self.db.flush()
        logger.debug(f"{self.model.__name__} deleted id={id}")
        return True

    def delete_or_raise(self, id: Any) -> bool:
        """
        Delete a record by primary key.

        Raises:
            NotFoundError: If no record has this id
        """
        if not self.delete(id):
            raise NotFoundError(self.model.__name__, id)
        return True

    def _destroy(self, operation: str, stmt: Select) -> int:
        records = self.db.scalars(stmt).all()
        with self._transaction(operation):
            for record in records:
                self.db.delete(record)
            self.db.flush()
        return len(records)

    def delete_by(self, **predicate: Any) -> int:
        """
        Delete every record matching the predicate (ORM cascades run).

        Returns:
            Number of records deleted
        """
        count = self._destroy("delete_by", self._select(predicate))
        logger.debug(f"{self.model.__name__} deleted {count} rows matching {predicate}")
        return count

    def delete_all(self) -> int:
        """
        Delete every record of the model.

        Returns:
            Number of records deleted
        """
        count = self._destroy("delete_all", self._select())
        logger.info(f"{self.model.__name__} table cleared ({count} rows)")
        return count

    def upsert(self, find_attributes: Mapping, **update_attributes: Any) -> D:
        """
        Find a record by find_attributes (or build one from them), apply
        update_attributes and save.

        Raises:
            ValidationError: If the merged record is invalid
        """
        record = self.db.scalars(self._select(find_attributes).limit(1)).first()
        if record is None:
            record = self.model()
            attributes = {**find_attributes, **update_attributes}
        else:
            attributes = update_attributes

        errors = self._write(record, attributes)
        if errors:
            self._raise_invalid(errors)
        return self.wrap(record)
