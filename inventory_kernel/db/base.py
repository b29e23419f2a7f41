"""
Module: inventory_kernel.db.base
Responsibility: Declarative base for the inventory ORM models.  Fixes the
    primary-key convention, the column types used for Python annotations,
    constraint naming, and the audit columns every table carries.
Architecture position: Kernel > DB.  Lowest import target of the kernel;
    must not import domain code or any outer layer.

Invariants enforced:
    - Primary keys are uuid4 values stored as 36-character strings, so the
      schema is identical on PostgreSQL and SQLite.
    - ``Decimal`` annotations map to Numeric(20, 2): acquisition costs,
      accumulated depreciation and book values are whole cents.
    - Constraint names follow ``naming_convention``; the registration
      service relies on ``uq_inventory_assets_code`` existing.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import DateTime, MetaData, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

NAMING_CONVENTION = {
    "ix": "idx_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class UUIDString(TypeDecorator):
    """
    UUID stored as String(36).

    Binds ``UUID`` objects or UUID strings (normalised to canonical lower
    case form) and loads ``UUID`` objects.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, PyUUID):
            value = PyUUID(str(value))
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return PyUUID(value)


class Base(DeclarativeBase):
    """
    Declarative base for all inventory models.

    Guarantees:
        - ``id`` defaults to ``uuid4()``.
        - Decimal -> Numeric(20, 2) returning ``Decimal``.
        - datetime -> timezone-aware DateTime.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(20, 2, asdecimal=True),
        datetime: DateTime(timezone=True),
        PyUUID: UUIDString(),
    }

    id: Mapped[PyUUID] = mapped_column(
        UUIDString(),
        primary_key=True,
        default=uuid4,
    )


class TrackedBase(Base):
    """
    Abstract base recording who created and last changed a row, and when.

    ``created_by_id`` is mandatory.  ``updated_by_id`` stays NULL until the
    first edit through ``touch()``.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
    created_by_id: Mapped[PyUUID] = mapped_column(UUIDString(), nullable=False)
    updated_by_id: Mapped[PyUUID | None] = mapped_column(UUIDString(), nullable=True)

    def touch(self, actor_id: PyUUID | None) -> None:
        """Record ``actor_id`` as the last editor; ``None`` leaves it unchanged."""
        if actor_id is not None:
            self.updated_by_id = actor_id


# Re-export UUID for convenience
UUID = PyUUID
