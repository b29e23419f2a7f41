"""
Module ORM Registry (``inventory_modules._orm_registry``).

Responsibility
--------------
Ensure every module-level SQLAlchemy ORM model is imported so that
``Base.metadata`` contains its table definition before tables are created.

Architecture position
---------------------
**Modules layer** -- utility.  Called lazily by
``inventory_kernel.db.engine.create_tables``; nothing else in the kernel
may import it.
"""


def import_all_orm_models() -> None:
    """Import every ``inventory_modules.*.orm`` module to register ORM models.

    This function is idempotent -- repeated calls are harmless.
    """
    import inventory_modules.assets.orm  # noqa: F401
