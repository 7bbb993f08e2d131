"""Database layer (SQLAlchemy/Alembic) for the expense store.

Public exports
--------------
- ``Base`` and ``metadata`` for Alembic autogenerate/targeting
- ``ExpenseRow`` ORM model
- Engine/session helpers from ``expense_analysis.db.client``
"""

from __future__ import annotations

from .client import dispose_engines, get_engine, get_session, session_scope
from .models import Base, ExpenseRow

metadata = Base.metadata

__all__ = [
    "Base",
    "ExpenseRow",
    "dispose_engines",
    "get_engine",
    "get_session",
    "metadata",
    "session_scope",
]
