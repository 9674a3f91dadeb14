#!/usr/bin/env python3
"""
base_manager.py
---------------
Shared plumbing for the entity managers.

Every manager works on a session it does not own: it flushes, never
commits. Lookups of user data go through ``_get_owned`` so a row of another
user is indistinguishable from a missing one. Mutations that must validate
against current rows before writing use ``run_in_transaction``, which runs
them in a savepoint after locking a parent row and retries when SQLite
reports the database as locked.

Example:
    class MoodStateManager(BaseManager):
        def delete(self, user_id: int, mood_state_id: int) -> None:
            with DatabaseOperation(self.logger, "delete_mood_state"):
                mood = self._get_owned(MoodState, mood_state_id, user_id, "mood_state")
                ...
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import time
from abc import ABC
from typing import Any, Callable, List, Optional, Protocol, Tuple, Type, TypeVar

# --- Third party imports ---
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Mapped, Session

# --- Local imports ---
from daybook.core.exceptions import DatabaseError, NotFoundError
from daybook.core.logging_manager import DaybookLogger, safe_logger

LOCK_RETRIES = 3
LOCK_BACKOFF = 0.1


class HasId(Protocol):
    """Any mapped class with an integer primary key named ``id``."""

    id: Mapped[int]


T = TypeVar("T", bound=HasId)
R = TypeVar("R")


class _Unset:
    """Marks a keyword the caller did not pass, so None can mean 'clear'."""

    _instance: Optional["_Unset"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def _is_lock_error(error: OperationalError) -> bool:
    text = str(error).lower()
    return "locked" in text or "busy" in text


class BaseManager(ABC):
    """
    Common state and helpers of all managers.

    Attributes:
        session: Session shared with the caller's unit of work
        logger: Optional DaybookLogger
    """

    def __init__(self, session: Session, logger: Optional[DaybookLogger] = None):
        self.session = session
        self.logger = logger

    def run_in_transaction(
        self,
        work: Callable[[], R],
        lock: Optional[Tuple[Any, int]] = None,
    ) -> R:
        """
        Run ``work`` atomically inside the caller's transaction.

        A savepoint wraps the call. When ``lock`` names a (model, id) row it
        is selected FOR UPDATE first; SQLite ignores the clause and relies on
        its single writer lock. An exception rolls back only the savepoint
        and propagates. Lock contention is retried with exponential backoff.

        Returns:
            The value returned by ``work``
        """
        for attempt in range(1, LOCK_RETRIES + 1):
            try:
                with self.session.begin_nested():
                    if lock is not None:
                        model, row_id = lock
                        self.session.execute(
                            select(model).where(model.id == row_id).with_for_update()
                        )
                    result = work()
                    self.session.flush()
                return result
            except OperationalError as e:
                if not _is_lock_error(e) or attempt == LOCK_RETRIES:
                    raise
                delay = LOCK_BACKOFF * 2 ** (attempt - 1)
                safe_logger(self.logger).log_debug(
                    "database locked", {"attempt": attempt, "retry_in": delay}
                )
                time.sleep(delay)
        raise DatabaseError("transaction retries exhausted")

    def _get_by_id(self, model_class: Type[T], entity_id: Optional[int]) -> Optional[T]:
        if entity_id is None:
            return None
        return self.session.get(model_class, entity_id)

    def _find_owned(
        self, model_class: Type[T], entity_id: int, user_id: int
    ) -> Optional[T]:
        entity = self._get_by_id(model_class, entity_id)
        if entity is not None and getattr(entity, "user_id", None) == user_id:
            return entity
        return None

    def _get_owned(
        self,
        model_class: Type[T],
        entity_id: int,
        user_id: int,
        entity_name: str,
    ) -> T:
        """
        Row of ``model_class`` owned by ``user_id``.

        Raises:
            NotFoundError: '<entity_name>_not_found', also for rows of other users
        """
        entity = self._find_owned(model_class, entity_id, user_id)
        if entity is None:
            raise NotFoundError(entity_name, {f"{entity_name}_id": entity_id})
        return entity

    def _get_all(self, model_class: Type[T], *order_by: Any, **filters: Any) -> List[T]:
        """Rows matching equality ``filters``, sorted by ``order_by``."""
        stmt = select(model_class).filter_by(**filters).order_by(*order_by)
        return list(self.session.scalars(stmt))

    def _count(self, model_class: Type[T], **filters: Any) -> int:
        stmt = select(func.count()).select_from(model_class).filter_by(**filters)
        return self.session.scalar(stmt) or 0
