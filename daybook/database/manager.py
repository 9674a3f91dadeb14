#!/usr/bin/env python3
"""
manager.py
----------
Entry point to the daybook SQLite store.

DaybookDB owns the engine, the session factory and the Alembic
configuration. Work happens inside ``session_scope()``, which commits on
success, rolls back on any exception and exposes one manager per entity
(``db.users``, ``db.chapters``, ``db.periods``, ...) bound to that session.

Connections are opened with foreign keys enforced and with the DBAPI's own
transaction handling disabled, so SQLAlchemy emits BEGIN and SAVEPOINT
itself. Period mutations depend on this to run inside nested transactions.
Every transaction starts with BEGIN IMMEDIATE: a second writer waits on
SQLite's busy timeout when it begins, instead of failing halfway through
a read-check-write sequence while holding a shared lock.

Example:
    db = DaybookDB("~/.daybook/data/daybook.db", log_dir="~/.daybook/logs")
    with db.session_scope():
        user = db.users.create({"name": "Ada", "timezone": "Europe/Berlin"})
        chapter = db.chapters.create_chapter(user.id, {...})
        db.periods.create_period(user.id, chapter["id"], "2024-01-01")

On first open the schema is built from the models and stamped at the Alembic
head; later opens apply any pending revisions.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union
from uuid import uuid4

# --- Third party imports ---
from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import Engine, create_engine, event, inspect
from sqlalchemy.orm import Session, sessionmaker

# --- Local imports ---
from daybook.core.exceptions import DatabaseError
from daybook.core.logging_manager import DaybookLogger, safe_logger
from daybook.core.paths import MIGRATIONS_DIR
from .decorators import handle_db_errors, log_database_operation
from .managers import (
    CategoryManager,
    ChapterManager,
    DayManager,
    MoodStateManager,
    PeriodManager,
    UserManager,
)
from .models import Base

PathLike = Union[str, Path]


def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _on_begin(connection: Any) -> None:
    # Take the writer lock up front so lock waits happen before any read
    connection.exec_driver_sql("BEGIN IMMEDIATE")


class DaybookDB:
    """
    Engine, sessions and migrations of one daybook database file.

    Attributes:
        db_path: Resolved path of the SQLite file
        alembic_dir: Resolved path of the migration scripts
        engine: SQLAlchemy engine
        SessionLocal: Session factory bound to the engine
        alembic_cfg: Alembic configuration pointing at db_path
        logger: DaybookLogger for the 'database' component, or None
    """

    _MANAGERS = {
        "users": UserManager,
        "categories": CategoryManager,
        "mood_states": MoodStateManager,
        "days": DayManager,
        "chapters": ChapterManager,
        "periods": PeriodManager,
    }

    def __init__(
        self,
        db_path: PathLike,
        alembic_dir: PathLike = MIGRATIONS_DIR,
        log_dir: Optional[PathLike] = None,
    ) -> None:
        self.db_path = Path(db_path).expanduser().resolve()
        self.alembic_dir = Path(alembic_dir).expanduser().resolve()
        self.logger: Optional[DaybookLogger] = (
            DaybookLogger(Path(log_dir).expanduser().resolve(), component_name="database")
            if log_dir
            else None
        )
        self._managers: Dict[str, Any] = {}

        log = safe_logger(self.logger)
        log.log_operation("open_database", {"db_path": str(self.db_path)})
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self.engine: Engine = create_engine(
                f"sqlite:///{self.db_path}", pool_pre_ping=True
            )
            event.listen(self.engine, "connect", _on_connect)
            event.listen(self.engine, "begin", _on_begin)
            self.SessionLocal: sessionmaker = sessionmaker(
                bind=self.engine, autoflush=True, expire_on_commit=False
            )
            self.alembic_cfg = Config()
            self.alembic_cfg.set_main_option("script_location", str(self.alembic_dir))
            self.alembic_cfg.set_main_option("sqlalchemy.url", f"sqlite:///{self.db_path}")
            self.initialize_schema()
        except DatabaseError:
            raise
        except Exception as e:
            log.log_error(e, {"operation": "open_database"})
            raise DatabaseError(f"Could not open database {self.db_path}: {e}") from e

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Unit of work: commit on exit, roll back and re-raise on error.

        Entity managers are reachable as properties of the DaybookDB only
        while the scope is open.
        """
        session = self.SessionLocal()
        scope_id = uuid4().hex[:8]
        log = safe_logger(self.logger)
        self._managers = {
            name: cls(session, self.logger) for name, cls in self._MANAGERS.items()
        }
        log.log_debug("scope_open", {"scope": scope_id})
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            log.log_error(e, {"operation": "scope_rollback", "scope": scope_id})
            raise
        finally:
            self._managers = {}
            session.close()
            log.log_debug("scope_closed", {"scope": scope_id})

    def get_session(self) -> Session:
        """A bare session; the caller commits and closes it."""
        return self.SessionLocal()

    def _manager(self, name: str) -> Any:
        try:
            return self._managers[name]
        except KeyError:
            raise DatabaseError(
                f"db.{name} requires an active session; "
                f"use it inside 'with db.session_scope():'"
            ) from None

    @property
    def users(self) -> UserManager:
        return self._manager("users")

    @property
    def categories(self) -> CategoryManager:
        return self._manager("categories")

    @property
    def mood_states(self) -> MoodStateManager:
        return self._manager("mood_states")

    @property
    def days(self) -> DayManager:
        return self._manager("days")

    @property
    def chapters(self) -> ChapterManager:
        return self._manager("chapters")

    @property
    def periods(self) -> PeriodManager:
        return self._manager("periods")

    # -------------------------------------------------------------------------
    # Migrations
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("initialize_schema")
    def initialize_schema(self) -> None:
        """Build and stamp an empty database, or upgrade an existing one."""
        existing = inspect(self.engine).get_table_names()
        if existing:
            self.upgrade_database()
            return
        Base.metadata.create_all(self.engine)
        command.stamp(self.alembic_cfg, "head")
        safe_logger(self.logger).log_operation(
            "schema_created", {"tables": sorted(Base.metadata.tables)}
        )

    @handle_db_errors
    @log_database_operation("upgrade_database")
    def upgrade_database(self, revision: str = "head") -> None:
        try:
            command.upgrade(self.alembic_cfg, revision)
        except Exception as e:
            raise DatabaseError(f"Upgrade to {revision} failed: {e}") from e

    @handle_db_errors
    @log_database_operation("downgrade_database")
    def downgrade_database(self, revision: str) -> None:
        try:
            command.downgrade(self.alembic_cfg, revision)
        except Exception as e:
            raise DatabaseError(f"Downgrade to {revision} failed: {e}") from e

    def get_migration_history(self) -> Dict[str, Optional[str]]:
        """
        Revision stamped in the database compared with the newest script.

        Returns:
            {'current_revision', 'head_revision', 'status'} where status is
            'up_to_date' or 'needs_migration'; {'error': message} on failure
        """
        try:
            head = ScriptDirectory.from_config(self.alembic_cfg).get_current_head()
            with self.engine.connect() as conn:
                current = MigrationContext.configure(conn).get_current_revision()
        except Exception as e:
            safe_logger(self.logger).log_error(e, {"operation": "get_migration_history"})
            return {"error": str(e)}
        return {
            "current_revision": current,
            "head_revision": head,
            "status": "up_to_date" if current is not None and current == head else "needs_migration",
        }

    def dispose(self) -> None:
        """Close pooled connections."""
        self.engine.dispose()

    def __enter__(self) -> "DaybookDB":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()
