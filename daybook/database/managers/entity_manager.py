#!/usr/bin/env python3
"""
entity_manager.py
-----------------
Config-driven manager for per-user reference data: Category, MoodState.

Both entities share the same life cycle: a user owns a list of named,
colored, ordered records, some of them seeded as system defaults, and a
record cannot be deleted while other rows reference it. Each entity type is
configured via an EntityManagerConfig that specifies:
- The model class and error-code entity name
- Scalar field normalizers
- The relationship whose rows block deletion
- The default records seeded for new users
- Preset records a user can create under a name of their choosing

Entity-specific logic is handled through hook overrides in subclasses.

Usage:
    class MoodStateManager(EntityManager):
        def __init__(self, session, logger=None):
            super().__init__(session, logger, MOOD_STATE_CONFIG)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

# --- Third party imports ---
from sqlalchemy import func, select
from sqlalchemy.orm import Session

# --- Local imports ---
from daybook.core.exceptions import (
    DatabaseError,
    InUseError,
    RecommendationNotFoundError,
    ValidationError,
)
from daybook.core.logging_manager import DaybookLogger, safe_logger
from daybook.core.validators import DataValidator
from daybook.database.decorators import DatabaseOperation
from .base_manager import BaseManager


@dataclass
class EntityManagerConfig:
    """
    Configuration for an entity manager.

    Attributes:
        model_class: SQLAlchemy model class (must have user_id, name, order)
        entity_name: snake_case name used in logs and error codes
        scalar_fields: (field_name, normalizer) pairs accepted on create/update
        required_fields: Fields that must be present on create
        usage: (model_class, foreign_key_attr) whose rows block deletion
        defaults: Seed records for seed_defaults()
        recommendations: Presets keyed by 'key' for create_from_recommendation()
    """

    model_class: Type
    entity_name: str
    scalar_fields: List[Tuple[str, Callable[[Any], Any]]] = field(default_factory=list)
    required_fields: List[str] = field(default_factory=list)
    usage: Optional[Tuple[Type, str]] = None
    defaults: List[Dict[str, Any]] = field(default_factory=list)
    recommendations: List[Dict[str, Any]] = field(default_factory=list)


class EntityManager(BaseManager):
    """
    Config-driven manager for user-owned reference entities.

    Subclasses may override:
        - _validate_create(): Add entity-specific validation
        - _validate_update(): Add entity-specific validation
        - _pre_delete(): Add checks before deletion
    """

    config: EntityManagerConfig

    def __init__(
        self,
        session: Session,
        logger: Optional[DaybookLogger],
        config: EntityManagerConfig,
    ):
        super().__init__(session, logger)
        self.config = config

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, user_id: int, entity_id: int) -> Any:
        """
        Retrieve an entity owned by user_id.

        Raises:
            NotFoundError: If absent or owned by another user
        """
        with DatabaseOperation(self.logger, f"get_{self.config.entity_name}"):
            return self._get_owned(
                self.config.model_class, entity_id, user_id, self.config.entity_name
            )

    def exists(self, user_id: int, entity_id: int) -> bool:
        """Check if an entity exists for the user without raising."""
        return self._find_owned(self.config.model_class, entity_id, user_id) is not None

    def get_all(self, user_id: int) -> List[Any]:
        """All entities of the user in display order."""
        model = self.config.model_class
        with DatabaseOperation(self.logger, f"get_all_{self.config.entity_name}s"):
            return self._get_all(model, model.order, model.id, user_id=user_id)

    def list_recommendations(self) -> List[Dict[str, Any]]:
        """Preset records, each with its 'key' and field values."""
        return [dict(preset) for preset in self.config.recommendations]

    def usage_count(self, entity_id: int) -> int:
        """Number of rows referencing the entity (0 when not configured)."""
        if self.config.usage is None:
            return 0
        usage_model, fk_attr = self.config.usage
        stmt = (
            select(func.count())
            .select_from(usage_model)
            .where(getattr(usage_model, fk_attr) == entity_id)
        )
        return int(self.session.scalar(stmt) or 0)

    # =========================================================================
    # Mutations
    # =========================================================================

    def create(self, user_id: int, metadata: Dict[str, Any]) -> Any:
        """
        Create a new entity for a user.

        Args:
            user_id: Owning user
            metadata: Dictionary with entity fields

        Returns:
            Created entity

        Raises:
            ValidationError: If validation fails
            DatabaseError: If an entity with the same name exists
        """
        with DatabaseOperation(self.logger, f"create_{self.config.entity_name}"):
            DataValidator.validate_required_fields(metadata, self.config.required_fields)
            fields = self._normalize_fields(metadata)
            self._validate_create(user_id, fields)
            self._ensure_unique_name(user_id, fields["name"])

            if "order" not in fields:
                fields["order"] = self._next_order(user_id)

            entity = self.config.model_class(user_id=user_id, **fields)
            self.session.add(entity)
            self.session.flush()

            safe_logger(self.logger).log_debug(
                f"Created {self.config.entity_name}: {entity.name}",
                {f"{self.config.entity_name}_id": entity.id, "user_id": user_id},
            )
            return entity

    def create_from_recommendation(self, user_id: int, key: str, name: str) -> Any:
        """
        Create an entity named by the user from a preset.

        The preset supplies every field but the name; the new entity goes
        after the user's existing ones.

        Raises:
            RecommendationNotFoundError: If no preset has this key
            ValidationError: If the name is empty
            DatabaseError: If an entity with the same name exists
        """
        preset = next(
            (p for p in self.config.recommendations if p["key"] == key), None
        )
        if preset is None:
            raise RecommendationNotFoundError(details={"key": key})

        metadata = {k: v for k, v in preset.items() if k != "key"}
        metadata["name"] = name
        metadata["order"] = self._count(
            self.config.model_class, user_id=user_id
        )
        return self.create(user_id, metadata)

    def update(self, user_id: int, entity_id: int, metadata: Dict[str, Any]) -> Any:
        """
        Update fields of an existing entity.

        Only keys present in metadata are changed.

        Raises:
            NotFoundError: If the entity does not exist for the user
            ValidationError: If a value is invalid
        """
        with DatabaseOperation(self.logger, f"update_{self.config.entity_name}"):
            entity = self._get_owned(
                self.config.model_class, entity_id, user_id, self.config.entity_name
            )
            fields = self._normalize_fields(metadata)
            self._validate_update(entity, fields)
            if "name" in fields and fields["name"] != entity.name:
                self._ensure_unique_name(user_id, fields["name"])

            for key, value in fields.items():
                setattr(entity, key, value)

            self.session.flush()
            return entity

    def delete(self, user_id: int, entity_id: int) -> None:
        """
        Delete an entity.

        Raises:
            NotFoundError: If the entity does not exist for the user
            InUseError: If other rows still reference it
        """
        with DatabaseOperation(self.logger, f"delete_{self.config.entity_name}"):
            entity = self._get_owned(
                self.config.model_class, entity_id, user_id, self.config.entity_name
            )
            self._pre_delete(entity)

            self.session.delete(entity)
            self.session.flush()
            safe_logger(self.logger).log_debug(
                f"Deleted {self.config.entity_name}",
                {f"{self.config.entity_name}_id": entity_id},
            )

    def seed_defaults(self, user_id: int) -> List[Any]:
        """
        Create the system default records a user does not have yet.

        Existing names are left untouched, so seeding is idempotent.

        Returns:
            The newly created entities
        """
        with DatabaseOperation(self.logger, f"seed_{self.config.entity_name}s"):
            model = self.config.model_class
            existing = {
                name
                for name in self.session.scalars(
                    select(model.name).where(model.user_id == user_id)
                )
            }
            created = []
            for order, record in enumerate(self.config.defaults):
                if record["name"] in existing:
                    continue
                entity = model(user_id=user_id, is_system=True, order=order, **record)
                self.session.add(entity)
                created.append(entity)
            self.session.flush()
            return created

    # =========================================================================
    # Hook Methods (Override in Subclasses)
    # =========================================================================

    def _validate_create(self, user_id: int, fields: Dict[str, Any]) -> None:
        """Validate normalized fields before creation."""
        pass

    def _validate_update(self, entity: Any, fields: Dict[str, Any]) -> None:
        """Validate normalized fields before update."""
        pass

    def _pre_delete(self, entity: Any) -> None:
        """
        Block deletion of referenced entities.

        Raises:
            InUseError: If usage_count() is non-zero
        """
        count = self.usage_count(entity.id)
        if count:
            raise InUseError(
                self.config.entity_name,
                {f"{self.config.entity_name}_id": entity.id, "usage_count": count},
            )

    # =========================================================================
    # Internals
    # =========================================================================

    def _normalize_fields(self, metadata: Dict[str, Any]) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        for field_name, normalizer in self.config.scalar_fields:
            if field_name in metadata:
                value = normalizer(metadata[field_name])
                if value is None:
                    raise ValidationError(
                        f"{self.config.entity_name} {field_name} cannot be empty"
                    )
                fields[field_name] = value
        return fields

    def _ensure_unique_name(self, user_id: int, name: str) -> None:
        model = self.config.model_class
        stmt = select(model.id).where(model.user_id == user_id, model.name == name)
        if self.session.scalar(stmt) is not None:
            raise DatabaseError(f"{self.config.entity_name} already exists: {name}")

    def _next_order(self, user_id: int) -> int:
        model = self.config.model_class
        stmt = select(func.max(model.order)).where(model.user_id == user_id)
        current = self.session.scalar(stmt)
        return 0 if current is None else int(current) + 1
