"""
Base classes for the resource services.

Every mutation of an owned resource follows the same order:

    validate id -> load -> authorize (owner check) -> validate payload -> mutate

The owner check deliberately runs before the payload is parsed, so a
non-owner gets a 403 no matter what they sent.

Services are handed their collaborators (SQLAlchemy session, media storage)
by the caller and never reach for Flask globals, which keeps them usable
from tests and scripts without an app context.
"""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from marshmallow import Schema, ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models.schemas.common import flatten_messages
from utils.exceptions import (
    DependencyError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def parse_id(raw: Any, label: str) -> str:
    """Canonical string form of a UUID id, or ValidationError("Invalid <label> ID")."""
    try:
        return str(uuid.UUID(str(raw)))
    except (TypeError, ValueError, AttributeError):
        raise ValidationError(f"Invalid {label} ID")


@dataclass
class Page:
    items: List[Any]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "items": self.items,
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "total_pages": self.total_pages,
            "has_next_page": self.page < self.total_pages,
            "has_prev_page": self.page > 1,
        }


@dataclass(frozen=True)
class PageRequest:
    """Pagination and ordering requested by the caller."""
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort_by: Optional[str] = None
    descending: bool = True

    def clamped(self) -> "PageRequest":
        return PageRequest(
            page=max(int(self.page), 1),
            limit=max(1, min(int(self.limit), MAX_LIMIT)),
            sort_by=self.sort_by,
            descending=self.descending,
        )


class ResourceService:
    """Shared plumbing: payload parsing, commits, pagination."""

    #: API sort key -> column
    sort_columns: Mapping[str, Any] = {}
    default_sort: Tuple[str, bool] = ("created_at", True)

    def __init__(self, session):
        self.session = session

    # -- input -----------------------------------------------------------

    @staticmethod
    def _validate(schema: Schema, payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        try:
            return schema.load(dict(payload or {}))
        except SchemaValidationError as err:
            errors = flatten_messages(err.messages)
            raise ValidationError(errors[0] if len(errors) == 1 else "Invalid input", errors=errors)

    def _get(self, model, raw_id: Any, label: str):
        obj = self.session.get(model, parse_id(raw_id, label))
        if obj is None:
            raise NotFoundError(f"{label.capitalize()} not found")
        return obj

    # -- persistence -----------------------------------------------------

    def _commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Database commit failed")
            raise DependencyError("Database operation failed") from exc

    def _toggle(self, model, **criteria) -> bool:
        """
        Flip the existence of the row matching `criteria`.
        Returns True when the row exists afterwards.
        """
        existing = self.session.query(model).filter_by(**criteria).first()
        if existing is not None:
            self.session.delete(existing)
            self._commit()
            return False

        self.session.add(model(**criteria))
        try:
            self._commit()
        except IntegrityError:
            # a concurrent request inserted the same pair first; the row exists either way
            logger.info("Concurrent toggle on %s %s resolved to existing row", model.__name__, criteria)
        return True

    # -- reads -----------------------------------------------------------

    def _order_by(self, request: PageRequest) -> list:
        key = request.sort_by or self.default_sort[0]
        descending = request.descending if request.sort_by else self.default_sort[1]
        col = self.sort_columns.get(key)
        if col is None:
            allowed = ", ".join(sorted(self.sort_columns))
            raise ValidationError(f"Unsupported sort field: {key}. Allowed: {allowed}")
        model_id = getattr(getattr(col, "class_", None), "id", None)
        order = [col.desc() if descending else col.asc()]
        if model_id is not None:
            # tie-breaker keeps pages disjoint when timestamps collide
            order.append(model_id.desc() if descending else model_id.asc())
        return order

    def _paginate(
        self,
        query,
        request: PageRequest,
        serialize: Callable[[Any], Any],
        count_query=None,
    ) -> Dict[str, Any]:
        request = request.clamped()
        total = (count_query if count_query is not None else query).order_by(None).count()
        rows = (
            query.order_by(*self._order_by(request))
            .offset((request.page - 1) * request.limit)
            .limit(request.limit)
            .all()
        )
        return Page(
            items=[serialize(row) for row in rows],
            page=request.page,
            limit=request.limit,
            total=total,
        ).as_dict()


class OwnedResourceService(ResourceService):
    """
    Template for resources that carry an `owner_id`.

    Subclasses set `model`, `label`, the schemas, and may override
    `_before_delete` to clean up rows that reference the resource.
    """

    model = None
    label = "resource"
    plural = "resources"
    create_schema: Schema = None
    update_schema: Schema = None
    out_schema: Schema = None

    def load(self, resource_id):
        return self._get(self.model, resource_id, self.label)

    def load_owned(self, actor_id, resource_id, action: str = "modify"):
        resource = self.load(resource_id)
        if not resource.is_owned_by(actor_id):
            raise ForbiddenError(f"You can only {action} your own {self.plural}")
        return resource

    def view(self, resource) -> Dict[str, Any]:
        return self.out_schema.dump(resource)

    def _stamp(self, actor_id, data: Dict[str, Any]):
        return self.model(owner_id=str(actor_id), **data)

    def create(self, actor_id, payload) -> Dict[str, Any]:
        data = self._validate(self.create_schema, payload)
        resource = self._stamp(actor_id, data)
        self.session.add(resource)
        self._commit()
        return self.view(resource)

    def _apply_patch(self, resource, patch: Dict[str, Any]) -> None:
        for key, value in patch.items():
            setattr(resource, key, value)

    def update(self, actor_id, resource_id, payload) -> Dict[str, Any]:
        resource = self.load_owned(actor_id, resource_id, action="edit")
        patch = self._validate(self.update_schema, payload)
        if not patch:
            raise ValidationError("Nothing to update")
        self._apply_patch(resource, patch)
        self._commit()
        return self.view(resource)

    def _before_delete(self, resource) -> None:
        """Hook for referential cleanup; runs inside the same transaction."""

    def delete(self, actor_id, resource_id) -> None:
        resource = self.load_owned(actor_id, resource_id, action="delete")
        self._before_delete(resource)
        self.session.delete(resource)
        self._commit()
