"""Pydantic models for Plane resources and write payloads.

Resources are opaque to this server: known fields are exposed for
convenience but accept any JSON value, and the payload the backend sent
is kept as-is so tools relay it verbatim (key order included).
"""

from typing import Any, Literal

from pydantic import BaseModel, PrivateAttr, model_validator

Priority = Literal["urgent", "high", "medium", "low", "none"]

PRIORITIES: tuple[str, ...] = ("urgent", "high", "medium", "low", "none")


# ============================================================================
# Resources
# ============================================================================


class PlaneResource(BaseModel):
    """Base for resources returned by the Plane API."""

    model_config = {"extra": "allow"}

    _payload: dict[str, Any] | None = PrivateAttr(default=None)

    @model_validator(mode="wrap")
    @classmethod
    def keep_payload(cls, data: Any, handler: Any) -> "PlaneResource":
        resource = handler(data)
        if isinstance(data, dict):
            resource._payload = dict(data)
        return resource

    def to_dict(self) -> dict[str, Any]:
        """Return the object exactly as the backend sent it."""
        if self._payload is not None:
            return dict(self._payload)
        data = self.model_dump(mode="json", include=set(self.model_fields_set))
        data.update(self.model_extra or {})
        return data


class PlaneWorkspace(PlaneResource):
    """Workspace, the top-level container."""

    id: Any = None
    name: Any = None
    slug: Any = None


class PlaneProject(PlaneResource):
    """Project within a workspace."""

    id: Any = None
    name: Any = None
    identifier: Any = None
    description: Any = None


class PlaneState(PlaneResource):
    """Workflow state of a project."""

    id: Any = None
    name: Any = None
    color: Any = None
    group: Any = None


class PlaneCycle(PlaneResource):
    """Time-boxed grouping of issues."""

    id: Any = None
    name: Any = None
    description: Any = None
    start_date: Any = None
    end_date: Any = None


class PlaneModule(PlaneResource):
    """Feature grouping of issues."""

    id: Any = None
    name: Any = None
    description: Any = None


class PlaneIssue(PlaneResource):
    """Work item in a project."""

    id: Any = None
    name: Any = None
    description_html: Any = None
    state: Any = None
    priority: Any = None
    assignees: Any = None
    labels: Any = None


class PlaneComment(PlaneResource):
    """Comment attached to an issue."""

    id: Any = None
    comment_html: Any = None
    created_at: Any = None
    updated_at: Any = None


class PlaneListEnvelope(BaseModel):
    """Paginated wrapper returned by list endpoints."""

    model_config = {"extra": "allow"}

    results: Any = None
    count: Any = None
    total_pages: Any = None
    next_cursor: Any = None
    prev_cursor: Any = None


# ============================================================================
# Write payloads
# ============================================================================


class IssueCreate(BaseModel):
    """Body of ``POST .../issues/``."""

    name: str
    description_html: str | None = None
    priority: Priority | None = None
    state_id: str | None = None
    assignees: list[str] | None = None
    cycle_id: str | None = None
    module_id: str | None = None
    labels: list[str] | None = None


class IssueUpdate(BaseModel):
    """Body of ``PATCH .../issues/{issue_id}/``. Only set fields are sent."""

    name: str | None = None
    description_html: str | None = None
    priority: Priority | None = None
    state_id: str | None = None
    assignees: list[str] | None = None
    cycle_id: str | None = None
    module_id: str | None = None
    labels: list[str] | None = None


class CommentCreate(BaseModel):
    """Body of ``POST .../comments/``."""

    comment_html: str
