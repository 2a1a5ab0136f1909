"""
Pydantic data models for Octopus API responses and lookup results.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from octopus_lookup.common import ResponseShapeError

T = TypeVar("T", bound=BaseModel)


class ResponseShape(str, Enum):
    """How a list endpoint wraps its records."""

    BARE_ARRAY = "bare_array"
    ITEMS_ENVELOPE = "items_envelope"


ENVIRONMENTS_ALL = "/api/environments/all"
ENVIRONMENT_MACHINES = "/api/environments/{environment_id}/machines"
MACHINES_ALL = "/api/machines/all"
PROJECTS = "/api/projects"

ENDPOINT_SHAPES: Dict[str, ResponseShape] = {
    ENVIRONMENTS_ALL: ResponseShape.BARE_ARRAY,
    ENVIRONMENT_MACHINES: ResponseShape.ITEMS_ENVELOPE,
    MACHINES_ALL: ResponseShape.BARE_ARRAY,
    PROJECTS: ResponseShape.ITEMS_ENVELOPE,
}


# --- Server Records ---


class OctopusResource(BaseModel):
    """Base for records returned by the server; unknown fields are kept."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Environment(OctopusResource):
    id: str = Field(..., alias="Id")
    name: str = Field(..., alias="Name")


class Machine(OctopusResource):
    """A deployment target."""

    id: str = Field("", alias="Id")
    name: str = Field(..., alias="Name")
    thumbprint: Optional[str] = Field(None, alias="Thumbprint")
    uri: Optional[str] = Field(None, alias="Uri")
    roles: List[str] = Field(default_factory=list, alias="Roles")
    environment_ids: List[str] = Field(default_factory=list, alias="EnvironmentIds")
    is_disabled: bool = Field(False, alias="IsDisabled")


class Project(OctopusResource):
    id: str = Field(..., alias="Id")
    name: str = Field(..., alias="Name")
    slug: str = Field("", alias="Slug")


# --- Lookup Results ---


class EnvironmentSummary(BaseModel):
    """The friendly-name/ID pair of an environment."""

    id: str
    name: str


class ProjectSummary(BaseModel):
    id: str
    name: str
    slug: str


# --- Shape Handling ---


def extract_items(payload: Any, shape: ResponseShape) -> List[Any]:
    """Returns the raw record list from a decoded response of the given shape."""
    if shape is ResponseShape.BARE_ARRAY:
        if not isinstance(payload, list):
            raise ResponseShapeError(
                f"Expected a JSON array, got {type(payload).__name__}"
            )
        return payload

    if not isinstance(payload, dict) or not isinstance(payload.get("Items"), list):
        raise ResponseShapeError(
            f"Expected a JSON object with an 'Items' array, got {type(payload).__name__}"
        )
    return payload["Items"]


def parse_records(payload: Any, endpoint: str, model: Type[T]) -> List[T]:
    """Validates a decoded response for ``endpoint`` into ``model`` instances."""
    items = extract_items(payload, ENDPOINT_SHAPES[endpoint])
    try:
        return [model.model_validate(item) for item in items]
    except ValidationError as e:
        raise ResponseShapeError(
            f"Unexpected {model.__name__} record from {endpoint}: {e}"
        ) from e
