"""Request and response models for the client resource."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.models.client import DEFAULT_CLIENT_LOGO, Client

# Columns declared NOT NULL; an explicit null for them is rejected on update.
NON_NULLABLE_FIELDS = frozenset(
    {"name", "slug", "is_project", "self_capture", "client_prefix", "client_logo"}
)

FLAG_PATTERN = r"^[01]$"


class ClientCreateRequest(BaseModel):
    """Payload for creating a client."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str = Field(min_length=1, max_length=250)
    slug: str = Field(min_length=1, max_length=100)
    is_project: str = Field(default="0", max_length=30)
    self_capture: str = Field(default="1", pattern=FLAG_PATTERN)
    client_prefix: str = Field(min_length=1, max_length=4)
    client_logo: str = Field(default=DEFAULT_CLIENT_LOGO, min_length=1, max_length=255)
    address: str | None = None
    phone_number: str | None = Field(default=None, max_length=50)
    city: str | None = Field(default=None, max_length=50)


class ClientUpdateRequest(BaseModel):
    """Payload for partially updating a client.

    Only fields present in the body are applied; ``changes()`` relies on
    pydantic's set-field tracking, so an omitted field and an explicit empty
    value are told apart.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str | None = Field(default=None, min_length=1, max_length=250)
    slug: str | None = Field(default=None, min_length=1, max_length=100)
    is_project: str | None = Field(default=None, max_length=30)
    self_capture: str | None = Field(default=None, pattern=FLAG_PATTERN)
    client_prefix: str | None = Field(default=None, min_length=1, max_length=4)
    client_logo: str | None = Field(default=None, min_length=1, max_length=255)
    address: str | None = None
    phone_number: str | None = Field(default=None, max_length=50)
    city: str | None = Field(default=None, max_length=50)

    @model_validator(mode="after")
    def reject_null_for_required_columns(self) -> "ClientUpdateRequest":
        for field in sorted(NON_NULLABLE_FIELDS & self.model_fields_set):
            if getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Fields present in the request, with their new values."""
        return self.model_dump(exclude_unset=True)


class ClientResponse(BaseModel):
    """Client snapshot returned by the API and stored in the cache."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    is_project: str
    self_capture: str
    client_prefix: str
    client_logo: str
    address: str | None
    phone_number: str | None
    city: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


def to_client_response(client: Client) -> ClientResponse:
    """Map SQLAlchemy client model to response model."""
    return ClientResponse.model_validate(client)
