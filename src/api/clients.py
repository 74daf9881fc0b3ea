"""Clients API endpoints."""

from dataclasses import dataclass, field
from typing import Any

import orjson
from fastapi import APIRouter, Depends, Request, Response, status
from starlette.datastructures import UploadFile

from src.api.deps import get_client_service
from src.clients.errors import InvalidClientInput
from src.clients.schemas import ClientResponse
from src.clients.service import ClientService, LogoUpload

router = APIRouter(prefix="/clients", tags=["clients"])

LOGO_FIELD = "client_logo"
FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


@dataclass
class ClientPayload:
    """Raw client fields read from a request body.

    ``error`` holds a body that could not be read; callers decide when to
    raise it so an update can report a missing slug first.
    """

    fields: dict[str, Any] = field(default_factory=dict)
    logo: LogoUpload | None = None
    error: InvalidClientInput | None = None


async def read_client_payload(request: Request, max_logo_bytes: int) -> ClientPayload:
    """Read client fields from a JSON or form body.

    Form bodies may carry the logo as a ``client_logo`` file part; a plain
    ``client_logo`` text field is treated as a logo reference instead. A logo
    larger than ``max_logo_bytes`` is rejected from its part size without
    reading it into memory.
    """
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        payload = ClientPayload()
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if key != LOGO_FIELD or not value.filename:
                    continue
                if value.size is not None and value.size > max_logo_bytes:
                    payload.error = InvalidClientInput(
                        f"client_logo: file exceeds {max_logo_bytes} bytes"
                    )
                    continue
                payload.logo = LogoUpload(
                    filename=value.filename,
                    content=await value.read(),
                    content_type=value.content_type,
                )
                continue
            payload.fields[key] = value
        return payload

    body = await request.body()
    if not body.strip():
        return ClientPayload()
    try:
        data = orjson.loads(body)
    except orjson.JSONDecodeError as e:
        return ClientPayload(error=InvalidClientInput(f"invalid JSON body: {e}"))
    if not isinstance(data, dict):
        return ClientPayload(
            error=InvalidClientInput("request body must be a JSON object")
        )
    return ClientPayload(fields=data)


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    request: Request,
    service: ClientService = Depends(get_client_service),
) -> ClientResponse:
    """Create a client, optionally uploading a logo."""
    payload = await read_client_payload(request, service.max_logo_bytes)
    if payload.error is not None:
        raise payload.error
    return await service.create(payload.fields, payload.logo)


@router.get("/{slug}", response_model=ClientResponse)
async def get_client(
    slug: str,
    service: ClientService = Depends(get_client_service),
) -> ClientResponse:
    """Get an active client by slug, from cache when possible."""
    return await service.get(slug)


@router.put("/{slug}", response_model=ClientResponse)
async def update_client(
    slug: str,
    request: Request,
    service: ClientService = Depends(get_client_service),
) -> ClientResponse:
    """Update the fields present in the body; omitted fields are kept."""
    payload = await read_client_payload(request, service.max_logo_bytes)
    return await service.update(
        slug, payload.fields, payload.logo, body_error=payload.error
    )


@router.delete("/{slug}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    slug: str,
    service: ClientService = Depends(get_client_service),
) -> Response:
    """Soft-delete a client."""
    await service.delete(slug)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
