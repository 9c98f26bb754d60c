from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from json_store import loads_strict
from resources.errors import BadInput
from resources.store import ResourceStore

router = APIRouter(tags=["resources"])
logger = logging.getLogger(__name__)


class AddResourceRequest(BaseModel):
    """
    Body of `POST /`: create (or with `overwrite`, replace) one named resource.
    """

    name: str = Field(min_length=1)
    value: dict[str, Any] = Field(default_factory=dict)
    overwrite: bool = False


def _store(request: Request) -> ResourceStore:
    return request.app.state.store


def _envelope(status_code: int = 200, **fields: Any) -> JSONResponse:
    return JSONResponse({"error": False, **fields}, status_code=status_code)


async def _read_json_body(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        raise BadInput("request body is required")
    try:
        return loads_strict(raw)
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        logger.info("REQUEST %s %s: malformed JSON body", request.method, request.url.path)
        raise BadInput(f"malformed JSON body: {e}") from e


async def _read_document(request: Request) -> dict[str, Any]:
    doc = await _read_json_body(request)
    if not isinstance(doc, dict):
        raise BadInput(f"expected a JSON object body, got {type(doc).__name__}")
    return doc


@router.get("/")
async def list_resources(request: Request) -> JSONResponse:
    return JSONResponse(_store(request).list())


@router.post("/")
async def add_resource(request: Request) -> JSONResponse:
    body = await _read_json_body(request)
    try:
        data = AddResourceRequest.model_validate(body)
    except ValidationError as e:
        raise BadInput(f"invalid resource request: {e.errors(include_url=False)}") from e

    payload = _store(request).add(data.name, data.value, overwrite=data.overwrite)
    return _envelope(message="created", payload=payload)


@router.put("/{namespace:path}")
async def create_resource(namespace: str, request: Request) -> JSONResponse:
    doc = await _read_document(request)
    if not _store(request).create(namespace, doc):
        return _envelope(created=False, message=f"not created: resource [{namespace}] already exists")
    return _envelope(created=True, message="created")


@router.get("/{namespace:path}")
async def read_resource(namespace: str, request: Request) -> JSONResponse:
    return JSONResponse(_store(request).get(namespace))


@router.post("/{namespace:path}")
async def update_resource(namespace: str, request: Request) -> JSONResponse:
    doc = await _read_document(request)
    merged = _store(request).update(namespace, doc)
    if merged is None:
        return _envelope(updated=False, message=f"not updated: no such resource [{namespace}]")
    return _envelope(updated=True, message="updated", payload=merged)


@router.delete("/{namespace:path}")
async def delete_resource(namespace: str, request: Request) -> JSONResponse:
    removed = _store(request).pop(namespace)
    if removed is None:
        return _envelope(deleted=False, message=f"not deleted: no such resource [{namespace}]")
    return _envelope(deleted=True, message="deleted", payload=removed)
