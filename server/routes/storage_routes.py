"""Storage API routes: one catch-all path per HTTP method."""

import json
import logging
import posixpath
from typing import Any, Dict
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response, StreamingResponse
from starlette.datastructures import UploadFile

from common.exceptions import MalformedRequest
from common.protocol import ListContents, Metadata, Operation, ReadContents, Stream, decode_request
from server.auth import get_request_context, get_storage_service
from server.schemas.storage import AttributeRecord
from server.services.storage_service import StorageService
from server.types import RequestContext

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Storage"])

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _field_value(value: Any) -> Any:
    if isinstance(value, (str, bytes)):
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value) if isinstance(value, (dict, list)) else str(value)


async def read_fields(request: Request) -> Dict[str, Any]:
    """
    Merge query parameters with body fields (body wins).

    Multipart file parts are read into bytes so the protocol decoder never
    sees transport objects.

    Raises:
        MalformedRequest: If a JSON body is invalid or not an object
    """
    fields: Dict[str, Any] = dict(request.query_params)
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError as e:
            raise MalformedRequest("Request body is not valid JSON") from e
        if not isinstance(body, dict):
            raise MalformedRequest("Request body must be a JSON object")
        fields.update({key: _field_value(value) for key, value in body.items()})

    elif content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                fields[key] = await value.read()
            else:
                fields[key] = value

    return fields


def shape_response(operation: Operation, result: Any) -> Response:
    """
    Turn a service result into exactly one HTTP response.
    """
    if isinstance(operation, Stream):
        filename = quote(posixpath.basename(result.path))
        return StreamingResponse(
            result.pieces,
            media_type=result.mime_type,
            headers={
                "Content-Disposition": f"inline; filename*=utf-8''{filename}",
                "Content-Length": str(result.size),
            },
        )

    if isinstance(operation, ReadContents):
        return Response(content=result, media_type="application/octet-stream")

    if isinstance(operation, Metadata):
        return JSONResponse(AttributeRecord.from_attributes(result).to_wire())

    if isinstance(operation, ListContents):
        return JSONResponse([AttributeRecord.from_attributes(item).to_wire() for item in result])

    if result is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return JSONResponse(result)


async def handle(request: Request, context: RequestContext, service: StorageService) -> Response:
    service.authorize(context)

    operation = decode_request(request.method, await read_fields(request))
    logger.debug(f"Dispatching {type(operation).__name__} for '{context.path}'")

    result = service.execute(context, operation)
    return shape_response(operation, result)


@router.get("/{path:path}")
async def read_path(
    request: Request,
    context: RequestContext = Depends(get_request_context),
    service: StorageService = Depends(get_storage_service),
):
    """
    Read-style operations.

    Query discriminators:
        - fileExists / directoryExists: JSON boolean
        - metadata: attribute record
        - checksum (+ checksum_algo): JSON string digest
        - contents: raw file bytes
        - list=<bool>: JSON array of attribute records (deep when true)
        - no parameters: file streamed with its mime type

    Raises:
        - 400: Zero or conflicting discriminators
        - 401: Token does not authorize the path
        - 404: Path does not exist
        - 500: Local filesystem failure
    """
    return await handle(request, context, service)


@router.post("/{path:path}")
async def create_path(
    request: Request,
    context: RequestContext = Depends(get_request_context),
    service: StorageService = Depends(get_storage_service),
):
    """
    Create-style operations: write a file (field `contents`, remaining
    fields are write options) or create a directory (field `dir`).

    Returns:
        - 204 on success
    """
    return await handle(request, context, service)


@router.put("/{path:path}")
async def update_path(
    request: Request,
    context: RequestContext = Depends(get_request_context),
    service: StorageService = Depends(get_storage_service),
):
    """
    Mutate-style operations on an existing file: append (`contents`),
    set visibility (`visibility`), copy (`copy=<dest>`) or move (`move=<dest>`).

    Returns:
        - 204 on success
    """
    return await handle(request, context, service)


@router.delete("/{path:path}")
async def delete_path(
    request: Request,
    context: RequestContext = Depends(get_request_context),
    service: StorageService = Depends(get_storage_service),
):
    """
    Delete a file, or a directory recursively when no file exists at the path.

    Returns:
        - 204 on success
        - 404 when neither a file nor a directory exists
    """
    return await handle(request, context, service)
