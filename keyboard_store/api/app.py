"""
HTTP API for the keyboard catalog.

Routes:
    GET  /api/keyboards               every keyboard (single scan page)
    GET  /api/keyboards/{id}          keyboards sharing a partition key
    GET  /api/keyboards/{id}/{name}   one keyboard by composite key
    POST /api/keyboards               insert or replace a keyboard
    GET  /health                      liveness

Store and codec failures become structured JSON error responses; no
request can bring the process down.
"""

import logging
from typing import List

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..core import TableGateway
from ..exceptions import (
    EncodingError,
    KeyboardStoreError,
    NotFoundError,
    QueryBuildError,
    TransportError,
)
from ..models import Keyboard

logger = logging.getLogger(__name__)


def status_for_error(error: KeyboardStoreError) -> int:
    """HTTP status for a domain error."""
    if isinstance(error, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, (EncodingError, QueryBuildError)):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, TransportError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_store_error(request: Request, exc: KeyboardStoreError) -> JSONResponse:
    status_code = status_for_error(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def create_app(gateway: TableGateway) -> FastAPI:
    """Build the FastAPI application around a gateway.

    Args:
        gateway: Gateway for the keyboard table, shared by all requests

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(title="keyboard-store")
    app.state.gateway = gateway
    app.add_exception_handler(KeyboardStoreError, handle_store_error)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/api/keyboards", response_model=List[Keyboard])
    def list_keyboards():
        return gateway.scan()

    @app.get("/api/keyboards/{keyboard_id}", response_model=List[Keyboard])
    def get_keyboards_by_id(keyboard_id: str):
        keyboards = gateway.query_by_id(keyboard_id)
        if not keyboards:
            raise NotFoundError(f"No keyboards with id {keyboard_id}", "item", keyboard_id)
        return keyboards

    @app.get("/api/keyboards/{keyboard_id}/{name}", response_model=Keyboard)
    def get_keyboard(keyboard_id: str, name: str):
        keyboard = gateway.get(keyboard_id, name)
        if keyboard is None:
            raise NotFoundError(f"Keyboard {keyboard_id}/{name} not found", "item", f"{keyboard_id}/{name}")
        return keyboard

    @app.post("/api/keyboards", response_model=Keyboard, status_code=status.HTTP_201_CREATED)
    def post_keyboard(keyboard: Keyboard):
        gateway.put(keyboard)
        return keyboard

    return app
