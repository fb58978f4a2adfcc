"""Flashgate - FastAPI Application.

This module defines the FastAPI application, all routes, and the ``main()``
CLI function that launches the uvicorn server.

Architecture
------------
The application is a stateless request/response gateway:

- **Configuration** comes from :data:`~flashgate.core.config.config`
  (environment variables and ``.env``).
- **Generation** is delegated to a
  :class:`~flashgate.core.gemini_client.ContentGenerator`, a
  :class:`~flashgate.core.gemini_client.GeminiClient` unless
  :func:`create_app` is given another one.
- **Uploads** are staged in ``staging_dir`` for the duration of a single
  request and served read-only at ``/uploads`` for debugging.
- **Errors** are raised as :class:`~flashgate.core.errors.GatewayError`
  subclasses and rendered by one exception handler as
  ``{error, details?, tip?}``.

Endpoints
---------
========  ===========================  =====================================
Method    Path                         Purpose
========  ===========================  =====================================
GET       ``/``                        Liveness message (plain text)
POST      ``/generate-text``           Generate text from a JSON prompt
POST      ``/generate-from-image``     Describe an uploaded image
POST      ``/generate-from-document``  Analyse an uploaded document
POST      ``/generate-from-audio``     Transcribe an uploaded audio file
GET       ``/uploads/{filename}``      Raw staged file (debug only)
========  ===========================  =====================================

Usage
-----
CLI (installed entry point)::

    flashgate

Direct invocation::

    python -m flashgate.api.main

With uvicorn directly::

    uvicorn flashgate.api.main:create_app --factory --port 3000
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from flashgate import __version__
from flashgate.api.handlers import (
    AUDIO_ENDPOINT,
    DOCUMENT_ENDPOINT,
    IMAGE_ENDPOINT,
    MediaHandler,
    TextHandler,
)
from flashgate.api.models import ErrorResponse, GenerateTextRequest, GenerationResponse
from flashgate.core.config import GatewayConfig, config
from flashgate.core.errors import GatewayError
from flashgate.core.gemini_client import ContentGenerator, GeminiClient
from flashgate.core.staging import FileStager

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

router = APIRouter()


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@router.get("/", response_class=PlainTextResponse)
async def index() -> str:
    """Report that the server is up."""
    return "Gemini Flash API server is running!"


@router.post("/generate-text", response_model=GenerationResponse, responses=ERROR_RESPONSES)
async def generate_text(req: GenerateTextRequest, request: Request) -> GenerationResponse:
    """Generate a text response for a plain prompt."""
    return await request.app.state.text_handler.handle(req.prompt)


@router.post("/generate-from-image", response_model=GenerationResponse, responses=ERROR_RESPONSES)
async def generate_from_image(
    request: Request,
    image: UploadFile | None = File(None),
    prompt: str | None = Form(None),
) -> GenerationResponse:
    """Generate a description of an uploaded image (JPEG, PNG, GIF, WebP)."""
    return await request.app.state.image_handler.handle(image, prompt)


@router.post(
    "/generate-from-document", response_model=GenerationResponse, responses=ERROR_RESPONSES
)
async def generate_from_document(
    request: Request,
    document: UploadFile | None = File(None),
    prompt: str | None = Form(None),
) -> GenerationResponse:
    """Analyse an uploaded document (PDF, plain text, DOCX, XLSX, PPTX)."""
    return await request.app.state.document_handler.handle(document, prompt)


@router.post("/generate-from-audio", response_model=GenerationResponse, responses=ERROR_RESPONSES)
async def generate_from_audio(
    request: Request,
    audio: UploadFile | None = File(None),
    prompt: str | None = Form(None),
) -> GenerationResponse:
    """Transcribe or otherwise process an uploaded audio file."""
    return await request.app.state.audio_handler.handle(audio, prompt)


# ---------------------------------------------------------------------------
# Exception handlers.
# ---------------------------------------------------------------------------


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    """Render a :class:`GatewayError` as its JSON error body."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 with the gateway error shape."""
    details = "; ".join(
        f"{'.'.join(str(loc) for loc in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    logger.warning(f"Rejected malformed request to {request.url.path}: {details}")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body.", "details": details},
    )


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(
    cfg: GatewayConfig | None = None,
    client: ContentGenerator | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        cfg: Configuration to use.  Defaults to the global ``config``.
        client: Model client to inject.  When omitted a
            :class:`GeminiClient` is built from *cfg* and closed on shutdown.

    Returns:
        A ready-to-serve FastAPI application.
    """
    cfg = cfg or config
    owned_client: GeminiClient | None = None
    if client is None:
        owned_client = client = GeminiClient.from_config(cfg)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Log the startup banner and release the HTTP pool on shutdown."""
        logger.info(f"Gemini Flash API server running on http://localhost:{cfg.port}")
        if not cfg.gemini_api_key:
            logger.warning("GEMINI_API_KEY is not set; generation requests will fail.")

        yield

        if owned_client is not None:
            await owned_client.aclose()
            logger.info("Gemini client closed on shutdown.")

    app = FastAPI(
        title="Flashgate",
        description="HTTP gateway for Gemini Flash text, image, document and audio prompts.",
        version=__version__,
        lifespan=lifespan,
    )

    # Every origin is allowed; the gateway has no authentication to protect.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    stager = FileStager(cfg.staging_dir)
    app.state.config = cfg
    app.state.client = client
    app.state.text_handler = TextHandler(client)
    app.state.image_handler = MediaHandler(client, stager, IMAGE_ENDPOINT)
    app.state.document_handler = MediaHandler(client, stager, DOCUMENT_ENDPOINT)
    app.state.audio_handler = MediaHandler(client, stager, AUDIO_ENDPOINT)

    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    app.include_router(router)
    app.mount("/uploads", StaticFiles(directory=str(cfg.staging_dir)), name="uploads")

    return app


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Configure logging and launch the uvicorn ASGI server.

    Host, port and log level come from :data:`~flashgate.core.config.config`
    (``HOST``, ``PORT`` and ``LOG_LEVEL``).  uvicorn builds the application
    by calling :func:`create_app`, so no client exists until the server starts.
    Registered as the ``flashgate`` console script in ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )

    uvicorn.run(
        "flashgate.api.main:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
