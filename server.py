"""
GA4 MCP Gateway - FastAPI Application

This is the main entry point for the gateway. It exposes one tool
endpoint (/mcp) that assistant clients call to list and invoke the GA4
tools, plus health and info endpoints.

Business logic is delegated to the executor module - this file only handles:
- API routing
- Request body parsing and response framing
- CORS headers on every /mcp response
- Health checks
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import config
from executor.execute import Dispatcher
from registry.schemas import HealthResponse
from registry.tools import ToolRegistry


# Configure logging
logging.basicConfig(
    level=getattr(logging, config.server.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

ALLOWED_METHODS = ["GET", "POST", "OPTIONS"]

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ", ".join(ALLOWED_METHODS),
    "Access-Control-Allow-Headers": "*",
}

# Built once; read-only for the life of the process
registry = ToolRegistry()
dispatcher = Dispatcher(registry)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler for startup/shutdown events.

    Logs configuration warnings on startup. Missing GA4 settings do not
    stop the server; tool calls report them as config errors.
    """
    # Startup
    logger.info("Starting GA4 MCP Gateway...")

    warnings = config.validate()
    for warning in warnings:
        logger.warning(f"Config warning: {warning}")

    logger.info(f"Registered tools: {', '.join(registry.tools)}")
    logger.info(f"Debug mode: {config.server.debug}")

    yield

    # Shutdown
    logger.info("Shutting down GA4 MCP Gateway...")


# Initialize FastAPI application
app = FastAPI(
    title="GA4 MCP Gateway",
    description="Tool-protocol gateway exposing read-only Google Analytics 4 reports",
    version=config.protocol.server_version,
    lifespan=lifespan,
    docs_url="/docs" if config.server.debug else None,
    redoc_url="/redoc" if config.server.debug else None,
)


def _json(body: dict, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(content=body, status_code=status_code, headers=CORS_HEADERS)


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check() -> HealthResponse:
    """
    Health check endpoint for container orchestration.

    Returns:
        HealthResponse with server status
    """
    return HealthResponse(
        status="healthy",
        version=config.protocol.server_version,
        property_configured=bool(config.ga4.property_id)
    )


@app.get("/", tags=["System"])
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "service": "GA4 MCP Gateway",
        "version": config.protocol.server_version,
        "endpoint": "/mcp",
        "docs": "/docs" if config.server.debug else "Disabled in production"
    }


# =============================================================================
# Tool Endpoint
# =============================================================================

@app.post("/mcp", tags=["Tools"])
async def mcp_post(request: Request) -> JSONResponse:
    """
    Main tool endpoint.

    Accepts a JSON envelope in any supported dialect (JSON-RPC framed or
    bare) and returns the dispatcher's response. Protocol-level errors
    are in-band; only an unparsable body yields a 500.
    """
    raw = await request.body()
    try:
        envelope = json.loads(raw) if raw.strip() else {}
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Unparsable request body: {e}")
        return _json(
            {"error": "Internal server error"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    response = await dispatcher.dispatch(envelope)
    return _json(response.body, status_code=response.status_code)


@app.get("/mcp", tags=["Tools"])
async def mcp_get(method: str = "") -> JSONResponse:
    """Informational probe; the method may be given as a query parameter."""
    response = await dispatcher.dispatch({"method": method})
    return _json(response.body, status_code=response.status_code)


@app.options("/mcp", tags=["Tools"])
async def mcp_options() -> Response:
    """CORS preflight, answered the same way with or without an Origin."""
    return Response(
        status_code=status.HTTP_204_NO_CONTENT,
        headers={**CORS_HEADERS, "Content-Type": "application/json"},
    )


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """Answer any unsupported verb on /mcp with a JSON 405."""
    if exc.status_code != status.HTTP_405_METHOD_NOT_ALLOWED or request.url.path != "/mcp":
        return await http_exception_handler(request, exc)

    return JSONResponse(
        content={"error": "Method Not Allowed"},
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        headers={**CORS_HEADERS, "Allow": ", ".join(ALLOWED_METHODS)},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.debug,
        log_level=config.server.log_level.lower()
    )
