"""
Chart serving routes.

Serves locally delivered chart images in SSE mode, on the same host and
port the delivery URLs point at, next to the MCP SSE endpoints.

Key behaviors:
- GET /charts/{filename}: PNG bytes, immutable cache headers
- Only chart-*.png names are served (400 otherwise, 404 if missing)
- GET /health: basic status with delivery flags
"""

from __future__ import annotations

import re
from typing import Any

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.responses import Response
from mcp.server.fastmcp import FastMCP

from chart_mcp import __version__
from chart_mcp.adapters.fs.filestore import ChartFileSink
from chart_mcp.components.delivery import PNG_MIME_TYPE
from chart_mcp.rules.models import Settings

router = APIRouter()

CHART_NAME_RE = re.compile(r"^chart-\d+-[0-9a-z]+\.png$")

# Chart files are never rewritten once created
CACHE_CONTROL_IMMUTABLE = "public, max-age=31536000, immutable"


def _sink(request: Request) -> ChartFileSink:
    return request.app.state.chart_sink


@router.get("/charts/{filename}")
def get_chart(filename: str, request: Request) -> Response:
    if not CHART_NAME_RE.match(filename):
        raise HTTPException(status_code=400, detail="Invalid chart name")

    try:
        data = _sink(request).read(filename)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="Chart not found") from None

    return Response(
        content=data,
        media_type=PNG_MIME_TYPE,
        headers={"Cache-Control": CACHE_CONTROL_IMMUTABLE},
    )


@router.get("/health")
def health_check(request: Request) -> dict[str, Any]:
    settings: Settings = request.app.state.settings
    return {
        "status": "ok",
        "version": __version__,
        "local_file_mode": settings.local_file_mode,
        "charts_url": f"{settings.base_url}/charts/",
    }


def create_http_app(settings: Settings, mcp_server: FastMCP | None = None) -> FastAPI:
    """FastAPI app serving charts, with the MCP SSE app mounted at the root."""
    app = FastAPI(title="Chart MCP", version=__version__, docs_url=None, redoc_url=None)
    app.state.settings = settings
    app.state.chart_sink = ChartFileSink(settings.delivery_config().charts_dir)
    app.include_router(router)

    if mcp_server is not None:
        # Mounted last so /charts and /health take precedence
        app.mount("/", mcp_server.sse_app())

    return app
