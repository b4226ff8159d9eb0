"""
Delivery component port definitions.

Collaborators the resolver depends on. Adapters live under
chart_mcp.adapters; tests use in-memory mocks.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from .models import DeliveryEvent, OutputFormat, RenderedArtifact, Theme


class RendererPort(Protocol):
    """Turns a chart configuration into image bytes or text."""

    def render(
        self,
        configuration: dict[str, Any],
        width: int,
        height: int,
        theme: Theme,
        output_format: OutputFormat,
    ) -> RenderedArtifact:
        """Return PNG bytes for raster output, text otherwise. May raise."""
        ...


class ObjectStorePort(Protocol):
    """Optional remote persistence of image bytes."""

    def is_configured(self) -> bool:
        """Whether the store has enough settings to accept uploads."""
        ...

    def store(self, data: bytes, extension: str, mime_type: str) -> str:
        """Persist bytes and return a URL. May raise."""
        ...


class ChartFileSinkPort(Protocol):
    """Local persistence of image bytes."""

    def ensure_directory(self, path: Path) -> None:
        """Create the directory if missing. Idempotent."""
        ...

    def write(self, path: Path, data: bytes) -> None:
        """Write bytes to path. May raise."""
        ...


class DeliveryObserver(Protocol):
    """Receives diagnostic events. Must not affect delivery."""

    def notify(self, event: DeliveryEvent) -> None: ...
