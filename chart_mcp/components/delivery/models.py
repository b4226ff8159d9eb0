"""
Delivery component input/output models.

Request, configuration, outcome and envelope types for chart delivery.
All values are request-scoped and immutable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from mcp.types import ImageContent, TextContent

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
DEFAULT_LABEL = "unknown"
DEFAULT_PUBLIC_BASE_URL = "http://localhost:3033"

PNG_EXTENSION = "png"
PNG_MIME_TYPE = "image/png"

RenderedArtifact = bytes | str
ContentItem = TextContent | ImageContent


# --- Enums ---


class OutputFormat(str, Enum):
    """Supported output representations."""

    PNG = "png"  # raster
    SVG = "svg"  # vector markup
    OPTION = "option"  # configuration echo

    @property
    def is_raster(self) -> bool:
        return self is OutputFormat.PNG


class Theme(str, Enum):
    """Chart colour themes."""

    DEFAULT = "default"
    DARK = "dark"


class DeliveryMode(str, Enum):
    """Raster delivery strategies, in fallback order."""

    LOCAL_FILE = "local_file"
    OBJECT_STORE = "object_store"
    INLINE = "inline"


class EventKind(str, Enum):
    """Points at which observers are notified."""

    RENDER_STARTED = "render_started"
    RENDER_FAILED = "render_failed"
    STEP_SKIPPED = "step_skipped"
    STEP_FAILED = "step_failed"
    DELIVERED = "delivered"


# --- Errors ---


class ChartRequestError(ValueError):
    """Raised when a chart request has invalid dimensions, theme or format."""


class ChartRenderError(RuntimeError):
    """Raised when the renderer fails. The only error a caller can see."""

    PREFIX = "Chart rendering failed"

    def __init__(self, message: str) -> None:
        self.original_message = message
        super().__init__(f"{self.PREFIX}: {message}")


# --- Input Models ---


@dataclass(frozen=True)
class ChartRequest:
    """A single chart generation request."""

    configuration: dict[str, Any]
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    theme: Theme = Theme.DEFAULT
    output_format: OutputFormat = OutputFormat.PNG
    label: str = DEFAULT_LABEL

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ChartRequestError(f"{name} must be a positive integer, got {value!r}")

        try:
            object.__setattr__(self, "theme", Theme(self.theme))
        except ValueError as e:
            raise ChartRequestError(
                f"Unknown theme {self.theme!r}. Allowed: {', '.join(t.value for t in Theme)}"
            ) from e

        try:
            object.__setattr__(self, "output_format", OutputFormat(self.output_format))
        except ValueError as e:
            raise ChartRequestError(
                f"Unknown output format {self.output_format!r}. "
                f"Allowed: {', '.join(f.value for f in OutputFormat)}"
            ) from e

        if not isinstance(self.configuration, dict):
            raise ChartRequestError("configuration must be a mapping")


@dataclass(frozen=True)
class DeliveryConfig:
    """
    Runtime-derived delivery settings.

    Built once per call from settings, never read from the environment
    by the resolver itself.
    """

    local_file_mode: bool = False
    charts_dir: Path = field(default_factory=lambda: Path("charts"))
    public_base_url: str = DEFAULT_PUBLIC_BASE_URL
    debug: bool = False


# --- Output Models ---


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of one attempted delivery strategy."""

    mode: DeliveryMode
    url: str | None = None
    error: str | None = None
    skipped: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.skipped and self.error is None

    @classmethod
    def success(cls, mode: DeliveryMode, url: str | None = None) -> DeliveryOutcome:
        return cls(mode=mode, url=url)

    @classmethod
    def failure(cls, mode: DeliveryMode, error: BaseException | str) -> DeliveryOutcome:
        return cls(mode=mode, error=str(error))

    @classmethod
    def skip(cls, mode: DeliveryMode) -> DeliveryOutcome:
        return cls(mode=mode, skipped=True)


@dataclass(frozen=True)
class ContentEnvelope:
    """Protocol response wrapper: an ordered list of content items."""

    content: list[ContentItem]
    mode: DeliveryMode | None = None

    @classmethod
    def text(cls, text: str, mode: DeliveryMode | None = None) -> ContentEnvelope:
        return cls(content=[TextContent(type="text", text=text)], mode=mode)

    @classmethod
    def image(cls, data: str, mime_type: str = PNG_MIME_TYPE) -> ContentEnvelope:
        return cls(
            content=[ImageContent(type="image", data=data, mimeType=mime_type)],
            mode=DeliveryMode.INLINE,
        )

    def to_dict(self) -> dict[str, Any]:
        """Wire shape consumed by MCP clients."""
        return {"content": [item.model_dump(exclude_none=True) for item in self.content]}


@dataclass(frozen=True)
class DeliveryEvent:
    """Diagnostic event emitted to observers."""

    kind: EventKind
    label: str
    mode: DeliveryMode | None = None
    details: dict[str, Any] = field(default_factory=dict)
