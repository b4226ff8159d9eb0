"""
Delivery component - Chart rendering and MCP content delivery.
"""

from .component import (
    FILENAME_ALPHABET,
    FILENAME_SUFFIX_LENGTH,
    DeliveryStrategy,
    build_chart_url,
    build_strategies,
    deliver_raster,
    encode_inline,
    generate_chart_filename,
    generate_chart_image,
    resolve,
    run,
)
from .models import (
    DEFAULT_HEIGHT,
    DEFAULT_LABEL,
    DEFAULT_PUBLIC_BASE_URL,
    DEFAULT_WIDTH,
    PNG_EXTENSION,
    PNG_MIME_TYPE,
    ChartRenderError,
    ChartRequest,
    ChartRequestError,
    ContentEnvelope,
    ContentItem,
    DeliveryConfig,
    DeliveryEvent,
    DeliveryMode,
    DeliveryOutcome,
    EventKind,
    OutputFormat,
    RenderedArtifact,
    Theme,
)
from .ports import (
    ChartFileSinkPort,
    DeliveryObserver,
    ObjectStorePort,
    RendererPort,
)

__all__ = [
    # Entry points
    "run",
    "generate_chart_image",
    "resolve",
    "deliver_raster",
    # Helper functions
    "build_chart_url",
    "build_strategies",
    "encode_inline",
    "generate_chart_filename",
    "DeliveryStrategy",
    # Constants
    "DEFAULT_HEIGHT",
    "DEFAULT_LABEL",
    "DEFAULT_PUBLIC_BASE_URL",
    "DEFAULT_WIDTH",
    "FILENAME_ALPHABET",
    "FILENAME_SUFFIX_LENGTH",
    "PNG_EXTENSION",
    "PNG_MIME_TYPE",
    # Input models
    "ChartRequest",
    "DeliveryConfig",
    "OutputFormat",
    "Theme",
    # Output models
    "ContentEnvelope",
    "ContentItem",
    "DeliveryEvent",
    "DeliveryMode",
    "DeliveryOutcome",
    "EventKind",
    "RenderedArtifact",
    # Errors
    "ChartRenderError",
    "ChartRequestError",
    # Ports
    "ChartFileSinkPort",
    "DeliveryObserver",
    "ObjectStorePort",
    "RendererPort",
]
