"""
Delivery component - Rendered chart to MCP content envelope.

Renders a chart request and decides how the result reaches the client.

Key behaviors:
- svg/option output is returned verbatim as a single text item
- png output walks an ordered fallback chain:
  1. local file (SSE mode only) -> text item with a served URL
  2. object store (when configured) -> text item with the store URL
  3. inline base64 -> image item, always succeeds
- Failures of steps 1-2 are reported to the observer and skipped
- Only renderer failures reach the caller, as ChartRenderError

Invariants:
- Every envelope holds exactly one content item
- Each strategy is attempted at most once per call
- Generated filenames carry a random component
"""

from __future__ import annotations

import base64
import logging
import secrets
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from .models import (
    DEFAULT_LABEL,
    PNG_EXTENSION,
    PNG_MIME_TYPE,
    ChartRenderError,
    ChartRequest,
    ContentEnvelope,
    DeliveryConfig,
    DeliveryEvent,
    DeliveryMode,
    DeliveryOutcome,
    EventKind,
    OutputFormat,
    RenderedArtifact,
)
from .ports import ChartFileSinkPort, DeliveryObserver, ObjectStorePort, RendererPort

logger = logging.getLogger(__name__)

FILENAME_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
FILENAME_SUFFIX_LENGTH = 9


# --- Helper Functions ---


def generate_chart_filename(now_ms: int | None = None, suffix: str | None = None) -> str:
    """
    Build a collision-resistant chart filename.

    Format: chart-{epoch_ms}-{9 base36 chars}.png
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    if suffix is None:
        suffix = "".join(
            secrets.choice(FILENAME_ALPHABET) for _ in range(FILENAME_SUFFIX_LENGTH)
        )
    return f"chart-{now_ms}-{suffix}.{PNG_EXTENSION}"


def build_chart_url(base_url: str, filename: str) -> str:
    """Join the public base URL with the charts route."""
    return f"{base_url.rstrip('/')}/charts/{filename}"


def encode_inline(data: bytes) -> str:
    """Base64-encode image bytes for an inline image item."""
    return base64.b64encode(data).decode("ascii")


# --- Strategies ---


@dataclass(frozen=True)
class DeliveryStrategy:
    """One candidate delivery mechanism for raster bytes."""

    mode: DeliveryMode
    precondition: Callable[[], bool]
    attempt: Callable[[bytes], DeliveryOutcome]


def _always() -> bool:
    return True


def build_strategies(
    config: DeliveryConfig,
    *,
    object_store: ObjectStorePort,
    file_sink: ChartFileSinkPort,
) -> list[DeliveryStrategy]:
    """
    Build the ordered raster fallback chain.

    The last strategy (inline) must never raise.
    """

    def save_locally(data: bytes) -> DeliveryOutcome:
        file_sink.ensure_directory(config.charts_dir)
        filename = generate_chart_filename()
        file_sink.write(config.charts_dir / filename, data)
        return DeliveryOutcome.success(
            DeliveryMode.LOCAL_FILE, build_chart_url(config.public_base_url, filename)
        )

    def upload(data: bytes) -> DeliveryOutcome:
        url = object_store.store(data, PNG_EXTENSION, PNG_MIME_TYPE)
        return DeliveryOutcome.success(DeliveryMode.OBJECT_STORE, url)

    def inline(data: bytes) -> DeliveryOutcome:
        return DeliveryOutcome.success(DeliveryMode.INLINE)

    return [
        DeliveryStrategy(DeliveryMode.LOCAL_FILE, lambda: config.local_file_mode, save_locally),
        DeliveryStrategy(DeliveryMode.OBJECT_STORE, object_store.is_configured, upload),
        DeliveryStrategy(DeliveryMode.INLINE, _always, inline),
    ]


# --- Observation ---


def _emit(
    observer: DeliveryObserver | None,
    kind: EventKind,
    label: str,
    mode: DeliveryMode | None = None,
    **details: Any,
) -> None:
    if observer is None:
        return
    try:
        observer.notify(DeliveryEvent(kind=kind, label=label, mode=mode, details=details))
    except Exception:
        logger.exception("Delivery observer failed on %s for %s", kind.value, label)


# --- Resolver ---


def _envelope_for(outcome: DeliveryOutcome, data: bytes) -> ContentEnvelope:
    if outcome.mode is DeliveryMode.INLINE:
        return ContentEnvelope.image(encode_inline(data), PNG_MIME_TYPE)
    return ContentEnvelope.text(outcome.url or "", mode=outcome.mode)


def deliver_raster(
    data: bytes,
    strategies: Sequence[DeliveryStrategy],
    *,
    label: str = DEFAULT_LABEL,
    observer: DeliveryObserver | None = None,
) -> ContentEnvelope:
    """
    Walk the strategies in order and return the first successful delivery.

    A strategy whose precondition is false is skipped; one whose precondition
    or attempt raises is recorded as failed. Either way the next one runs.
    """
    if not strategies or strategies[-1].mode is not DeliveryMode.INLINE:
        raise ValueError("Raster delivery chain must end with the inline strategy")

    *optional, terminal = strategies

    for strategy in optional:
        try:
            if not strategy.precondition():
                _emit(observer, EventKind.STEP_SKIPPED, label, strategy.mode)
                continue
            outcome = strategy.attempt(data)
        except Exception as e:
            _emit(observer, EventKind.STEP_FAILED, label, strategy.mode, error=str(e))
            continue

        if outcome.succeeded:
            envelope = _envelope_for(outcome, data)
            _emit(observer, EventKind.DELIVERED, label, strategy.mode, url=outcome.url)
            return envelope

        _emit(observer, EventKind.STEP_FAILED, label, strategy.mode, error=outcome.error)

    outcome = terminal.attempt(data)
    envelope = _envelope_for(outcome, data)
    _emit(
        observer,
        EventKind.DELIVERED,
        label,
        DeliveryMode.INLINE,
        data_length=len(envelope.content[0].data),  # type: ignore[union-attr]
    )
    return envelope


def resolve(
    artifact: RenderedArtifact,
    output_format: OutputFormat | str,
    config: DeliveryConfig,
    *,
    object_store: ObjectStorePort,
    file_sink: ChartFileSinkPort,
    label: str = DEFAULT_LABEL,
    observer: DeliveryObserver | None = None,
) -> ContentEnvelope:
    """
    Turn a rendered artifact into a content envelope.

    Never raises for delivery failures.

    Args:
        artifact: PNG bytes for raster output, text otherwise.
        output_format: Requested output format.
        config: Delivery settings (local-file mode, charts dir, base URL).
        object_store: Object store port.
        file_sink: Local file sink port.
        label: Diagnostic name of the calling tool.
        observer: Optional event observer.

    Returns:
        ContentEnvelope with exactly one item.
    """
    output_format = OutputFormat(output_format)

    if not output_format.is_raster:
        text = artifact.decode("utf-8") if isinstance(artifact, bytes) else artifact
        _emit(observer, EventKind.DELIVERED, label, None, content_type="text", text_length=len(text))
        return ContentEnvelope.text(text)

    if not isinstance(artifact, bytes):
        raise TypeError("Raster output requires a bytes artifact")

    strategies = build_strategies(config, object_store=object_store, file_sink=file_sink)
    return deliver_raster(artifact, strategies, label=label, observer=observer)


# --- Component Entry Points ---


def generate_chart_image(
    request: ChartRequest,
    *,
    renderer: RendererPort,
    object_store: ObjectStorePort,
    file_sink: ChartFileSinkPort,
    config: DeliveryConfig,
    observer: DeliveryObserver | None = None,
) -> ContentEnvelope:
    """
    Render a chart and deliver it.

    Raises:
        ChartRenderError: If the renderer fails or returns the wrong artifact type.
    """
    label = request.label
    _emit(
        observer,
        EventKind.RENDER_STARTED,
        label,
        width=request.width,
        height=request.height,
        theme=request.theme.value,
        output_format=request.output_format.value,
        option_keys=sorted(request.configuration),
    )

    try:
        artifact = renderer.render(
            request.configuration,
            request.width,
            request.height,
            request.theme,
            request.output_format,
        )
        if request.output_format.is_raster and not isinstance(artifact, bytes):
            raise TypeError(f"renderer returned {type(artifact).__name__} for png output")
    except Exception as e:
        _emit(observer, EventKind.RENDER_FAILED, label, error=str(e))
        raise ChartRenderError(str(e)) from e

    return resolve(
        artifact,
        request.output_format,
        config,
        object_store=object_store,
        file_sink=file_sink,
        label=label,
        observer=observer,
    )


def run(
    request: ChartRequest,
    *,
    renderer: RendererPort,
    object_store: ObjectStorePort,
    file_sink: ChartFileSinkPort,
    config: DeliveryConfig,
    observer: DeliveryObserver | None = None,
) -> ContentEnvelope:
    """Component entry point."""
    return generate_chart_image(
        request,
        renderer=renderer,
        object_store=object_store,
        file_sink=file_sink,
        config=config,
        observer=observer,
    )
