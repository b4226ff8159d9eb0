"""
MCP server shell - registers chart tools on a FastMCP instance.

Wires the delivery component to its adapters. Settings are read once at
startup and passed down as a DeliveryConfig.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from mcp.server.fastmcp import FastMCP

from chart_mcp.adapters.fs.filestore import ChartFileSink
from chart_mcp.adapters.log_observer import CompositeObserver, LoggingObserver
from chart_mcp.adapters.minio_store import create_object_store
from chart_mcp.adapters.render.mpl_renderer import MatplotlibRenderer
from chart_mcp.components.delivery import (
    ChartFileSinkPort,
    ChartRequest,
    ContentEnvelope,
    ContentItem,
    DeliveryObserver,
    ObjectStorePort,
    RendererPort,
    run,
)
from chart_mcp.rules.models import Settings
from chart_mcp.shell.options import build_bar_option, build_line_option, build_pie_option

logger = logging.getLogger(__name__)

SERVER_NAME = "chart-mcp"

ThemeName = Literal["default", "dark"]
OutputType = Literal["png", "svg", "option"]


class ChartService:
    """Binds ports and settings so tools only pass requests."""

    def __init__(
        self,
        settings: Settings,
        *,
        renderer: RendererPort | None = None,
        object_store: ObjectStorePort | None = None,
        file_sink: ChartFileSinkPort | None = None,
        observer: DeliveryObserver | None = None,
    ) -> None:
        self.settings = settings
        self.config = settings.delivery_config()
        self.renderer = renderer or MatplotlibRenderer()
        self.object_store = object_store or create_object_store(settings.minio)
        self.file_sink = file_sink or ChartFileSink(self.config.charts_dir)
        logging_observer = LoggingObserver(debug=self.config.debug)
        self.observer: DeliveryObserver = logging_observer
        if observer is not None:
            self.observer = CompositeObserver([logging_observer, observer])

    def generate(self, request: ChartRequest) -> ContentEnvelope:
        return run(
            request,
            renderer=self.renderer,
            object_store=self.object_store,
            file_sink=self.file_sink,
            config=self.config,
            observer=self.observer,
        )

    def generate_content(
        self,
        option: dict[str, Any],
        *,
        width: int = 800,
        height: int = 600,
        theme: str = "default",
        output_type: str = "png",
        label: str = "unknown",
    ) -> list[ContentItem]:
        request = ChartRequest(
            configuration=option,
            width=width,
            height=height,
            theme=theme,  # type: ignore[arg-type]
            output_format=output_type,  # type: ignore[arg-type]
            label=label,
        )
        return self.generate(request).content


def create_server(
    settings: Settings,
    *,
    renderer: RendererPort | None = None,
    object_store: ObjectStorePort | None = None,
    file_sink: ChartFileSinkPort | None = None,
    observer: DeliveryObserver | None = None,
) -> FastMCP:
    """Build the FastMCP server with all chart tools registered."""
    service = ChartService(
        settings,
        renderer=renderer,
        object_store=object_store,
        file_sink=file_sink,
        observer=observer,
    )
    mcp = FastMCP(SERVER_NAME, host=settings.host, port=settings.port)

    @mcp.tool()
    def generate_echarts(
        echarts_option: dict[str, Any],
        width: int = 800,
        height: int = 600,
        theme: ThemeName = "default",
        output_type: OutputType = "png",
    ):
        """Render an ECharts option. png returns an image or URL, svg returns markup, option echoes the config."""
        return service.generate_content(
            echarts_option,
            width=width,
            height=height,
            theme=theme,
            output_type=output_type,
            label="generate_echarts",
        )

    @mcp.tool()
    def generate_line_chart(
        data: list[dict[str, Any]],
        title: str = "",
        axis_x_title: str = "",
        axis_y_title: str = "",
        width: int = 800,
        height: int = 600,
        theme: ThemeName = "default",
        output_type: OutputType = "png",
    ):
        """Line chart from [{category, value, group?}] points."""
        option = build_line_option(data, title or None, axis_x_title or None, axis_y_title or None)
        return service.generate_content(
            option,
            width=width,
            height=height,
            theme=theme,
            output_type=output_type,
            label="generate_line_chart",
        )

    @mcp.tool()
    def generate_bar_chart(
        data: list[dict[str, Any]],
        title: str = "",
        axis_x_title: str = "",
        axis_y_title: str = "",
        width: int = 800,
        height: int = 600,
        theme: ThemeName = "default",
        output_type: OutputType = "png",
    ):
        """Bar chart from [{category, value, group?}] points."""
        option = build_bar_option(data, title or None, axis_x_title or None, axis_y_title or None)
        return service.generate_content(
            option,
            width=width,
            height=height,
            theme=theme,
            output_type=output_type,
            label="generate_bar_chart",
        )

    @mcp.tool()
    def generate_pie_chart(
        data: list[dict[str, Any]],
        title: str = "",
        width: int = 800,
        height: int = 600,
        theme: ThemeName = "default",
        output_type: OutputType = "png",
    ):
        """Pie chart from [{category, value}] points."""
        option = build_pie_option(data, title or None)
        return service.generate_content(
            option,
            width=width,
            height=height,
            theme=theme,
            output_type=output_type,
            label="generate_pie_chart",
        )

    logger.info(
        "Chart MCP server ready (local files: %s, object store: %s)",
        service.config.local_file_mode,
        service.object_store.is_configured(),
    )
    return mcp
