import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

import uvicorn

from chart_mcp.rules.loader import load_settings
from chart_mcp.rules.models import Settings
from chart_mcp.shell.http.charts import create_http_app
from chart_mcp.shell.mcp_server import create_server

logger = logging.getLogger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chart MCP server")
    parser.add_argument(
        "-t", "--transport", choices=["stdio", "sse"], default=None, help="MCP transport"
    )
    parser.add_argument("--config", type=Path, default=None, help="Optional YAML settings file")
    parser.add_argument("--host", default=None, help="Bind host for SSE mode")
    parser.add_argument("--port", type=int, default=None, help="Port for SSE mode and chart URLs")
    parser.add_argument("--debug", action="store_true", help="Verbose delivery logging")
    return parser


def resolve_settings(args: argparse.Namespace, argv: Sequence[str]) -> Settings:
    settings = load_settings(args.config, argv=argv)

    overrides: dict[str, object] = {}
    if args.transport:
        overrides["transport"] = args.transport
    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port
    if args.debug:
        overrides["debug"] = True

    if overrides:
        settings = Settings.model_validate({**settings.model_dump(), **overrides})
    return settings


def main(argv: Sequence[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    args = build_parser().parse_args(argv)

    try:
        settings = resolve_settings(args, argv)
    except (FileNotFoundError, ValueError) as e:
        # stdout belongs to the stdio transport
        logging.basicConfig(level=logging.INFO)
        logger.error("Settings load failed: %s", e)
        sys.exit(1)

    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)

    server = create_server(settings)

    # An explicit -t wins; MCP_SSE_MODE alone implies SSE
    transport = args.transport or ("sse" if settings.local_file_mode else "stdio")

    if transport == "sse":
        logger.info("Serving SSE and charts on http://%s:%s", settings.host, settings.port)
        uvicorn.run(create_http_app(settings, server), host=settings.host, port=settings.port)
    else:
        server.run(transport="stdio")


if __name__ == "__main__":
    main()
