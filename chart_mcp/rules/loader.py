import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from chart_mcp.rules.models import Settings

TRUE_VALUES = {"1", "true", "yes", "on"}

# env var -> (section, key); section None means top level
ENV_OVERRIDES: dict[str, tuple[str | None, str]] = {
    "DEBUG_MCP_ECHARTS": (None, "debug"),
    "MCP_SSE_MODE": (None, "sse_mode"),
    "MCP_HOST": (None, "host"),
    "MCP_PORT": (None, "port"),
    "MCP_CHARTS_DIR": (None, "charts_dir"),
    "MCP_PUBLIC_BASE_URL": (None, "public_base_url"),
    "MINIO_ENDPOINT": ("minio", "endpoint"),
    "MINIO_ACCESS_KEY": ("minio", "access_key"),
    "MINIO_SECRET_KEY": ("minio", "secret_key"),
    "MINIO_BUCKET_NAME": ("minio", "bucket"),
    "MINIO_USE_SSL": ("minio", "secure"),
    "MINIO_PUBLIC_URL": ("minio", "public_url"),
}

BOOL_KEYS = {"debug", "sse_mode", "secure"}


def _strip_fences(content: str) -> str:
    """Use the first ```yaml block if present, else the whole file."""
    lines = content.splitlines()
    yaml_lines = []
    in_block = False
    found_block = False

    for line in lines:
        s_line = line.strip()
        if s_line.startswith("```yaml"):
            in_block = True
            found_block = True
            continue
        if in_block and s_line.startswith("```"):
            break
        if in_block:
            yaml_lines.append(line)

    return "\n".join(yaml_lines) if found_block else content


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found at: {path}")

    with open(path) as f:
        content = _strip_fences(f.read())

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in settings file: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Settings file must contain a mapping at the top level")
    return data


def _env_value(key: str, raw: str) -> Any:
    if key in BOOL_KEYS:
        return raw.strip().lower() in TRUE_VALUES
    return raw


def is_sse_launch(argv: Sequence[str]) -> bool:
    """True when launch arguments select the SSE transport (-t sse / --transport sse)."""
    args = list(argv)
    if ("-t" in args or "--transport" in args) and "sse" in args:
        return True
    return "--transport=sse" in args


def load_settings(
    path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    argv: Sequence[str] | None = None,
) -> Settings:
    """
    Load settings: optional YAML file, then environment, then launch arguments.
    Raises FileNotFoundError if an explicit file is missing.
    Raises ValueError if the YAML or the resulting settings are invalid.
    """
    environ = os.environ if environ is None else environ
    data: dict[str, Any] = _read_yaml(path) if path is not None else {}

    for env_var, (section, key) in ENV_OVERRIDES.items():
        raw = environ.get(env_var)
        if raw is None or raw == "":
            continue
        target = data.setdefault(section, {}) if section else data
        if target is None:
            target = data[section] = {}
        target[key] = _env_value(key, raw)

    if argv is not None and is_sse_launch(argv):
        data["transport"] = "sse"

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Settings validation failed:\n{e}") from e
