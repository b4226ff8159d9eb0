from pathlib import Path

import pytest

from chart_mcp.rules.loader import is_sse_launch, load_settings
from chart_mcp.rules.models import Settings


def test_defaults():
    settings = load_settings(environ={}, argv=[])

    assert settings.debug is False
    assert settings.local_file_mode is False
    assert settings.port == 3033
    assert settings.base_url == "http://localhost:3033"
    assert settings.minio.bucket == "mcp-echarts"


def test_sse_mode_env():
    settings = load_settings(environ={"MCP_SSE_MODE": "true"}, argv=[])
    assert settings.local_file_mode is True


def test_sse_mode_env_false():
    settings = load_settings(environ={"MCP_SSE_MODE": "false"}, argv=[])
    assert settings.local_file_mode is False


@pytest.mark.parametrize(
    "argv,expected",
    [
        (["-t", "sse"], True),
        (["--transport", "sse"], True),
        (["--transport=sse"], True),
        (["-t", "stdio"], False),
        (["sse"], False),
        ([], False),
    ],
)
def test_is_sse_launch(argv, expected):
    assert is_sse_launch(argv) is expected


def test_sse_launch_args_enable_local_files():
    settings = load_settings(environ={}, argv=["-t", "sse"])
    assert settings.transport == "sse"
    assert settings.local_file_mode is True


def test_debug_toggle():
    assert load_settings(environ={"DEBUG_MCP_ECHARTS": "1"}, argv=[]).debug is True
    assert load_settings(environ={"DEBUG_MCP_ECHARTS": ""}, argv=[]).debug is False


def test_minio_env():
    settings = load_settings(
        environ={
            "MINIO_ENDPOINT": "minio:9000",
            "MINIO_ACCESS_KEY": "ak",
            "MINIO_SECRET_KEY": "sk",
            "MINIO_BUCKET_NAME": "charts",
            "MINIO_USE_SSL": "true",
        },
        argv=[],
    )
    assert settings.minio.endpoint == "minio:9000"
    assert settings.minio.bucket == "charts"
    assert settings.minio.secure is True


def test_port_drives_base_url():
    settings = load_settings(environ={"MCP_PORT": "8080"}, argv=[])
    assert settings.base_url == "http://localhost:8080"

    explicit = load_settings(
        environ={"MCP_PORT": "8080", "MCP_PUBLIC_BASE_URL": "https://charts.example.com/"},
        argv=[],
    )
    assert explicit.base_url == "https://charts.example.com"


def test_yaml_file_with_env_override(tmp_path: Path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "debug: true\nport: 4000\nminio:\n  endpoint: minio:9000\n  bucket: from-file\n"
    )

    settings = load_settings(path, environ={"MINIO_BUCKET_NAME": "from-env"}, argv=[])

    assert settings.debug is True
    assert settings.port == 4000
    assert settings.minio.endpoint == "minio:9000"
    assert settings.minio.bucket == "from-env"


def test_yaml_code_fence(tmp_path: Path):
    path = tmp_path / "settings.md"
    path.write_text("# Settings\n\n```yaml\nport: 5000\n```\n\nNotes.\n")
    assert load_settings(path, environ={}, argv=[]).port == 5000


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "nope.yaml", environ={}, argv=[])


def test_invalid_yaml(tmp_path: Path):
    path = tmp_path / "bad.yaml"
    path.write_text("port: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_settings(path, environ={}, argv=[])


def test_validation_error(tmp_path: Path):
    path = tmp_path / "bad.yaml"
    path.write_text("port: 0\n")
    with pytest.raises(ValueError, match="validation failed"):
        load_settings(path, environ={}, argv=[])


def test_unknown_key_rejected(tmp_path: Path):
    path = tmp_path / "bad.yaml"
    path.write_text("colour: blue\n")
    with pytest.raises(ValueError, match="validation failed"):
        load_settings(path, environ={}, argv=[])


def test_delivery_config(tmp_path: Path):
    settings = Settings(sse_mode=True, charts_dir=tmp_path / "out", port=3100, debug=True)
    config = settings.delivery_config()

    assert config.local_file_mode is True
    assert config.charts_dir == (tmp_path / "out").resolve()
    assert config.charts_dir.is_absolute()
    assert config.public_base_url == "http://localhost:3100"
    assert config.debug is True
