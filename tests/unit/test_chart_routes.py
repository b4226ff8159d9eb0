"""
Tests for chart serving routes.

Local delivery URLs must resolve against the same app that serves charts.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from chart_mcp.adapters.fs.filestore import ChartFileSink
from chart_mcp.adapters.minio_store import NullObjectStore
from chart_mcp.components.delivery import DeliveryConfig, OutputFormat, resolve
from chart_mcp.rules.models import Settings
from chart_mcp.shell.http.charts import create_http_app

PNG_BYTES = b"\x89PNG\r\n\x1a\nroute-test"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(sse_mode=True, charts_dir=tmp_path / "charts")


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_http_app(settings)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


def test_delivered_chart_is_served(settings: Settings, client: TestClient) -> None:
    config: DeliveryConfig = settings.delivery_config()
    env = resolve(
        PNG_BYTES,
        OutputFormat.PNG,
        config,
        object_store=NullObjectStore(),
        file_sink=ChartFileSink(config.charts_dir),
    )
    url = env.content[0].text
    assert url.startswith("http://localhost:3033/charts/chart-")

    response = client.get(url.removeprefix("http://localhost:3033"))

    assert response.status_code == 200
    assert response.content == PNG_BYTES
    assert response.headers["content-type"] == "image/png"
    assert "immutable" in response.headers["cache-control"]


def test_missing_chart_404(client: TestClient) -> None:
    response = client.get("/charts/chart-1-abc.png")
    assert response.status_code == 404


@pytest.mark.parametrize("name", ["notes.txt", "chart-1-abc.svg", "..%2Fsecret.png", "x.png"])
def test_invalid_names_rejected(client: TestClient, name: str) -> None:
    response = client.get(f"/charts/{name}")
    assert response.status_code in (400, 404)
    assert response.status_code != 200


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["local_file_mode"] is True
    assert body["charts_url"] == "http://localhost:3033/charts/"
