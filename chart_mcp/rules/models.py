from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from chart_mcp.components.delivery import DeliveryConfig


class MinioSettings(BaseModel):
    endpoint: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    bucket: str = "mcp-echarts"
    secure: bool = False
    public_url: str | None = None  # e.g. CDN in front of the bucket


class Settings(BaseModel):
    debug: bool = False
    sse_mode: bool = False
    transport: Literal["stdio", "sse"] = "stdio"
    host: str = "0.0.0.0"
    port: int = Field(default=3033, gt=0, lt=65536)
    charts_dir: Path = Path("charts")
    public_base_url: str | None = None
    minio: MinioSettings = Field(default_factory=MinioSettings)

    model_config = ConfigDict(extra="forbid")

    @property
    def local_file_mode(self) -> bool:
        return self.sse_mode or self.transport == "sse"

    @property
    def base_url(self) -> str:
        # Charts are served by this process, so the URL follows the port
        return (self.public_base_url or f"http://localhost:{self.port}").rstrip("/")

    def delivery_config(self) -> DeliveryConfig:
        return DeliveryConfig(
            local_file_mode=self.local_file_mode,
            charts_dir=self.charts_dir.resolve(),
            public_base_url=self.base_url,
            debug=self.debug,
        )
