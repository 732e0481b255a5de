from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FAVICON_", env_file=".env", extra="ignore")

    path: Path | None = None  # source image; ideally at least 512x512
    webmanifest: dict[str, Any] | None = None  # site.webmanifest fields, JSON when set via env
    dev_server_prefix: str = "/@favicon-kit/DEV/"
    assets_dir: str = "assets"
    base: str = "/"  # public base URL prepended to module references in build mode
    out_dir: Path = Path("dist")
    svg_density: int = 512  # DPI used to rasterize vector sources
    max_workers: int = 4  # variant resize threads. 1 = serialize.
    log_level: str = "INFO"


settings = Settings()
