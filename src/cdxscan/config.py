"""Configuration via pydantic-settings — 12-factor app style."""
from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_OFFICE_EXTENSIONS = [
    ".doc", ".docx", ".docm", ".dot", ".dotx",
    ".xls", ".xlsx", ".xlsm", ".xlsb", ".xlt",
    ".ppt", ".pptx", ".pptm", ".pps", ".ppsx",
    ".vsd", ".vsdx", ".pub", ".msg",
]

_OFFICE_MIME_TYPES = [
    "application/msword",
    "application/vnd.ms-excel",
    "application/vnd.ms-powerpoint",
    "application/vnd.ms-word*",
    "application/vnd.ms-excel.*",
    "application/vnd.ms-powerpoint.*",
    "application/vnd.openxmlformats-officedocument.*",
    "application/vnd.visio",
    "application/x-mspublisher",
    "application/vnd.ms-outlook",
]


class Settings(BaseSettings):
    """cdxscan configuration — loaded from env vars / .env file."""

    crawl_id: str = Field(default="CC-MAIN-2017-34", description="Common Crawl collection identifier")
    base_url: str = Field(default="https://commoncrawl.s3.amazonaws.com", description="Host serving cc-index")
    start_index: int = Field(default=0, ge=0, description="First shard index (inclusive)")
    end_index: int = Field(default=299, ge=0, description="Last shard index (inclusive)")
    output_file: Path | None = Field(default=None, description="Append-only output file")
    http_timeout: float = Field(default=600.0, gt=0, description="Connect/read timeout in seconds")
    read_buffer_size: int = Field(default=1024 * 1024, ge=1024 * 1024, description="Text read buffer in bytes")
    log_every_lines: int = Field(default=100_000, gt=0, description="Progress log interval in lines")
    log_every_seconds: float = Field(default=10.0, gt=0, description="Progress log interval in seconds")
    extensions: list[str] = Field(default_factory=lambda: list(_OFFICE_EXTENSIONS))
    mime_types: list[str] = Field(default_factory=lambda: list(_OFFICE_MIME_TYPES))
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO", description="Logging level name")

    model_config = SettingsConfigDict(env_prefix="CDXSCAN_", env_file=".env", extra="ignore")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @property
    def output_path(self) -> Path:
        return self.output_file or Path(f"commoncrawl-{self.crawl_id}.txt")
