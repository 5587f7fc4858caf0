# playdiag/common/settings.py
from __future__ import annotations

from functools import lru_cache
from typing import List
from pydantic import BaseModel, Field, field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict
from playdiag.common.strings.splitters import csv_to_list


class APIConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    prefix: str = "/api"

    cors_allow_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["GET", "POST", "OPTIONS"])
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = False

    @field_validator("cors_allow_origins", "cors_allow_methods", "cors_allow_headers", mode="before")
    @classmethod
    def _split_csv(cls, v):
        return csv_to_list(v)


class FFProbeConfig(BaseModel):
    bin: str = "ffprobe"
    # Corrupt inputs can hang ffprobe; this bound is independent of any caller default.
    timeout_sec: int = Field(30, ge=1)
    log_level: str = "error"  # quiet|panic|fatal|error|warning|info|verbose|debug|trace


class FFmpegConfig(BaseModel):
    bin: str = "ffmpeg"
    timeout_sec: int = Field(120, ge=1)
    integrity_window_sec: int = Field(60, ge=1, description="Seconds decoded by the integrity pass")
    max_error_lines: int = Field(50, ge=1, description="Cap on captured decoder error lines")


class AnalysisConfig(BaseModel):
    gop_sample_frames: int = Field(1000, ge=1, description="Max frames sampled for GOP estimation")
    gop_warn_frames: int = Field(250, ge=1, description="Estimated GOP size above which seeking suffers")
    high_bitrate_mbps: float = Field(60.0, gt=0)
    workers: int = Field(4, ge=1, le=16, description="Evaluator threads per analysis")

    @computed_field  # type: ignore[misc]
    @property
    def high_bitrate_bps(self) -> int:
        return int(self.high_bitrate_mbps * 1_000_000)


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "playdiag"
    app_env: str = "development"  # development|test|staging|production
    log_level: str = "INFO"

    # -------- Sub-configs --------
    api: APIConfig = APIConfig()
    ffprobe: FFProbeConfig = FFProbeConfig()
    ffmpeg: FFmpegConfig = FFmpegConfig()
    analysis: AnalysisConfig = AnalysisConfig()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from playdiag.common.settings import get_settings
        cfg = get_settings()
    """
    return Settings()  # pydantic_settings will read from .env automatically
