# Path: config/settings.py
# Purpose: Provide typed application configuration models.
# Layer: config.
# Details: Centralizes settings for retrieval, history, persistence, and the correction provider.

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "ONMODEL_"


class RetrievalSettings(BaseModel):
    """Settings controlling reference retrieval and fingerprinting."""

    fingerprint: str = Field(default="luminance", description="Fingerprint implementation: 'luminance' or 'phash'.")
    grid_size: int = Field(default=16, description="Side length of the downsampled luminance grid.")
    limit: int = Field(default=8, description="Maximum number of references returned per ranking.")

    @field_validator("fingerprint")
    @classmethod
    def fingerprint_must_be_known(cls, v: str) -> str:
        if v not in {"luminance", "phash"}:
            raise ValueError("fingerprint must be 'luminance' or 'phash'")
        return v

    @field_validator("grid_size")
    @classmethod
    def grid_must_have_neighbours(cls, v: int) -> int:
        if v < 2:
            raise ValueError("grid_size must be at least 2")
        return v

    @field_validator("limit")
    @classmethod
    def limit_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("limit must be at least 1")
        return v


class HistorySettings(BaseModel):
    """Settings for the in-memory refinement log."""

    capacity: int = Field(default=20, ge=1, description="Maximum number of sessions kept, newest first.")


class StorageSettings(BaseModel):
    """Settings describing where persisted records live."""

    data_dir: Path = Field(default=Path("storage/state"), description="Directory holding the JSON records.")


class AppSettings(BaseModel):
    """Top-level application settings shared across services and interfaces."""

    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    history: HistorySettings = Field(default_factory=HistorySettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    fidelity_tolerance: float = Field(
        default=0.004,
        ge=0.0,
        le=1.0,
        description="Largest diff outside the mask still counted as absolute line fidelity.",
    )
    log_level: str = Field(default="INFO", description="Verbosity level for application logs.")

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Instantiate settings, overriding defaults with ONMODEL_* environment variables."""

        env = os.environ
        payload: dict = {}
        if f"{ENV_PREFIX}LOG_LEVEL" in env:
            payload["log_level"] = env[f"{ENV_PREFIX}LOG_LEVEL"]
        if f"{ENV_PREFIX}FIDELITY_TOLERANCE" in env:
            payload["fidelity_tolerance"] = env[f"{ENV_PREFIX}FIDELITY_TOLERANCE"]
        if f"{ENV_PREFIX}DATA_DIR" in env:
            payload["storage"] = {"data_dir": env[f"{ENV_PREFIX}DATA_DIR"]}
        if f"{ENV_PREFIX}HISTORY_CAPACITY" in env:
            payload["history"] = {"capacity": env[f"{ENV_PREFIX}HISTORY_CAPACITY"]}
        retrieval: dict = {}
        if f"{ENV_PREFIX}FINGERPRINT" in env:
            retrieval["fingerprint"] = env[f"{ENV_PREFIX}FINGERPRINT"]
        if f"{ENV_PREFIX}RETRIEVAL_LIMIT" in env:
            retrieval["limit"] = env[f"{ENV_PREFIX}RETRIEVAL_LIMIT"]
        if retrieval:
            payload["retrieval"] = retrieval
        return cls.model_validate(payload)


__all__ = ["AppSettings", "HistorySettings", "RetrievalSettings", "StorageSettings"]
