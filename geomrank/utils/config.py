"""Configuration and settings management."""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import field_validator

from ..core.constants import (
    DEFAULT_FILTER_THRESHOLD,
    DEFAULT_NUM_DOCS_RERANK,
    DEFAULT_RANSAC_MAX_ITER,
    DEFAULT_RANSAC_SUCCESS_THRESHOLD,
    DEFAULT_SCORING_SCHEME,
    DEFAULT_TOLERANCE,
)


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"

    # Re-ranking window; 0 or negative means the whole result set
    GEOM_NUM_DOCS_RERANK: int = DEFAULT_NUM_DOCS_RERANK

    # Ambiguous correspondence filtering; <= 0 disables it
    GEOM_FILTER_THRESHOLD: float = DEFAULT_FILTER_THRESHOLD

    # RANSAC
    GEOM_RANSAC_SUCCESS_THRESHOLD: float = DEFAULT_RANSAC_SUCCESS_THRESHOLD
    GEOM_RANSAC_MAX_ITER: int = DEFAULT_RANSAC_MAX_ITER
    RANSAC_SEED: Optional[int] = None

    # Scoring
    GEOM_SCORING_SCHEME: str = DEFAULT_SCORING_SCHEME

    # Residual tolerances per model
    AFFINE_TOLERANCE: float = DEFAULT_TOLERANCE
    HOMOGRAPHY_TOLERANCE: float = DEFAULT_TOLERANCE

    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        """Convert empty/whitespace strings to default."""
        if isinstance(v, str) and not v.strip():
            return "INFO"
        return v

    @field_validator('GEOM_SCORING_SCHEME', mode='before')
    @classmethod
    def validate_scoring_scheme(cls, v):
        """Normalise scheme names; empty/whitespace strings become the default."""
        if isinstance(v, str):
            if not v.strip():
                return DEFAULT_SCORING_SCHEME
            return v.strip().upper()
        return v

    @field_validator('RANSAC_SEED', mode='before')
    @classmethod
    def validate_seed(cls, v):
        """Convert empty/whitespace strings to None."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }

# Global settings instance
settings = Settings()
