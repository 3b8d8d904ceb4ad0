"""Unit tests for configuration management."""

import os
from unittest.mock import patch

import pytest

from geomrank.utils.config import Settings


class TestSettings:
    """Test Settings class configuration."""

    def test_settings_default_values(self):
        """Test that Settings has correct default values."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.LOG_LEVEL == "INFO"
        assert settings.GEOM_NUM_DOCS_RERANK == 0
        assert settings.GEOM_FILTER_THRESHOLD == 0.5
        assert settings.GEOM_RANSAC_SUCCESS_THRESHOLD == 0.5
        assert settings.GEOM_RANSAC_MAX_ITER == 100
        assert settings.GEOM_SCORING_SCHEME == "NUM_MATCHES"
        assert settings.AFFINE_TOLERANCE == 20.0
        assert settings.HOMOGRAPHY_TOLERANCE == 20.0
        assert settings.RANSAC_SEED is None

    def test_settings_from_environment(self):
        """Test that Settings can be configured from environment variables."""
        with patch.dict(os.environ, {
            "LOG_LEVEL": "DEBUG",
            "GEOM_NUM_DOCS_RERANK": "50",
            "GEOM_FILTER_THRESHOLD": "0.25",
            "GEOM_RANSAC_SUCCESS_THRESHOLD": "-0.01",
            "GEOM_RANSAC_MAX_ITER": "1000",
            "GEOM_SCORING_SCHEME": "BINARY",
            "AFFINE_TOLERANCE": "4.5",
            "RANSAC_SEED": "17",
        }):
            settings = Settings()

            assert settings.LOG_LEVEL == "DEBUG"
            assert settings.GEOM_NUM_DOCS_RERANK == 50
            assert settings.GEOM_FILTER_THRESHOLD == 0.25
            assert settings.GEOM_RANSAC_SUCCESS_THRESHOLD == -0.01
            assert settings.GEOM_RANSAC_MAX_ITER == 1000
            assert settings.GEOM_SCORING_SCHEME == "BINARY"
            assert settings.AFFINE_TOLERANCE == 4.5
            assert settings.RANSAC_SEED == 17

    def test_settings_case_insensitive(self):
        """Test that Settings is case insensitive."""
        with patch.dict(os.environ, {
            "log_level": "WARNING",
            "geom_ransac_max_iter": "42"
        }):
            settings = Settings()

            assert settings.LOG_LEVEL == "WARNING"
            assert settings.GEOM_RANSAC_MAX_ITER == 42

    def test_settings_validation(self):
        """Test that Settings validates input types."""
        with patch.dict(os.environ, {
            "GEOM_RANSAC_MAX_ITER": "many",
            "GEOM_FILTER_THRESHOLD": "half"
        }):
            with pytest.raises(ValueError):
                Settings()


class TestEdgeCases:
    """Test edge cases and value normalisation."""

    def test_empty_environment_variables(self):
        """Test handling of empty environment variables."""
        with patch.dict(os.environ, {
            "LOG_LEVEL": "",
            "GEOM_SCORING_SCHEME": "  ",
            "RANSAC_SEED": "",
        }):
            settings = Settings()

            assert settings.LOG_LEVEL == "INFO"
            assert settings.GEOM_SCORING_SCHEME == "NUM_MATCHES"
            assert settings.RANSAC_SEED is None

    def test_scoring_scheme_normalised(self):
        """Test scheme names are stripped and uppercased."""
        with patch.dict(os.environ, {"GEOM_SCORING_SCHEME": " multiply_percentage_matches "}):
            settings = Settings()

            assert settings.GEOM_SCORING_SCHEME == "MULTIPLY_PERCENTAGE_MATCHES"

    def test_unknown_keys_ignored(self):
        """Test unrelated environment variables do not break settings."""
        with patch.dict(os.environ, {"GEOM_SOMETHING_ELSE": "x"}):
            settings = Settings()

            assert not hasattr(settings, "GEOM_SOMETHING_ELSE")
