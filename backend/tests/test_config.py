"""
Tests for application settings.
"""

import pytest
from pydantic import ValidationError

from service_cm.config import Settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        """Test the default tag prefix and annotation thresholds."""
        settings = Settings(_env_file=None)

        assert settings.feature_tag_prefix == "feature"
        assert settings.change_annotation_min_length == 4
        assert settings.commit_annotation_min_length == 8

    def test_environment_override(self, monkeypatch):
        """Test reading thresholds and log level from the environment."""
        monkeypatch.setenv("COMMIT_ANNOTATION_MIN_LENGTH", "12")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.commit_annotation_min_length == 12
        assert settings.log_level == "DEBUG"

    def test_prefix_must_be_one_segment(self):
        """Test that the tag prefix cannot contain a separator."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, feature_tag_prefix="feature/x")

    def test_cors_origins_from_string(self):
        """Test splitting a comma-separated origin list."""
        settings = Settings(_env_file=None, cors_origins="http://a.example, http://b.example")

        assert settings.cors_origins == ["http://a.example", "http://b.example"]
