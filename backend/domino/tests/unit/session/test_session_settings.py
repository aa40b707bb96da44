"""
Tests for environment-driven session configuration.
"""

import pytest
from pydantic import ValidationError

from domino.session.settings import SessionSettings


class TestSessionSettings:
    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("DOMINO_RETRY_ATTEMPTS", "5")
        monkeypatch.setenv("DOMINO_BOARD_WIDTH", "1600")
        settings = SessionSettings()
        assert settings.retry_attempts == 5
        assert settings.board_width == 1600

    def test_layout_bounds(self):
        bounds = SessionSettings(board_width=900, board_height=500, board_margin=10).layout_bounds()
        assert (bounds.width, bounds.height, bounds.margin) == (900, 500, 10)

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValidationError):
            SessionSettings(retry_attempts=0)

    def test_rejects_non_positive_poll_interval(self):
        with pytest.raises(ValidationError):
            SessionSettings(poll_interval_seconds=0)
