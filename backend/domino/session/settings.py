"""Synchronized session configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings

from domino.logic.layout import DEFAULT_BOARD_HEIGHT, DEFAULT_BOARD_WIDTH, DEFAULT_BOUNDARY_MARGIN, LayoutBounds


class SessionSettings(BaseSettings):
    model_config = {"env_prefix": "DOMINO_"}

    log_dir: str = Field(default="backend/logs/domino", min_length=1)
    store_path: str = Field(default="backend/data/domino.sqlite3", min_length=1)
    request_timeout_seconds: float = Field(default=5.0, gt=0)
    retry_attempts: int = Field(default=3, ge=1)
    retry_base_delay_seconds: float = Field(default=0.3, ge=0)
    poll_interval_seconds: float = Field(default=3.0, gt=0)
    board_width: int = Field(default=DEFAULT_BOARD_WIDTH, ge=1)
    board_height: int = Field(default=DEFAULT_BOARD_HEIGHT, ge=1)
    board_margin: int = Field(default=DEFAULT_BOUNDARY_MARGIN, ge=0)

    def layout_bounds(self) -> LayoutBounds:
        return LayoutBounds(width=self.board_width, height=self.board_height, margin=self.board_margin)
