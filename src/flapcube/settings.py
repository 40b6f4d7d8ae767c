"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Malformed game constants are rejected here, before any entity is built.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GameSettings(BaseSettings):
    """Simulation constants, fixed for the lifetime of a run."""

    model_config = SettingsConfigDict(env_prefix="FLAPCUBE_GAME_", extra="ignore")

    # Playfield
    width: int = Field(default=500, gt=0)
    height: int = Field(default=600, gt=0)
    fps: int = Field(default=60, gt=0)

    # Falling body
    gravity: float = Field(default=0.65, gt=0)
    jump_impulse: float = Field(default=12.0, gt=0)
    max_fall_speed: float = Field(default=4.0, gt=0)
    body_x_ratio: float = Field(default=0.15, ge=0.0, lt=1.0)
    body_width: int = Field(default=30, gt=0)
    body_height: int = Field(default=30, gt=0)

    # Obstacles
    obstacle_width: int = Field(default=70, gt=0)
    min_gap: float = Field(default=230, gt=0)
    max_gap: float = Field(default=300, gt=0)
    gap_margin: float = Field(default=100, ge=0)
    obstacle_speed: float = Field(default=2.5, gt=0)

    # Spawn cadence
    spawn_policy: Literal["interval", "distance"] = "interval"
    spawn_interval: int = Field(default=95, gt=0)  # frames
    spawn_distance_min: float = Field(default=200, gt=0)
    spawn_distance_max: float = Field(default=300, gt=0)

    countdown_seconds: int = Field(default=3, ge=0)

    # None draws a fresh seed per session
    seed: int | None = None

    @model_validator(mode="after")
    def _check_geometry(self) -> "GameSettings":
        if self.min_gap > self.max_gap:
            raise ValueError(
                f"min_gap ({self.min_gap}) must not exceed max_gap ({self.max_gap})"
            )
        if self.max_gap + 2 * self.gap_margin > self.height:
            raise ValueError(
                f"max_gap ({self.max_gap}) plus two gap margins ({self.gap_margin}) "
                f"does not fit in playfield height {self.height}"
            )
        if self.spawn_distance_min > self.spawn_distance_max:
            raise ValueError(
                f"spawn_distance_min ({self.spawn_distance_min}) must not exceed "
                f"spawn_distance_max ({self.spawn_distance_max})"
            )
        if self.body_x + self.body_width > self.width:
            raise ValueError(
                f"body ({self.body_width} wide at x={self.body_x}) does not fit "
                f"in playfield width {self.width}"
            )
        if self.body_height > self.height:
            raise ValueError(
                f"body_height ({self.body_height}) exceeds playfield height {self.height}"
            )
        return self

    @property
    def body_x(self) -> float:
        """Fixed horizontal position of the falling body."""
        return self.width * self.body_x_ratio


class WindowSettings(BaseSettings):
    """Simulator window settings."""

    model_config = SettingsConfigDict(env_prefix="FLAPCUBE_WINDOW_", extra="ignore")

    title: str = "FlapCube!"
    scale: int = Field(default=1, ge=1)
    show_debug: bool = True
    panel_width: int = Field(default=240, ge=0)

    # Colors
    bg_color: tuple[int, int, int] = (20, 20, 30)
    panel_color: tuple[int, int, int] = (40, 40, 50)
    text_color: tuple[int, int, int] = (200, 200, 220)
    accent_color: tuple[int, int, int] = (100, 150, 255)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="FLAPCUBE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False
    log_file: Path | None = None

    # Nested settings
    game: GameSettings = Field(default_factory=GameSettings)
    window: WindowSettings = Field(default_factory=WindowSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
