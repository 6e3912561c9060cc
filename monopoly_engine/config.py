"""
Game configuration and runtime settings.

``GameConfig`` holds the rule constants the engine applies. ``EngineSettings``
holds environment-driven options for running simulated games.

Environment variables (prefix: MONOPOLY_):
    MONOPOLY_SEED                  - RNG seed (default: random)
    MONOPOLY_NUM_PLAYERS           - Number of players, 2-8 (default: 4)
    MONOPOLY_AGENT_TYPE            - random | greedy (default: greedy)
    MONOPOLY_MAX_TURNS             - Stop after this many turns (default: 500)
    MONOPOLY_MAX_ACTIONS_PER_TURN  - Force end of turn after this many actions (default: 100)
    MONOPOLY_MAX_FAILED_ACTIONS    - Rejected choices before a fallback action (default: 3)
    MONOPOLY_LOG_FILE              - JSONL game log path (default: none)
    MONOPOLY_LOG_LEVEL             - Python logging level (default: WARNING)
    MONOPOLY_SCENARIO_FILE         - JSON scenario applied at setup (default: none)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class GameConfig:
    """Rule constants for a Monopoly game."""

    starting_cash: int = 1500
    go_salary: int = 200
    jail_fine: int = 50
    max_jail_turns: int = 3

    house_limit: int = 32
    hotel_limit: int = 12

    # Unmortgage cost is mortgage value plus this percentage, rounded down
    mortgage_interest_percent: int = 10

    def unmortgage_cost(self, mortgage_value: int) -> int:
        return mortgage_value * (100 + self.mortgage_interest_percent) // 100


DEFAULT_CONFIG = GameConfig()


class AgentType(str, Enum):
    """Built-in automated players."""

    RANDOM = "random"
    GREEDY = "greedy"


class EngineSettings(BaseSettings):
    """Settings for running simulated games from the command line."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="MONOPOLY_",
    )

    seed: Optional[int] = Field(
        default=None,
        description="Seed for dice and card shuffles. None picks one at random.",
    )
    num_players: int = Field(default=4, ge=2, le=8)
    agent_type: AgentType = Field(default=AgentType.GREEDY)
    max_turns: int = Field(
        default=500,
        gt=0,
        description="Stop the game after this many turns if nobody has won.",
    )
    max_actions_per_turn: int = Field(default=100, gt=0)
    max_failed_actions: int = Field(
        default=3,
        gt=0,
        description="Rejected agent choices tolerated before a fallback action is forced.",
    )
    log_file: Optional[str] = Field(default=None, description="JSONL game log path.")
    log_level: str = Field(default="WARNING")
    scenario_file: Optional[str] = Field(default=None)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Optional[str]) -> str:
        if not value:
            return "WARNING"
        return str(value).upper()


@lru_cache
def get_settings() -> EngineSettings:
    """Return cached engine settings instance."""
    return EngineSettings()
