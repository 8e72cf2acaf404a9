"""Engine configuration with pydantic-settings.

- Loads from environment (prefix LLC_GOVERNANCE_) and an optional .env
- Holds the log level and the opt-in roster policy flags
- Cached singleton via get_settings()
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GovernanceSettings(BaseSettings):
    """Settings for the governance engine.

    Environment variables take precedence over .env file values,
    e.g. ``LLC_GOVERNANCE_ENFORCE_BOARD_SIZE=true``.
    """

    model_config = SettingsConfigDict(
        env_prefix="LLC_GOVERNANCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===================
    # Logging
    # ===================
    log_level: str = Field(default="INFO", description="Level used by setup_logging()")

    # ===================
    # Roster policy (all off = statutory minimum)
    # ===================
    legal_representative_from_officers: bool = Field(
        default=False,
        description="Legal representative must be a director or the manager",
    )
    enforce_board_size: bool = Field(
        default=False,
        description="Board has a single director or at least three",
    )
    require_board_chairperson: bool = Field(
        default=False,
        description="A board with more than one director needs a chairperson",
    )
    distinct_management: bool = Field(
        default=False,
        description="Manager and deputy manager must be different people",
    )
    strict_supervisor_segregation: bool = Field(
        default=False,
        description="Supervisors may not hold manager, deputy or financial officer roles",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache
def get_settings() -> GovernanceSettings:
    """Singleton settings loader (cached)."""
    return GovernanceSettings()
