"""
Settings for the rules engine and the service around it.

Defaults reproduce the behavior the lobby server has always had. Every field can be overridden through an
environment variable named LOBBYCHESS_<FIELD NAME IN CAPITALS>.
"""

import os
from typing import Self

from pydantic import BaseModel, field_validator

from lobbychess.core.shared_types import DisconnectPolicy

ENV_PREFIX = "LOBBYCHESS_"
TRUTHY = {"1", "true", "yes", "on"}


class EngineSettings(BaseModel):
    # Reject every move that leaves your own king attacked (pins included),
    # instead of only moves that fail to get you out of an existing check.
    strict_self_check: bool = False

    # Standard chess resets the fifty-move counter on a pawn move or a capture.
    fifty_move_resets: bool = False

    disconnect_policy: DisconnectPolicy = DisconnectPolicy.RELEASE_SEAT
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @classmethod
    def from_env(cls) -> Self:
        """Collect overrides from the environment. Unset variables keep the defaults."""
        overrides: dict[str, object] = {}
        for name, field in cls.model_fields.items():
            raw = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is None:
                continue
            if field.annotation is bool:
                overrides[name] = raw.strip().lower() in TRUTHY
            else:
                overrides[name] = raw.strip()
        return cls(**overrides)
