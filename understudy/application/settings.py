"""Runtime configuration for the substitute engine.

Values are read from ``UNDERSTUDY_*`` environment variables, e.g.
``UNDERSTUDY_STRICT_SIGNATURES=0``. Engines built without explicit settings
share the cached instance returned by :func:`get_settings`.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Knobs controlling how substitutes are generated and called."""

    model_config = SettingsConfigDict(
        env_prefix="UNDERSTUDY_",
        extra="ignore",
        frozen=True,
    )

    label_prefix: str = Field(
        default="Substitute",
        min_length=1,
        description="Prefix of the human-readable label substitutes report.",
    )
    strict_signatures: bool = Field(
        default=True,
        description=(
            "Bind call arguments to the declared signature, raising TypeError "
            "on mismatch. When disabled, positional arguments are recorded as "
            "given and keyword arguments are appended as a dict."
        ),
    )
    cache_contracts: bool = Field(
        default=True,
        description="Reuse the generated substitute class for a contract.",
    )


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Return the process-wide engine settings."""

    return EngineSettings()


__all__ = ["EngineSettings", "get_settings"]
