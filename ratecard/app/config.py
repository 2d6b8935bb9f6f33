"""
Runtime configuration for the rate card integrity layer.

Configuration is environment-driven and read once. It only supplies defaults
(algorithm, certificate validity, timestamping); it never changes how a given
document canonicalizes, hashes or verifies.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SUPPORTED_ALGORITHMS = ("RS256", "RS384", "RS512", "ES256", "ES384", "ES512")


class IntegrityConfig(BaseModel):
    """
    Read-only runtime configuration.

    Values come from ``RATECARD_*`` environment variables via ``from_env``.
    """

    model_config = ConfigDict(frozen=True)

    # ------------------------------------------------------------------
    # Signing defaults
    # ------------------------------------------------------------------

    DEFAULT_ALGORITHM: str = Field(
        "RS256",
        description="Algorithm used when a caller does not name one",
    )

    INCLUDE_TIMESTAMP: bool = Field(
        True,
        description="Embed a signing timestamp in new signature records",
    )

    EXPECTED_ALGORITHM: Optional[str] = Field(
        None,
        description=(
            "When set, HTTP and CLI verification reject signature records "
            "whose algorithm differs from this value."
        ),
    )

    # ------------------------------------------------------------------
    # Certificates
    # ------------------------------------------------------------------

    CERTIFICATE_VALIDITY_DAYS: int = Field(
        365,
        description="Default validity period for issued certificates",
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    LOG_LEVEL: str = Field(
        "INFO",
        description="Root log level for the app and command-line tools",
    )

    @field_validator("DEFAULT_ALGORITHM")
    @classmethod
    def validate_default_algorithm(cls, v: str) -> str:
        if v not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"Unsupported DEFAULT_ALGORITHM '{v}'. "
                f"Allowed values: {list(SUPPORTED_ALGORITHMS)}"
            )
        return v

    @field_validator("EXPECTED_ALGORITHM")
    @classmethod
    def validate_expected_algorithm(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"Unsupported EXPECTED_ALGORITHM '{v}'. "
                f"Allowed values: {list(SUPPORTED_ALGORITHMS)}"
            )
        return v

    @field_validator("CERTIFICATE_VALIDITY_DAYS")
    @classmethod
    def validate_validity(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("CERTIFICATE_VALIDITY_DAYS must be positive")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported LOG_LEVEL '{v}'")
        return level

    @classmethod
    def from_env(cls) -> "IntegrityConfig":
        """
        Load configuration from environment variables.

        All values are parsed once and must remain immutable. Numeric values
        are passed as text and coerced by the field types, so a malformed value
        fails as a ValidationError naming the field.
        """

        def env_bool(name: str, default: bool) -> bool:
            raw = os.getenv(name)
            if raw is None:
                return default
            return raw.lower() in {"1", "true", "yes", "on"}

        return cls(
            DEFAULT_ALGORITHM=os.getenv("RATECARD_DEFAULT_ALGORITHM", "RS256"),
            INCLUDE_TIMESTAMP=env_bool("RATECARD_INCLUDE_TIMESTAMP", True),
            EXPECTED_ALGORITHM=os.getenv("RATECARD_EXPECTED_ALGORITHM") or None,
            CERTIFICATE_VALIDITY_DAYS=os.getenv("RATECARD_CERTIFICATE_VALIDITY_DAYS", "365"),
            LOG_LEVEL=os.getenv("RATECARD_LOG_LEVEL", "INFO"),
        )


@lru_cache(maxsize=1)
def get_config() -> IntegrityConfig:
    """Return the process configuration, loaded from the environment once."""
    return IntegrityConfig.from_env()


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for the app and the command-line tools."""
    logging.basicConfig(
        level=level or get_config().LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
