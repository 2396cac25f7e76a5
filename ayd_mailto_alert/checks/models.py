"""Check record models."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from ayd_mailto_alert.utils.timestamps import ensure_utc


class CheckStatus(str, Enum):
    """Status of a health check as reported by Ayd."""

    HEALTHY = "HEALTHY"
    DEGRADE = "DEGRADE"
    FAILURE = "FAILURE"
    UNKNOWN = "UNKNOWN"
    ABORTED = "ABORTED"

    @classmethod
    def parse(cls, value: str) -> "CheckStatus":
        """Parse a status name case-insensitively; unknown names map to UNKNOWN."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.UNKNOWN


class CheckRecord(BaseModel):
    """The health-check result being alerted on."""

    time: datetime = Field(..., description="When the check ran")
    status: CheckStatus
    latency: float = Field(0.0, description="Check latency in milliseconds")
    target: str = Field(..., min_length=1, description="Target URL that was checked")
    message: str = ""
    extra: Dict[str, Any] = Field(default_factory=dict, description="Additional fields, in record order")

    model_config = {"frozen": True}

    @field_validator("time")
    @classmethod
    def normalize_time(cls, v: datetime) -> datetime:
        """Store check time as timezone-aware UTC."""
        return ensure_utc(v)

    @property
    def is_healthy(self) -> bool:
        return self.status == CheckStatus.HEALTHY
