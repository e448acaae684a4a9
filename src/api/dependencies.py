"""FastAPI dependencies backed by the runtime registry."""

from __future__ import annotations

from fastapi import HTTPException, status

from src.api.registry import registry
from src.security.metrics import ValidationMetrics, validation_metrics
from src.security.validator import TokenSecurityValidator


def get_validator() -> TokenSecurityValidator:
    """Return the validator built at startup."""
    if registry.validator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Validator not initialized",
        )
    return registry.validator


def get_metrics() -> ValidationMetrics:
    return registry.metrics or validation_metrics
