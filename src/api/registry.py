"""Singleton registry for runtime objects shared with the API.

Populated once during application startup. Endpoints read these references
directly; everything runs in a single asyncio event loop.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.security.metrics import ValidationMetrics
    from src.security.validator import TokenSecurityValidator


class RuntimeRegistry:
    """Holds references to runtime objects for API access."""

    validator: TokenSecurityValidator | None = None
    metrics: ValidationMetrics | None = None
    cache_backend: str = "none"


registry = RuntimeRegistry()
