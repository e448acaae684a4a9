"""Token endpoints: quick check plus single and batch validation."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, Field

from config.settings import settings
from src.api.dependencies import get_validator
from src.security.advisory import get_risk_description, get_security_recommendation
from src.security.classifier import should_filter_token
from src.security.models import (
    MAX_NAME_LENGTH,
    MAX_SYMBOL_LENGTH,
    BatchItemResult,
    QuickCheckResult,
    RiskLevel,
    TokenMetadataInput,
    TokenSecurityValidation,
    ValidationConfig,
    ValidationRequest,
)
from src.security.quick_check import quick_security_check
from src.security.validator import TokenSecurityValidator

router = APIRouter(prefix="/api/v1/tokens", tags=["tokens"])

MAX_BATCH_SIZE = 100


def _default_tolerance() -> RiskLevel:
    return RiskLevel(settings.default_risk_tolerance)


class QuickCheckResponse(QuickCheckResult):
    description: str
    recommendation: str


class ValidateRequest(BaseModel):
    address: str = Field(min_length=1, max_length=64)
    chain_id: int = Field(gt=0)
    metadata: TokenMetadataInput | None = None
    config: ValidationConfig | None = None
    tolerance: RiskLevel = Field(default_factory=_default_tolerance)


class ValidateResponse(BaseModel):
    validation: TokenSecurityValidation
    description: str
    recommendation: str
    filtered: bool


class BatchValidateRequest(BaseModel):
    tokens: list[ValidationRequest] = Field(min_length=1, max_length=MAX_BATCH_SIZE)
    config: ValidationConfig | None = None
    tolerance: RiskLevel = Field(default_factory=_default_tolerance)


class BatchValidateResponse(BaseModel):
    results: list[BatchItemResult]
    kept: int
    filtered: int
    failed: int


@router.get("/{chain_id}/{address}/quick", response_model=QuickCheckResponse)
async def quick_check(
    chain_id: int = Path(gt=0),
    address: str = Path(max_length=64),
    name: str | None = Query(None, max_length=MAX_NAME_LENGTH),
    symbol: str | None = Query(None, max_length=MAX_SYMBOL_LENGTH),
    validator: TokenSecurityValidator = Depends(get_validator),
) -> QuickCheckResponse:
    """Fast list/pattern check for rendering token rows. Only name and symbol are matched."""
    metadata = None
    if name is not None or symbol is not None:
        metadata = TokenMetadataInput(name=name or "", symbol=symbol or "")
    result = quick_security_check(
        address, chain_id, metadata,
        lists=validator.lists, patterns=validator.patterns,
    )
    return QuickCheckResponse(
        **result.model_dump(),
        description=get_risk_description(result.risk_level),
        recommendation=get_security_recommendation(result.risk_level),
    )


@router.post("/validate", response_model=ValidateResponse)
async def validate_token(
    body: ValidateRequest,
    validator: TokenSecurityValidator = Depends(get_validator),
) -> ValidateResponse:
    """Full validation before a user commits to an action."""
    validation = await validator.validate(body.address, body.chain_id, body.metadata, body.config)
    return ValidateResponse(
        validation=validation,
        description=get_risk_description(validation.risk_level),
        recommendation=get_security_recommendation(validation.risk_level),
        filtered=should_filter_token(validation, body.tolerance),
    )


@router.post("/validate/batch", response_model=BatchValidateResponse)
async def validate_batch(
    body: BatchValidateRequest,
    validator: TokenSecurityValidator = Depends(get_validator),
) -> BatchValidateResponse:
    """Validate many tokens; per-item failures are reported on that item only."""
    results = await validator.validate_many(body.tokens, body.config)

    kept = filtered = failed = 0
    for item in results:
        if item.validation is None:
            failed += 1
        elif should_filter_token(item.validation, body.tolerance):
            filtered += 1
        else:
            kept += 1

    return BatchValidateResponse(results=results, kept=kept, filtered=filtered, failed=failed)
