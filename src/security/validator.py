"""Full token security validation in independent, failure-tolerant stages.

Stages:
1. Address format check (raises InvalidTokenAddressError, never scored)
2. Security list membership (blacklist / verified / risky)
3. Metadata patterns: spam name/symbol, impersonation, decimals, promo text
4. Distribution: holder share of total supply (airdrop spam)
5. Contract analysis via ContractAnalysisProvider (timeout-raced)
6. External registry via ExternalRegistryProvider (timeout-raced)
7. Strict mode penalty when no positive verification signal exists
8. Clamp, band, verified pin, CRITICAL-severity override

Stages 3-6 are independently skippable and failure-tolerant: an error or a
timeout means "signal unavailable", the verdict is still produced.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Sequence
from fractions import Fraction
from typing import TypeVar

from loguru import logger

from src.security.address import normalize_address
from src.security.cache import MemoryValidationCache, ValidationCache, make_cache_key
from src.security.metrics import ValidationMetrics, validation_metrics
from src.security.models import (
    BatchItemResult,
    ContractSecurity,
    ExternalSignal,
    IssueKind,
    IssueSeverity,
    MetadataSecurity,
    RiskLevel,
    SecurityIssue,
    TokenMetadataInput,
    TokenSecurityValidation,
    ValidationConfig,
    ValidationRequest,
)
from src.security.patterns import ADVANCED_SPAM_PATTERNS, PatternLibrary
from src.security.providers import (
    BatchContractAnalysisProvider,
    ContractAnalysisProvider,
    ExternalRegistryProvider,
)
from src.security.scoring import (
    DEFAULT_BANDS,
    EXTERNAL_LISTING_BOOST,
    HIGH_TAX_THRESHOLD_PCT,
    MAX_SCORE,
    STRICT_MODE_PENALTY,
    ScoreBands,
    apply_severity_override,
    classify_score,
    compute_score,
    has_critical_issue,
)
from src.security.security_lists import DEFAULT_SECURITY_LISTS, ListStatus, SecurityLists

T = TypeVar("T")

# Contract analysis fetched ahead of a batch, keyed by (chain_id, address)
PrefetchedContracts = dict[tuple[int, str], ContractSecurity | None]

DEFAULT_AIRDROP_SHARE_PCT = 90.0


def _issue(
    kind: IssueKind,
    severity: IssueSeverity,
    message: str,
    recommendation: str | None = None,
    **evidence: object,
) -> SecurityIssue:
    return SecurityIssue(
        kind=kind,
        severity=severity,
        message=message,
        recommendation=recommendation,
        evidence=evidence,
    )


class TokenSecurityValidator:
    """Multi-stage validator. Lists, patterns and providers are injected."""

    def __init__(
        self,
        *,
        lists: SecurityLists = DEFAULT_SECURITY_LISTS,
        patterns: PatternLibrary = ADVANCED_SPAM_PATTERNS,
        contract_provider: ContractAnalysisProvider | None = None,
        external_provider: ExternalRegistryProvider | None = None,
        cache: ValidationCache | None = None,
        metrics: ValidationMetrics = validation_metrics,
        bands: ScoreBands = DEFAULT_BANDS,
        airdrop_share_pct: float = DEFAULT_AIRDROP_SHARE_PCT,
    ) -> None:
        self._lists = lists
        self._patterns = patterns
        self._contract_provider = contract_provider
        self._external_provider = external_provider
        self._cache = cache
        self._metrics = metrics
        self._bands = bands
        self._airdrop_share = Fraction(str(airdrop_share_pct)) / 100

    @property
    def lists(self) -> SecurityLists:
        return self._lists

    @property
    def patterns(self) -> PatternLibrary:
        return self._patterns

    async def validate(
        self,
        address: str,
        chain_id: int,
        metadata: TokenMetadataInput | None = None,
        config: ValidationConfig | None = None,
    ) -> TokenSecurityValidation:
        """Validate a token and return an immutable verdict.

        Raises:
            InvalidTokenAddressError: if the address is malformed.
        """
        if config is None:
            config = ValidationConfig.from_settings()
        return await self._validate(address, chain_id, metadata, config)

    async def _validate(
        self,
        address: str,
        chain_id: int,
        metadata: TokenMetadataInput | None,
        config: ValidationConfig,
        contracts: PrefetchedContracts | None = None,
    ) -> TokenSecurityValidation:
        try:
            addr = normalize_address(address)
        except ValueError:
            self._metrics.record_input_error()
            raise

        cache_key: str | None = None
        if config.enable_caching and self._cache is not None:
            cache_key = make_cache_key(addr, chain_id, config.fingerprint(metadata))
            cached = await self._cache.get(cache_key)
            self._metrics.record_cache(hit=cached is not None)
            if cached is not None:
                logger.debug(f"[VALIDATE] Cache hit {addr[:10]} chain={chain_id}")
                return cached

        result = await self._run(addr, chain_id, metadata, config, contracts)

        if cache_key is not None:
            await self._cache.set(cache_key, result)  # type: ignore[union-attr]

        self._metrics.record_validation(result.risk_level.value)
        if result.risk_level in (RiskLevel.HIGH, RiskLevel.CRITICAL):
            logger.info(
                f"[VALIDATE] {addr[:10]} chain={chain_id} → {result.risk_level.value.upper()} "
                f"score={result.security_score} "
                f"issues={[i.kind.value for i in result.issues]}"
            )
        else:
            logger.debug(
                f"[VALIDATE] {addr[:10]} chain={chain_id} → {result.risk_level.value} "
                f"score={result.security_score}"
            )
        return result

    async def validate_many(
        self,
        requests: Sequence[ValidationRequest],
        config: ValidationConfig | None = None,
    ) -> list[BatchItemResult]:
        """Validate tokens independently; one failure never aborts the others.

        Results are returned in request order once every item has settled.
        With a batch-capable contract provider, contract analysis is fetched
        once per chain for the whole batch instead of once per token.
        """
        default = config or ValidationConfig.from_settings()
        configs = [r.config or default for r in requests]
        contracts = await self._prefetch_contracts(requests, configs)

        outcomes = await asyncio.gather(
            *(
                self._validate(r.address, r.chain_id, r.metadata, cfg, contracts)
                for r, cfg in zip(requests, configs)
            ),
            return_exceptions=True,
        )

        results: list[BatchItemResult] = []
        for req, outcome in zip(requests, outcomes):
            if isinstance(outcome, BaseException):
                logger.debug(f"[VALIDATE] Batch item {req.address!r} failed: {outcome}")
                results.append(BatchItemResult(
                    address=req.address, chain_id=req.chain_id, error=str(outcome),
                ))
            else:
                results.append(BatchItemResult(
                    address=req.address, chain_id=req.chain_id, validation=outcome,
                ))
        return results

    async def _prefetch_contracts(
        self,
        requests: Sequence[ValidationRequest],
        configs: Sequence[ValidationConfig],
    ) -> PrefetchedContracts | None:
        provider = self._contract_provider
        if not isinstance(provider, BatchContractAnalysisProvider):
            return None

        by_chain: dict[int, list[str]] = {}
        timeouts: dict[int, float] = {}
        for req, cfg in zip(requests, configs):
            if not cfg.enable_contract_analysis:
                continue
            try:
                addr = normalize_address(req.address)
            except ValueError:
                continue  # reported by the item itself
            if cfg.enable_caching and self._cache is not None:
                key = make_cache_key(addr, req.chain_id, cfg.fingerprint(req.metadata))
                if await self._cache.get(key) is not None:
                    continue
            addrs = by_chain.setdefault(req.chain_id, [])
            if addr not in addrs:
                addrs.append(addr)
            # shortest deadline among the chain's items
            timeouts[req.chain_id] = min(timeouts.get(req.chain_id, cfg.timeout_sec), cfg.timeout_sec)

        if not by_chain:
            return None

        async def fetch(chain_id: int, addrs: list[str]) -> PrefetchedContracts:
            found = await self._race(
                "contract_batch",
                lambda: provider.analyze_contracts(addrs, chain_id),
                timeouts[chain_id],
                f"{len(addrs)} tokens",
            )
            return {(chain_id, a): (found or {}).get(a) for a in addrs}

        contracts: PrefetchedContracts = {}
        for part in await asyncio.gather(*(fetch(c, a) for c, a in by_chain.items())):
            contracts.update(part)
        logger.debug(
            f"[VALIDATE] Prefetched contract analysis for {len(contracts)} tokens "
            f"on {len(by_chain)} chain(s)"
        )
        return contracts

    async def _run(
        self,
        addr: str,
        chain_id: int,
        metadata: TokenMetadataInput | None,
        config: ValidationConfig,
        contracts: PrefetchedContracts | None = None,
    ) -> TokenSecurityValidation:
        issues: list[SecurityIssue] = []
        signal_applied = False
        adjustment = 0

        # --- Stage 2: security lists ---
        status = self._lists.status(addr, chain_id)
        in_verified_list = self._lists.is_verified(addr, chain_id)
        if status == ListStatus.BLACKLISTED:
            issues.append(_issue(
                IssueKind.BLACKLISTED, IssueSeverity.CRITICAL,
                "Token is on security blacklist",
                "Do not interact with this token",
            ))
        elif status == ListStatus.RISKY:
            issues.append(_issue(
                IssueKind.KNOWN_RISK, IssueSeverity.HIGH,
                "Token has known security concerns",
                "Exercise extreme caution",
            ))
        signal_applied = status != ListStatus.UNLISTED

        # --- Stage 3: metadata patterns ---
        metadata_security = MetadataSecurity()
        if config.enable_metadata_validation and metadata is not None:
            analysis = self._run_stage("metadata", lambda: self._analyze_metadata(metadata))
            if analysis is not None:
                metadata_security, metadata_issues = analysis
                issues.extend(metadata_issues)
                signal_applied = True

        # --- Stage 4: distribution ---
        if metadata is not None and metadata.balance is not None and metadata.total_supply:
            distribution = self._run_stage("distribution", lambda: self._analyze_distribution(metadata))
            if distribution is not None:
                computed, airdrop_issue = distribution
                signal_applied = signal_applied or computed
                if airdrop_issue is not None:
                    issues.append(airdrop_issue)

        # --- Stages 5-6: providers, raced against the timeout concurrently ---
        contract_result, external_signal = await asyncio.gather(
            self._contract_stage(addr, chain_id, config, contracts),
            self._external_stage(addr, chain_id, config),
        )

        contract_security = ContractSecurity()
        if contract_result is not None:
            contract_security = contract_result.model_copy(update={"analyzed": True})
            issues.extend(_contract_issues(contract_security))
            signal_applied = True

        if external_signal is not None:
            signal_applied = True
            if external_signal.flagged:
                issues.append(_issue(
                    IssueKind.EXTERNAL_FLAG, IssueSeverity.HIGH,
                    f"Token is flagged by {external_signal.source}",
                    "Check official token contract addresses",
                    source=external_signal.source,
                ))
            elif external_signal.listed:
                adjustment += EXTERNAL_LISTING_BOOST

        # --- Stage 7: strict mode ---
        has_positive_signal = (
            in_verified_list
            or (contract_security.analyzed and contract_security.is_verified)
            or (external_signal is not None and external_signal.listed and not external_signal.flagged)
        )
        if config.strict_mode and not has_positive_signal:
            adjustment -= STRICT_MODE_PENALTY

        # --- Stage 8: finalization ---
        critical = has_critical_issue(issues)
        is_verified = in_verified_list and not critical

        if is_verified:
            score = MAX_SCORE
            level = RiskLevel.VERIFIED
        else:
            score = compute_score(issues, adjustment=adjustment)
            level = classify_score(score, self._bands) if signal_applied else RiskLevel.UNKNOWN
        level = apply_severity_override(level, issues)

        return TokenSecurityValidation(
            address=addr,
            chain_id=chain_id,
            risk_level=level,
            security_score=score,
            issues=tuple(issues),
            is_verified=is_verified,
            contract_security=contract_security,
            metadata_security=metadata_security,
            external_signal=external_signal,
        )

    def _run_stage(self, stage: str, fn: Callable[[], T]) -> T | None:
        """Run a local stage; an exception marks the signal unavailable."""
        start = time.monotonic()
        try:
            result = fn()
        except Exception as e:
            latency = (time.monotonic() - start) * 1000
            self._metrics.record_stage(stage, latency, error=True)
            logger.warning(f"[VALIDATE] Stage {stage} failed, signal omitted: {e}")
            return None
        self._metrics.record_stage(stage, (time.monotonic() - start) * 1000)
        return result

    async def _contract_stage(
        self,
        addr: str,
        chain_id: int,
        config: ValidationConfig,
        contracts: PrefetchedContracts | None = None,
    ) -> ContractSecurity | None:
        if not config.enable_contract_analysis:
            return None
        if contracts is not None and (chain_id, addr) in contracts:
            return contracts[(chain_id, addr)]
        if self._contract_provider is None:
            logger.debug("[VALIDATE] Contract analysis enabled but no provider configured")
            return None
        return await self._race(
            "contract",
            lambda: self._contract_provider.analyze_contract(addr, chain_id),  # type: ignore[union-attr]
            config.timeout_sec,
            addr,
        )

    async def _external_stage(
        self, addr: str, chain_id: int, config: ValidationConfig,
    ) -> ExternalSignal | None:
        if not config.enable_external_validation:
            return None
        if self._external_provider is None:
            logger.debug("[VALIDATE] External validation enabled but no provider configured")
            return None
        return await self._race(
            "external",
            lambda: self._external_provider.lookup(addr, chain_id),  # type: ignore[union-attr]
            config.timeout_sec,
            addr,
        )

    async def _race(self, stage: str, call, timeout: float, addr: str):
        """Await a provider call with a deadline. The losing call is cancelled."""
        start = time.monotonic()
        try:
            result = await asyncio.wait_for(call(), timeout=timeout)
        except TimeoutError:
            self._metrics.record_stage(stage, (time.monotonic() - start) * 1000, timeout=True)
            logger.info(f"[VALIDATE] {stage} timed out after {timeout:.1f}s for {addr[:10]}")
            return None
        except Exception as e:
            self._metrics.record_stage(stage, (time.monotonic() - start) * 1000, error=True)
            logger.warning(f"[VALIDATE] {stage} failed for {addr[:10]}: {type(e).__name__}: {e}")
            return None

        self._metrics.record_stage(
            stage, (time.monotonic() - start) * 1000, unavailable=result is None,
        )
        return result

    def _analyze_metadata(
        self, metadata: TokenMetadataInput,
    ) -> tuple[MetadataSecurity, list[SecurityIssue]]:
        p = self._patterns
        name, symbol = metadata.name, metadata.symbol

        has_spam_name = p.matches_scam_name(name)
        has_spam_symbol = p.matches_scam_symbol(symbol)
        is_impersonating = p.is_impersonating(name)
        has_suspicious_decimals = p.has_suspicious_decimals(metadata.decimals)
        has_promotional = p.matches_malicious(name) or p.matches_malicious(symbol)

        issues: list[SecurityIssue] = []
        if has_spam_name:
            issues.append(_issue(
                IssueKind.SPAM_NAME, IssueSeverity.MEDIUM,
                "Token name matches spam patterns",
                "Verify token legitimacy before interacting",
                name=name,
            ))
        if has_spam_symbol:
            issues.append(_issue(
                IssueKind.SPAM_SYMBOL, IssueSeverity.MEDIUM,
                "Token symbol matches spam patterns",
                "Verify token legitimacy before interacting",
                symbol=symbol,
            ))
        if is_impersonating:
            homoglyphs = p.homoglyph_chars(name)
            issues.append(_issue(
                IssueKind.IMPERSONATION, IssueSeverity.HIGH,
                "Token appears to impersonate a well-known token",
                "Check official token contract addresses",
                name=name,
                **({"homoglyphs": homoglyphs} if homoglyphs else {}),
            ))
        if has_suspicious_decimals:
            issues.append(_issue(
                IssueKind.SUSPICIOUS_DECIMALS, IssueSeverity.LOW,
                f"Token has unusual decimal count ({metadata.decimals})",
                "Verify token specifications",
                decimals=metadata.decimals,
            ))
        if has_promotional:
            issues.append(_issue(
                IssueKind.PROMOTIONAL_CONTENT, IssueSeverity.MEDIUM,
                "Token metadata contains promotional or phishing content",
                "Never connect a wallet or share keys because a token told you to",
            ))

        quality = 100
        if has_spam_name:
            quality -= 30
        if has_spam_symbol:
            quality -= 20
        if is_impersonating:
            quality -= 25
        if has_suspicious_decimals:
            quality -= 10
        if has_promotional:
            quality -= 15
        if len(name) < 2 or len(name) > 50:
            quality -= 10
        if len(symbol) < 2 or len(symbol) > 10:
            quality -= 10

        return MetadataSecurity(
            has_spam_name=has_spam_name,
            has_spam_symbol=has_spam_symbol,
            is_impersonating=is_impersonating,
            has_suspicious_decimals=has_suspicious_decimals,
            has_promotional_content=has_promotional,
            metadata_quality=max(0, quality),
        ), issues

    def _analyze_distribution(
        self, metadata: TokenMetadataInput,
    ) -> tuple[bool, SecurityIssue | None]:
        """Holder share of total supply. Exact rational arithmetic, any magnitude.

        Returns (computed, issue).
        """
        balance, supply = metadata.balance, metadata.total_supply
        if balance is None or supply is None or supply <= 0 or balance < 0:
            return False, None

        share = Fraction(balance, supply)
        if share < self._airdrop_share:
            return True, None

        share_pct = round(float(share) * 100, 2)
        return True, _issue(
            IssueKind.AIRDROP_SPAM, IssueSeverity.MEDIUM,
            f"Holder owns {share_pct}% of total supply, typical of airdrop spam",
            "Do not interact with tokens you did not acquire yourself",
            share_pct=share_pct,
        )


def _contract_issues(cs: ContractSecurity) -> list[SecurityIssue]:
    issues: list[SecurityIssue] = []

    if cs.is_honeypot:
        issues.append(_issue(
            IssueKind.HONEYPOT, IssueSeverity.CRITICAL,
            "Token contract appears to be a honeypot",
            "Do not purchase this token",
        ))

    for side, tax in (("buy", cs.buy_tax), ("sell", cs.sell_tax)):
        if tax is not None and tax > HIGH_TAX_THRESHOLD_PCT:
            issues.append(_issue(
                IssueKind.HIGH_TAX, IssueSeverity.MEDIUM,
                f"High {side} tax: {tax:g}%",
                "Consider tax implications before trading",
                side=side,
                tax_pct=tax,
            ))

    if not cs.is_verified:
        issues.append(_issue(
            IssueKind.UNVERIFIED_CONTRACT, IssueSeverity.MEDIUM,
            "Contract source code is not verified",
            "Exercise caution with unverified contracts",
        ))

    if cs.is_proxy:
        issues.append(_issue(
            IssueKind.PROXY_CONTRACT, IssueSeverity.LOW,
            "Contract is upgradeable through a proxy",
            "Contract logic can change after you interact",
        ))

    if cs.has_mint_function:
        issues.append(_issue(
            IssueKind.MINT_FUNCTION, IssueSeverity.LOW,
            "Contract has mint function (supply can be increased)",
            "Be aware of potential supply inflation",
        ))

    if cs.has_transfer_restrictions:
        issues.append(_issue(
            IssueKind.TRANSFER_RESTRICTIONS, IssueSeverity.MEDIUM,
            "Contract can pause or restrict transfers",
            "You may be unable to move or sell this token",
        ))

    if cs.deployer_risk == "high":
        issues.append(_issue(
            IssueKind.SUSPICIOUS_OWNER, IssueSeverity.HIGH,
            "Contract deployer has high risk profile",
            "Verify deployer legitimacy",
        ))

    return issues


_default_validator: TokenSecurityValidator | None = None


def get_default_validator() -> TokenSecurityValidator:
    """Process-wide validator: default lists/patterns, in-memory cache, no providers."""
    global _default_validator
    if _default_validator is None:
        from config.settings import settings

        _default_validator = TokenSecurityValidator(
            cache=MemoryValidationCache(ttl_sec=settings.cache_ttl_sec),
            bands=ScoreBands.from_settings(),
            airdrop_share_pct=settings.airdrop_share_threshold_pct,
        )
    return _default_validator


async def validate_token_security(
    address: str,
    chain_id: int,
    metadata: TokenMetadataInput | None = None,
    config: ValidationConfig | None = None,
) -> TokenSecurityValidation:
    """Validate with the default validator. See ``TokenSecurityValidator.validate``."""
    return await get_default_validator().validate(address, chain_id, metadata, config)
