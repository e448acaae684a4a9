"""Check a single token from the command line.

Runs the quick check and a full validation, then prints the verdict with
every issue found. Contract analysis (GoPlus) and the token-list registry
are only queried when their flags are passed.

Usage:
    python scripts/check_token.py 0xdAC17F958D2ee523a2206206994597C13D831ec7 --chain 1 \
        --name "Tether USD" --symbol USDT --decimals 6
    python scripts/check_token.py 0x1234... --name "Free USDT Claim" --symbol 1000 \
        --decimals 0 --contract --external --strict --json
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger  # noqa: E402
from pydantic import ValidationError  # noqa: E402

from config.settings import settings  # noqa: E402
from src.parsers.goplus.client import GoPlusClient  # noqa: E402
from src.parsers.token_list import TokenListRegistry  # noqa: E402
from src.security.advisory import get_risk_description, get_security_recommendation  # noqa: E402
from src.security.exceptions import InvalidTokenAddressError  # noqa: E402
from src.security.models import TokenMetadataInput, ValidationConfig  # noqa: E402
from src.security.quick_check import quick_security_check  # noqa: E402
from src.security.validator import TokenSecurityValidator  # noqa: E402
from src.utils.logger import setup_logger  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Assess token security risk")
    parser.add_argument("address", help="Token contract address (0x...)")
    parser.add_argument("--chain", type=int, default=1, help="Chain id (default: 1)")
    parser.add_argument("--name", default=None)
    parser.add_argument("--symbol", default=None)
    parser.add_argument("--decimals", type=int, default=None, help="Token decimals (default: 18)")
    parser.add_argument("--balance", type=int, default=None, help="Holder balance (raw units)")
    parser.add_argument("--supply", type=int, default=None, help="Total supply (raw units)")
    parser.add_argument("--contract", action="store_true", help="Enable GoPlus contract analysis")
    parser.add_argument("--external", action="store_true", help="Enable token-list lookup")
    parser.add_argument("--strict", action="store_true", help="Strict mode")
    parser.add_argument("--timeout-ms", type=int, default=settings.validation_timeout_ms)
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    return parser.parse_args(argv)


def _build_metadata(args: argparse.Namespace) -> TokenMetadataInput | None:
    """Metadata from whichever of the token fields were passed, None if none were."""
    given = (args.name, args.symbol, args.decimals, args.balance, args.supply)
    if all(v is None for v in given):
        return None
    return TokenMetadataInput(
        name=args.name or "",
        symbol=args.symbol or "",
        decimals=18 if args.decimals is None else args.decimals,
        balance=args.balance,
        total_supply=args.supply,
    )


async def run(args: argparse.Namespace) -> int:
    try:
        metadata = _build_metadata(args)
    except ValidationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    config = ValidationConfig(
        enable_contract_analysis=args.contract,
        enable_metadata_validation=True,
        enable_external_validation=args.external,
        validation_timeout=args.timeout_ms,
        enable_caching=False,
        strict_mode=args.strict,
    )

    goplus = GoPlusClient(max_rps=settings.goplus_max_rps) if args.contract else None
    token_list = TokenListRegistry(settings.token_list_url) if args.external else None
    validator = TokenSecurityValidator(contract_provider=goplus, external_provider=token_list)

    try:
        quick = quick_security_check(args.address, args.chain, metadata)
        validation = await validator.validate(args.address, args.chain, metadata, config)
    except InvalidTokenAddressError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    finally:
        if goplus:
            await goplus.close()
        if token_list:
            await token_list.close()

    if args.json:
        print(json.dumps({
            "quick_check": quick.model_dump(mode="json"),
            "validation": validation.model_dump(mode="json"),
        }, indent=2))
        return 0

    level = validation.risk_level
    print(f"Quick check : {quick.risk_level.value} ({quick.reason})")
    print(f"Risk level  : {level.value.upper()}  score={validation.security_score}/100")
    print(f"Verified    : {'yes' if validation.is_verified else 'no'}")
    print(f"Description : {get_risk_description(level)}")
    print(f"Advice      : {get_security_recommendation(level)}")
    if validation.issues:
        print("Issues:")
        for issue in validation.issues:
            print(f"  [{issue.severity.value:>8}] {issue.kind.value}: {issue.message}")
    return 0


def main() -> None:
    args = _parse_args()
    setup_logger(level="WARNING")
    logger.debug(f"Checking {args.address} on chain {args.chain}")
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
