"""Tests for the check_token command line script."""

import pytest

from scripts.check_token import _build_metadata, _parse_args, run
from tests.fakes import UNKNOWN


class TestBuildMetadata:
    def test_no_token_fields(self) -> None:
        assert _build_metadata(_parse_args([UNKNOWN])) is None

    def test_distribution_only(self) -> None:
        meta = _build_metadata(_parse_args([UNKNOWN, "--balance", "950", "--supply", "1000"]))

        assert meta is not None
        assert meta.balance == 950
        assert meta.total_supply == 1000
        assert meta.decimals == 18
        assert meta.name == ""

    def test_decimals_only(self) -> None:
        meta = _build_metadata(_parse_args([UNKNOWN, "--decimals", "0"]))
        assert meta is not None
        assert meta.decimals == 0

    def test_name_and_symbol(self) -> None:
        meta = _build_metadata(_parse_args([UNKNOWN, "--name", "Tether USD", "--symbol", "USDT"]))
        assert meta is not None
        assert (meta.name, meta.symbol, meta.decimals) == ("Tether USD", "USDT", 18)


class TestRun:
    @pytest.mark.asyncio
    async def test_airdrop_flagged_without_name(self, capsys: pytest.CaptureFixture[str]) -> None:
        args = _parse_args([UNKNOWN, "--balance", "950", "--supply", "1000"])

        assert await run(args) == 0
        assert "airdrop_spam" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_invalid_address(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert await run(_parse_args(["0x123"])) == 2
        assert "error:" in capsys.readouterr().err
