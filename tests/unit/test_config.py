"""Tests for QuoteConfig."""

import pytest

from clmm_quote.config import DEFAULT_QUOTE_CONFIG, QuoteConfig
from clmm_quote.constants import WHIRLPOOL_PROGRAM_ID
from clmm_quote.models.enums import ProtocolVersion, UseFallbackTickArray

ENV_VARS = [
    "CLMM_PROGRAM_ID",
    "CLMM_PROTOCOL_VERSION",
    "CLMM_FALLBACK_TICK_ARRAY",
    "CLMM_FEE_RATE_HARD_LIMIT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestQuoteConfig:
    """Tests for configuration defaults and environment loading."""

    def test_defaults(self) -> None:
        """The default instance targets the mainnet program."""
        assert DEFAULT_QUOTE_CONFIG.program_id == WHIRLPOOL_PROGRAM_ID
        assert DEFAULT_QUOTE_CONFIG.max_swap_tick_arrays == 3
        assert DEFAULT_QUOTE_CONFIG.protocol_version == ProtocolVersion.V2
        assert DEFAULT_QUOTE_CONFIG.fallback_tick_array == UseFallbackTickArray.NEVER

    def test_from_env_defaults(self) -> None:
        """Without variables the defaults are used."""
        assert QuoteConfig.from_env() == DEFAULT_QUOTE_CONFIG

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Variables override the defaults, case-insensitively for enums."""
        monkeypatch.setenv("CLMM_PROTOCOL_VERSION", "V1")
        monkeypatch.setenv("CLMM_FALLBACK_TICK_ARRAY", "situational")
        monkeypatch.setenv("CLMM_FEE_RATE_HARD_LIMIT", "50000")

        config = QuoteConfig.from_env()

        assert config.protocol_version == ProtocolVersion.V1
        assert config.fallback_tick_array == UseFallbackTickArray.SITUATIONAL
        assert config.fee_rate_hard_limit == 50_000

    def test_from_env_invalid(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Unknown enum values are rejected."""
        monkeypatch.setenv("CLMM_FALLBACK_TICK_ARRAY", "sometimes")
        with pytest.raises(ValueError):
            QuoteConfig.from_env()
