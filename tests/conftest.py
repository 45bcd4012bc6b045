"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from clmm_quote.api.main import app
from clmm_quote.models.state import OracleState, PoolState, TickArrayAccount
from tests.helpers import make_oracle, make_pool, make_tick_arrays


@pytest.fixture
def pool() -> PoolState:
    """Static fee SOL/USDC pool at tick 0 with 10^12 liquidity."""
    return make_pool()


@pytest.fixture
def tick_arrays_a_to_b(pool: PoolState) -> list[TickArrayAccount]:
    """Three empty tick arrays below the pool's current tick."""
    return make_tick_arrays(pool, a_to_b=True)


@pytest.fixture
def tick_arrays_b_to_a(pool: PoolState) -> list[TickArrayAccount]:
    """Three empty tick arrays above the pool's current tick."""
    return make_tick_arrays(pool, a_to_b=False)


@pytest.fixture
def adaptive_pool() -> PoolState:
    """Adaptive fee pool at tick 0 with 10^9 liquidity."""
    return make_pool(liquidity=10**9, adaptive_fee_enabled=True)


@pytest.fixture
def oracle(adaptive_pool: PoolState) -> OracleState:
    """Fresh oracle for adaptive_pool, tick group size 16."""
    return make_oracle(adaptive_pool)


# =============================================================================
# API
# =============================================================================


@pytest.fixture
def client() -> Iterator[TestClient]:
    """Test client with dependency overrides cleared afterwards."""
    yield TestClient(app)
    app.dependency_overrides.clear()
