"""Route discovery over a pool graph."""

from clmm_quote.routing.pool_graph import (
    Path,
    PathEdge,
    PoolGraph,
    PoolGraphBuilder,
    PoolGraphUtils,
    PoolTokenPair,
)

__all__ = [
    "PoolTokenPair",
    "PathEdge",
    "Path",
    "PoolGraph",
    "PoolGraphBuilder",
    "PoolGraphUtils",
]
