"""Pool graph for one- and two-hop route discovery.

Tokens are nodes and pools are edges. Pool graphs are sparse, concentrated
around a few hub tokens, so the graph is an adjacency list keyed by mint.

Searches are undirected: a route between A and B is found once, starting
from the lexically smaller mint, and its edges are reversed when the
caller asked for the opposite direction. Results are cached per directed
search id and intermediate token restriction.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import structlog

logger = structlog.get_logger()

PATH_ID_DELIMITER = "-"


@dataclass(frozen=True)
class PoolTokenPair:
    """A pool and the two mints it trades."""

    address: str
    token_mint_a: str
    token_mint_b: str


@dataclass(frozen=True)
class PathEdge:
    """One hop of a path."""

    pool_address: str


@dataclass(frozen=True)
class Path:
    """Ordered pools leading from start_token_mint to end_token_mint."""

    start_token_mint: str
    end_token_mint: str
    edges: tuple[PathEdge, ...]

    @property
    def pool_addresses(self) -> list[str]:
        return [edge.pool_address for edge in self.edges]


@dataclass(frozen=True)
class _AdjacentPool:
    address: str
    other_token: str


class PoolGraphUtils:
    """Search id helpers.

    A search id names a directed query ("A-B" differs from "B-A"); an
    internal route id names the undirected pair with the mints sorted.
    """

    PATH_ID_DELIMITER = PATH_ID_DELIMITER

    @staticmethod
    def get_search_path_id(token_a: str, token_b: str) -> str:
        return f"{token_a}{PATH_ID_DELIMITER}{token_b}"

    @staticmethod
    def deconstruct_path_id(path_id: str) -> tuple[str, str]:
        """Split a search or route id into its two mints.

        Raises:
            ValueError: If path_id does not hold exactly two mints
        """
        parts = path_id.split(PATH_ID_DELIMITER)
        if len(parts) != 2:
            raise ValueError(f"Invalid path id: {path_id}")
        return parts[0], parts[1]

    @staticmethod
    def get_internal_route_id(token_a: str, token_b: str) -> str:
        first, second = sorted((token_a, token_b))
        return f"{first}{PATH_ID_DELIMITER}{second}"


class PoolGraph:
    """Adjacency list of pools per mint, with cached path queries.

    Build instances with PoolGraphBuilder.build_pool_graph.
    """

    def __init__(self, adjacency: dict[str, list[_AdjacentPool]]) -> None:
        self._adjacency = adjacency
        # (search id, intermediate tokens) -> paths
        self._cache: dict[tuple[str, tuple[str, ...] | None], list[Path]] = {}

    @property
    def token_count(self) -> int:
        """Number of mints in the graph."""
        return len(self._adjacency)

    def get_path(
        self,
        start_mint: str,
        end_mint: str,
        intermediate_tokens: Sequence[str] | None = None,
    ) -> list[Path]:
        """Paths from start_mint to end_mint.

        Args:
            start_mint: Input mint
            end_mint: Output mint
            intermediate_tokens: If given, only these mints may sit in the
                middle of a two-hop path

        Returns:
            Direct paths first, then two-hop paths; empty for a self-path
        """
        return self.get_paths_for_pairs([(start_mint, end_mint)], intermediate_tokens)[0][1]

    def get_paths_for_pairs(
        self,
        pairs: Iterable[tuple[str, str]],
        intermediate_tokens: Sequence[str] | None = None,
    ) -> list[tuple[str, list[Path]]]:
        """Paths for several directed mint pairs.

        Results keep the order of pairs, duplicates included.

        Returns:
            List of (search id, paths) tuples
        """
        restriction = tuple(intermediate_tokens) if intermediate_tokens is not None else None
        results: list[tuple[str, list[Path]]] = []
        for start_mint, end_mint in pairs:
            search_id = PoolGraphUtils.get_search_path_id(start_mint, end_mint)
            paths = self._cache.get((search_id, restriction))
            if paths is None:
                paths = self._find_paths(start_mint, end_mint, intermediate_tokens)
                self._cache[(search_id, restriction)] = paths
            results.append((search_id, paths))
        return results

    def get_all_paths(
        self, intermediate_tokens: Sequence[str] | None = None
    ) -> dict[str, list[Path]]:
        """Paths between every pair of mints in the graph that has one.

        Pairs are searched once, from the lexically smaller mint.

        Returns:
            Mapping of search id to non-empty path list
        """
        mints = sorted(self._adjacency)
        pairs = [
            (mints[i], mints[j])
            for i in range(len(mints))
            for j in range(i + 1, len(mints))
        ]
        all_paths = {
            search_id: paths
            for search_id, paths in self.get_paths_for_pairs(pairs, intermediate_tokens)
            if paths
        }
        logger.debug("pool_graph_all_paths", pairs=len(pairs), routes=len(all_paths))
        return all_paths

    def _find_paths(
        self,
        start_mint: str,
        end_mint: str,
        intermediate_tokens: Sequence[str] | None,
    ) -> list[Path]:
        if start_mint == end_mint:
            return []

        from_mint, to_mint = sorted((start_mint, end_mint))
        pools_from = self._adjacency.get(from_mint, [])
        pools_to = self._adjacency.get(to_mint, [])
        to_addresses = {pool.address for pool in pools_to}

        routes: list[list[str]] = []

        # Pools shared by both mints
        routes.extend([pool.address] for pool in pools_from if pool.address in to_addresses)

        # from_mint -> intermediate -> to_mint
        allowed = set(intermediate_tokens) if intermediate_tokens is not None else None
        for first in pools_from:
            if first.address in to_addresses:
                continue
            if allowed is not None and first.other_token not in allowed:
                continue
            routes.extend(
                [first.address, second.address]
                for second in pools_to
                if second.other_token == first.other_token
            )

        reverse = start_mint != from_mint
        return [
            Path(
                start_token_mint=start_mint,
                end_token_mint=end_mint,
                edges=tuple(
                    PathEdge(address) for address in (reversed(route) if reverse else route)
                ),
            )
            for route in routes
        ]


class PoolGraphBuilder:
    """Builds a PoolGraph from pool token pairs."""

    @staticmethod
    def build_pool_graph(pools: Iterable[PoolTokenPair]) -> PoolGraph:
        """Index pools by both of their mints, ignoring repeated pools.

        Args:
            pools: Pools to index, in any order

        Returns:
            PoolGraph
        """
        adjacency: dict[str, list[_AdjacentPool]] = {}
        inserted: dict[str, set[str]] = {}

        for pool in pools:
            for mint, other in (
                (pool.token_mint_a, pool.token_mint_b),
                (pool.token_mint_b, pool.token_mint_a),
            ):
                if mint not in adjacency:
                    adjacency[mint] = []
                    inserted[mint] = set()
                if pool.address not in inserted[mint]:
                    adjacency[mint].append(_AdjacentPool(pool.address, other))
                    inserted[mint].add(pool.address)

        logger.debug("pool_graph_built", tokens=len(adjacency))
        return PoolGraph(adjacency)


__all__ = [
    "PATH_ID_DELIMITER",
    "PoolTokenPair",
    "PathEdge",
    "Path",
    "PoolGraph",
    "PoolGraphBuilder",
    "PoolGraphUtils",
]
