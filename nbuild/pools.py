"""Pools that bound how many queued builds may run at once."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Hashable, Iterable, Iterator, Mapping, Optional, Tuple, Union

from nbuild.smallmap import SmallMap

DEFAULT_POOL = ""
CONSOLE_POOL = "console"


@dataclass
class PoolState:
    """Queued and running builds of one pool.

    A depth of 0 means the pool is unbounded.
    """

    depth: int = 0
    running: int = 0
    queued: Deque[Hashable] = field(default_factory=deque)

    def _has_capacity(self) -> bool:
        return self.depth == 0 or self.running < self.depth


DepthSource = Union[SmallMap, Mapping[str, int], Iterable[Tuple[str, int]]]


def _depth_pairs(depths: Optional[DepthSource]) -> Iterator[Tuple[str, int]]:
    if depths is None:
        return iter(())
    if isinstance(depths, Mapping):
        return iter(depths.items())
    return iter(depths)


class Pools:
    """The named pools of a build, in declaration order.

    There is always an unbounded default pool named "" and a "console" pool
    of depth 1; declared pools follow and may redefine either of them.
    """

    def __init__(self, depths: Optional[DepthSource] = None) -> None:
        self._pools: SmallMap[str, PoolState] = SmallMap()
        self._pools.insert(DEFAULT_POOL, PoolState(depth=0))
        self._pools.insert(CONSOLE_POOL, PoolState(depth=1))
        for name, depth in _depth_pairs(depths):
            if depth < 0:
                raise ValueError(f"pool {name!r} has negative depth {depth}")
            self._pools.insert(name, PoolState(depth=depth))

    def _pool(self, pool_name: Optional[str]) -> PoolState:
        name = pool_name or DEFAULT_POOL
        pool = self._pools.get(name)
        if pool is None:
            raise KeyError(f"unknown pool {name!r}")
        return pool

    def __getitem__(self, pool_name: Optional[str]) -> PoolState:
        return self._pool(pool_name)

    def __contains__(self, pool_name: object) -> bool:
        return (pool_name or DEFAULT_POOL) in self._pools

    def __iter__(self) -> Iterator[str]:
        for name, _ in self._pools:
            yield name

    def __len__(self) -> int:
        return len(self._pools)

    def enqueue(self, pool_name: Optional[str], build_id: Hashable) -> None:
        """Queue a build to run in the named pool (None means the default)."""
        self._pool(pool_name).queued.append(build_id)

    def pop_queued(self) -> Optional[Hashable]:
        """Take the next queued build from the first pool with spare capacity."""
        for _, pool in self._pools:
            if pool._has_capacity() and pool.queued:
                return pool.queued.popleft()
        return None

    def started(self, pool_name: Optional[str]) -> None:
        """Note that a build in the named pool began running."""
        self._pool(pool_name).running += 1

    def finished(self, pool_name: Optional[str]) -> None:
        """Note that a running build in the named pool stopped."""
        pool = self._pool(pool_name)
        if pool.running == 0:
            raise ValueError(f"no build running in pool {pool_name or DEFAULT_POOL!r}")
        pool.running -= 1