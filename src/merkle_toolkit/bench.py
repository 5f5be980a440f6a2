"""Timing harness comparing the naive, optimized and frozen proof paths.

The tree is filled with SHA256(i as 4-byte little endian) for every leaf slot
of the requested depth and all generators are asked for the same middle index.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from .crypto import sha256
from .merkle import MerkleTree

log = logging.getLogger(__name__)


@dataclass
class BenchResult:
    name: str
    index: int
    rounds: int
    total_seconds: float

    @property
    def per_call_ms(self) -> float:
        return self.total_seconds * 1000.0 / self.rounds


def build_tree(depth: int) -> MerkleTree:
    """Build a tree holding 2**depth leaves."""
    tree = MerkleTree(depth)
    tree.extend(sha256(i.to_bytes(4, "little")) for i in range(1 << depth))
    return tree


def _time(fn: Callable[[], object], rounds: int) -> float:
    start = time.perf_counter()
    for _ in range(rounds):
        fn()
    return time.perf_counter() - start


def run_benchmark(depth: int, rounds: int, index: Optional[int] = None) -> List[BenchResult]:
    if rounds < 1:
        raise ValueError("rounds must be >= 1")
    tree = build_tree(depth)
    if index is None:
        index = 1 << (depth - 1) if depth > 0 else 0
    log.debug("benchmarking depth=%d index=%d rounds=%d", depth, index, rounds)

    naive = tree.get_proof(index)
    frozen = tree.freeze()
    if tree.get_proof_optimized(index) != naive or frozen.get_proof(index) != naive:
        raise RuntimeError(f"proof generators disagree at index {index}")

    return [
        BenchResult("get_proof", index, rounds, _time(lambda: tree.get_proof(index), rounds)),
        BenchResult(
            "get_proof_optimized",
            index,
            rounds,
            _time(lambda: tree.get_proof_optimized(index), rounds),
        ),
        BenchResult("frozen.get_proof", index, rounds, _time(lambda: frozen.get_proof(index), rounds)),
    ]
