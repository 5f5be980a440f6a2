"""Binary Merkle tree over pre-hashed 32-byte leaves.

- NodeHash(left, right) = SHA256(left || right)
- An unpaired node at the end of a level is combined with ZERO_32, it is
  never duplicated.
- The root of an empty tree is ZERO_32 itself (no hash is computed).

Two proof generators are provided on purpose: ``get_proof`` re-folds every
level for each query, ``get_proof_optimized`` builds all levels once and reads
the audit path off them. Both must return identical proofs.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .crypto import DIGEST_SIZE, sha256
from .errors import CapacityError, DepthError, DigestError, IndexOutOfRange
from .settings import settings

log = logging.getLogger(__name__)

MAX_DEPTH = 27
ZERO_32 = bytes(DIGEST_SIZE)
_BYTES_LIKE = (bytes, bytearray, memoryview)


def combine(left: bytes, right: bytes) -> bytes:
    """Parent digest of an ordered pair of children."""
    return sha256(left + right)


def as_digest(value) -> bytes:
    """Normalise a bytes-like value to an immutable 32-byte digest."""
    if not isinstance(value, _BYTES_LIKE):
        raise DigestError(f"digest must be bytes, got {type(value).__name__}")
    b = bytes(value)
    if len(b) != DIGEST_SIZE:
        raise DigestError(f"digest must be {DIGEST_SIZE} bytes, got {len(b)}")
    return b


def next_level(level: Sequence[bytes]) -> List[bytes]:
    nxt = []
    for i in range(0, len(level), 2):
        left = level[i]
        right = level[i + 1] if i + 1 < len(level) else ZERO_32  # pad, don't duplicate
        nxt.append(combine(left, right))
    return nxt


def build_levels(leaves: Sequence[bytes]) -> List[List[bytes]]:
    """Return every level from the leaves (levels[0]) up to the root.

    An empty leaf sequence yields a single empty level.
    """
    lvl = list(leaves)
    levels = [lvl]
    while len(lvl) > 1:
        lvl = next_level(lvl)
        levels.append(lvl)
    return levels


def compute_root(leaves: Sequence[bytes]) -> bytes:
    level = list(leaves)
    while len(level) > 1:
        level = next_level(level)
    if not level:
        return ZERO_32
    return level[0]


def _sibling(level: Sequence[bytes], idx: int) -> bytes:
    sibling_idx = idx + 1 if idx % 2 == 0 else idx - 1
    if sibling_idx < len(level):
        return level[sibling_idx]
    return ZERO_32


def _check_index(index, leaf_count: int) -> None:
    if isinstance(index, bool) or not isinstance(index, int):
        raise IndexOutOfRange(index, leaf_count)
    if index < 0 or index >= leaf_count:
        raise IndexOutOfRange(index, leaf_count)


def _path_from_levels(levels: Sequence[Sequence[bytes]], index: int) -> List[bytes]:
    proof = []
    idx = index
    for level in levels[:-1]:
        proof.append(_sibling(level, idx))
        idx //= 2
    return proof


def verify_proof(leaf: bytes, proof: Sequence[bytes], index: int, root: bytes) -> bool:
    """Return True if ``proof`` links ``leaf`` at ``index`` to ``root``.

    Never raises: any malformed input simply fails verification.
    """
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        return False
    if not isinstance(leaf, _BYTES_LIKE) or not isinstance(root, _BYTES_LIKE):
        return False
    try:
        siblings = list(proof)
    except TypeError:
        return False
    computed = bytes(leaf)
    idx = index
    for sibling in siblings:
        if not isinstance(sibling, _BYTES_LIKE):
            return False
        if idx % 2 == 0:
            computed = combine(computed, bytes(sibling))
        else:
            computed = combine(bytes(sibling), computed)
        idx //= 2
    return computed == bytes(root)


class MerkleTree:
    """Append-only sequence of leaf digests with a bounded depth.

    The tree keeps no derived state: every root/proof call rebuilds the levels
    it needs. Safe for many concurrent readers once no append is in flight;
    appends need external synchronisation (or query a ``freeze()`` snapshot).
    """

    def __init__(self, depth: int, enforce_capacity: Optional[bool] = None):
        if isinstance(depth, bool) or not isinstance(depth, int):
            raise DepthError(depth, MAX_DEPTH)
        if depth < 0 or depth > MAX_DEPTH:
            raise DepthError(depth, MAX_DEPTH)
        if enforce_capacity is None:
            enforce_capacity = settings.enforce_capacity
        self.depth = depth
        self.enforce_capacity = enforce_capacity
        self._leaves: List[bytes] = []
        log.debug("new tree depth=%d enforce_capacity=%s", depth, enforce_capacity)

    def __len__(self) -> int:
        return len(self._leaves)

    def __repr__(self) -> str:
        return f"MerkleTree(depth={self.depth}, leaves={len(self._leaves)})"

    @property
    def capacity(self) -> int:
        return 1 << self.depth

    @property
    def leaves(self) -> Tuple[bytes, ...]:
        return tuple(self._leaves)

    def append_leaf(self, leaf: bytes) -> None:
        digest = as_digest(leaf)
        if self.enforce_capacity and len(self._leaves) >= self.capacity:
            log.debug("refusing leaf %d: depth %d is full", len(self._leaves), self.depth)
            raise CapacityError(self.depth)
        self._leaves.append(digest)

    def extend(self, leaves: Iterable[bytes]) -> None:
        """Append several leaves; nothing is appended if any of them is rejected."""
        digests = [as_digest(leaf) for leaf in leaves]
        if self.enforce_capacity and len(self._leaves) + len(digests) > self.capacity:
            log.debug("refusing %d leaves: depth %d would overflow", len(digests), self.depth)
            raise CapacityError(self.depth)
        self._leaves.extend(digests)

    def root(self) -> bytes:
        return compute_root(self._leaves)

    def get_proof(self, index: int) -> List[bytes]:
        """Audit path for ``index``, re-folding the whole level at every step."""
        _check_index(index, len(self._leaves))
        proof = []
        idx = index
        level = list(self._leaves)
        while len(level) > 1:
            proof.append(_sibling(level, idx))
            level = next_level(level)
            idx //= 2
        return proof

    def get_proof_optimized(self, index: int) -> List[bytes]:
        """Audit path for ``index`` read off levels built once for this call."""
        _check_index(index, len(self._leaves))
        return _path_from_levels(build_levels(self._leaves), index)

    def freeze(self) -> "FrozenMerkleTree":
        """Snapshot the current leaves and cache every level for repeated proofs."""
        levels = tuple(tuple(level) for level in build_levels(self._leaves))
        log.debug(
            "froze %d leaves into %d levels root=%s",
            len(self._leaves),
            len(levels),
            (levels[-1][0] if levels[-1] else ZERO_32).hex(),
        )
        return FrozenMerkleTree(depth=self.depth, levels=levels)

    verify_proof = staticmethod(verify_proof)


@dataclass(frozen=True)
class FrozenMerkleTree:
    depth: int
    levels: Tuple[Tuple[bytes, ...], ...]  # level 0 = leaves

    def __len__(self) -> int:
        return len(self.levels[0])

    @property
    def leaves(self) -> Tuple[bytes, ...]:
        return self.levels[0]

    @property
    def root(self) -> bytes:
        top = self.levels[-1]
        return top[0] if top else ZERO_32

    def get_proof(self, index: int) -> List[bytes]:
        _check_index(index, len(self))
        return _path_from_levels(self.levels, index)

    def verify(self, index: int, proof: Optional[Sequence[bytes]] = None) -> bool:
        """Check the leaf at ``index`` against the cached root."""
        _check_index(index, len(self))
        if proof is None:
            proof = self.get_proof(index)
        return verify_proof(self.leaves[index], proof, index, self.root)
