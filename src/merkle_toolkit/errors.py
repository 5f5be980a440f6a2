"""Exception taxonomy for Merkle tree operations.

All errors are precondition failures raised synchronously by the call that
detected them; none of them leave a tree partially modified.
"""
from __future__ import annotations


class MerkleError(Exception):
    """Base class for every error raised by merkle_toolkit."""


class DepthError(MerkleError, ValueError):
    """Tree depth outside the supported range."""

    def __init__(self, depth, max_depth: int):
        super().__init__(f"depth must be an int in 0..{max_depth}, got {depth!r}")
        self.depth = depth
        self.max_depth = max_depth


class DigestError(MerkleError, ValueError):
    """Value is not a 32-byte digest."""


class CapacityError(MerkleError, ValueError):
    """Tree already holds 2**depth leaves."""

    def __init__(self, depth: int):
        super().__init__(f"tree of depth {depth} is full ({1 << depth} leaves)")
        self.depth = depth


class IndexOutOfRange(MerkleError, IndexError):
    """Proof requested for an index that is not a leaf index."""

    def __init__(self, index, leaf_count: int):
        super().__init__(f"leaf index {index!r} out of range for {leaf_count} leaves")
        self.index = index
        self.leaf_count = leaf_count
