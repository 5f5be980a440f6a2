"""Fuzz harness for tree construction & naive/optimized proof equivalence."""
from __future__ import annotations
import atheris
import sys
import hashlib

with atheris.instrument_imports():
    from merkle_toolkit.merkle import MerkleTree, verify_proof


def TestOneInput(data: bytes):  # noqa: N802
    if not data:
        return
    # Split data deterministically into pseudo-leaves (bounded count)
    size = max(1, min(32, data[0]))
    chunks = [data[i : i + size] for i in range(1, min(len(data), 1 + size * 64), size)]
    leaves = [hashlib.sha256(c).digest() for c in chunks if c]
    if not leaves:
        return
    tree = MerkleTree(7)
    tree.extend(leaves)
    idx = data[-1] % len(leaves)
    naive = tree.get_proof(idx)
    if naive != tree.get_proof_optimized(idx) or naive != tree.freeze().get_proof(idx):
        raise RuntimeError("proof generators disagree")
    if not verify_proof(leaves[idx], naive, idx, tree.root()):
        raise RuntimeError("valid inclusion proof failed")


def main():
    atheris.Setup(sys.argv, TestOneInput, enable_python_coverage=True)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
