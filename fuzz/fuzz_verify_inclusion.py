"""Inclusion proof fuzzing with mutated proofs, leaves, roots and indices."""
from __future__ import annotations
import atheris
import sys
import hashlib
import random

with atheris.instrument_imports():
    from merkle_toolkit.merkle import MerkleTree, verify_proof


def _flip(b: bytes, pos: int) -> bytes:
    return b[:pos] + bytes([b[pos] ^ 0x01]) + b[pos + 1 :]


def TestOneInput(data: bytes):  # noqa: N802
    if len(data) < 8:
        return
    seed = int.from_bytes(data[:4], "little")
    random.seed(seed)
    chunk_len = 1 + (data[4] % 32)
    body = data[5:]
    leaves_raw = [body[i : i + chunk_len] for i in range(0, min(len(body), chunk_len * 16), chunk_len)]
    leaves = [hashlib.sha256(x).digest() for x in leaves_raw if x]
    if len(leaves) < 2:
        return
    tree = MerkleTree(4)
    tree.extend(leaves)
    root = tree.root()
    idx = seed % len(leaves)
    proof = tree.get_proof_optimized(idx)
    leaf = leaves[idx]
    pos = random.randrange(32)

    target = random.randrange(3)
    if target == 0:
        leaf = _flip(leaf, pos)
    elif target == 1:
        k = random.randrange(len(proof))
        proof[k] = _flip(proof[k], pos)
    else:
        root = _flip(root, pos)
    if verify_proof(leaf, proof, idx, root):
        raise RuntimeError("tampered proof unexpectedly verified")

    # Arbitrary garbage must never raise
    verify_proof(body[:32], [body[32:64]], seed - (1 << 31), root)


def main():
    atheris.Setup(sys.argv, TestOneInput, enable_python_coverage=True)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
