import hashlib


def h(data) -> bytes:
    """SHA-256 of a str or bytes payload, used as a pre-hashed leaf."""
    if isinstance(data, str):
        data = data.encode()
    return hashlib.sha256(data).digest()


def make_tree(n: int, depth: int = 10):
    from merkle_toolkit.merkle import MerkleTree

    tree = MerkleTree(depth)
    for i in range(n):
        tree.append_leaf(h(f"leaf-{i}"))
    return tree


def flip(b: bytes, pos: int) -> bytes:
    """Return b with one bit of byte ``pos`` flipped."""
    return b[:pos] + bytes([b[pos] ^ 0x01]) + b[pos + 1 :]
