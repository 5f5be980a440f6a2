from __future__ import annotations
import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .crypto import B64, B64D, DIGEST_SIZE
from .merkle import MerkleTree, verify_proof


def _digest_b64(v):
    if not isinstance(v, str):
        raise ValueError("digest must be a base64 string")
    if len(B64D(v)) != DIGEST_SIZE:
        raise ValueError(f"digest must decode to {DIGEST_SIZE} bytes")
    return v


def _now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


class ProofBundle(BaseModel):
    """Self-contained inclusion proof, detached from any live tree.

    Every digest is carried base64-encoded; validation rejects anything that
    does not decode to exactly 32 bytes, and ``index`` and the sibling count
    must fit ``tree_size``, so a bundle that parses is internally consistent.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    leaf_b64: str
    index: int = Field(ge=0)
    siblings_b64: List[str] = Field(default_factory=list)
    root_b64: str
    tree_size: int = Field(ge=1)

    @field_validator("leaf_b64", "root_b64", mode="before")
    @classmethod
    def _check_digest(cls, v):  # type: ignore[override]
        return _digest_b64(v)

    @field_validator("siblings_b64", mode="before")
    @classmethod
    def _check_siblings(cls, v):  # type: ignore[override]
        if not isinstance(v, list):
            raise ValueError("siblings_b64 must be a list")
        return [_digest_b64(s) for s in v]

    @model_validator(mode="after")
    def _check_shape(self) -> "ProofBundle":
        if self.index >= self.tree_size:
            raise ValueError(f"index {self.index} out of range for tree_size {self.tree_size}")
        # one sibling per level below the root
        expected = (self.tree_size - 1).bit_length()
        if len(self.siblings_b64) != expected:
            raise ValueError(
                f"tree_size {self.tree_size} needs {expected} siblings, got {len(self.siblings_b64)}"
            )
        return self

    @classmethod
    def from_tree(cls, tree: MerkleTree, index: int) -> "ProofBundle":
        proof = tree.get_proof_optimized(index)
        return cls(
            leaf_b64=B64(tree.leaves[index]),
            index=index,
            siblings_b64=[B64(s) for s in proof],
            root_b64=B64(tree.root()),
            tree_size=len(tree),
        )

    @property
    def siblings(self) -> List[bytes]:
        return [B64D(s) for s in self.siblings_b64]

    def verify(self) -> bool:
        return verify_proof(B64D(self.leaf_b64), self.siblings, self.index, B64D(self.root_b64))


class TreeHead(BaseModel):
    tree_size: int = Field(ge=0)
    depth: int
    merkle_root_b64: str
    ts: str

    @field_validator("merkle_root_b64", mode="before")
    @classmethod
    def _check_root(cls, v):  # type: ignore[override]
        return _digest_b64(v)

    @classmethod
    def from_tree(cls, tree: MerkleTree) -> "TreeHead":
        return cls(
            tree_size=len(tree),
            depth=tree.depth,
            merkle_root_b64=B64(tree.root()),
            ts=_now_iso(),
        )
