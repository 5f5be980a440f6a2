from __future__ import annotations
import json
import logging
import pathlib
from typing import List, Optional

import typer
from rich import print
from rich.table import Table
from rich.console import Console

from merkle_toolkit.crypto import from_hex, sha256
from merkle_toolkit.errors import MerkleError
from merkle_toolkit.logutil import setup_logging
from merkle_toolkit.merkle import MerkleTree
from merkle_toolkit.models import ProofBundle, TreeHead
from merkle_toolkit.settings import settings

app = typer.Typer(add_completion=False, no_args_is_help=True)
log = logging.getLogger("merkle_cli")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    setup_logging(logging.DEBUG if verbose else settings.log_level)


def _build(leaves: List[str], depth: Optional[int], hex_leaves: bool) -> MerkleTree:
    try:
        tree = MerkleTree(settings.default_depth if depth is None else depth)
        if hex_leaves:
            tree.extend(from_hex(x) for x in leaves)
        else:
            # Text leaves are hashed; the tree itself only accepts digests
            tree.extend(sha256(x.encode("utf-8")) for x in leaves)
    except (MerkleError, ValueError) as e:
        raise typer.BadParameter(str(e)) from e
    log.debug("built tree over %d leaves", len(tree))
    return tree


@app.command()
def root(
    leaves: List[str] = typer.Argument(..., help="Leaf values (SHA-256 hashed unless --hex)"),
    depth: Optional[int] = typer.Option(None, help="Tree depth (default MERKLE_DEFAULT_DEPTH)"),
    hex_leaves: bool = typer.Option(False, "--hex", help="Leaves are hex-encoded digests"),
    head: bool = typer.Option(False, help="Print a JSON tree head instead of the hex root"),
):
    """Print the Merkle root of the given leaves."""
    tree = _build(leaves, depth, hex_leaves)
    log.debug("root of %d leaves: %s", len(tree), tree.root().hex())
    if head:
        typer.echo(TreeHead.from_tree(tree).model_dump_json(indent=2))
    else:
        typer.echo(tree.root().hex())


@app.command()
def prove(
    index: int = typer.Argument(..., help="Leaf index to prove"),
    leaves: List[str] = typer.Argument(..., help="Leaf values (SHA-256 hashed unless --hex)"),
    depth: Optional[int] = typer.Option(None, help="Tree depth (default MERKLE_DEFAULT_DEPTH)"),
    hex_leaves: bool = typer.Option(False, "--hex", help="Leaves are hex-encoded digests"),
    out: Optional[str] = typer.Option(None, help="Write the proof bundle to this path"),
):
    """Emit an inclusion proof bundle (JSON) for one leaf."""
    tree = _build(leaves, depth, hex_leaves)
    try:
        bundle = ProofBundle.from_tree(tree, index)
    except MerkleError as e:
        raise typer.BadParameter(str(e)) from e
    log.debug("proof for leaf %d under root %s", index, tree.root().hex())
    text = bundle.model_dump_json(indent=2)
    if out is None:
        typer.echo(text)
        return
    p = pathlib.Path(out)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text)
    print(f"[green]Wrote proof for leaf {index} to {out}[/green]")


@app.command()
def verify(path: str):
    """Verify a proof bundle written by `prove`."""
    try:
        bundle = ProofBundle.model_validate_json(pathlib.Path(path).read_text())
    except (OSError, ValueError) as e:
        print(f"[red]Unreadable proof bundle: {e}[/red]")
        raise typer.Exit(code=2)
    ok = bundle.verify()
    typer.echo(json.dumps({"proof_valid": ok}))
    if not ok:
        raise typer.Exit(code=1)


@app.command()
def bench(
    depth: int = typer.Option(settings.bench_depth, help="Tree depth (2**depth leaves)"),
    rounds: int = typer.Option(settings.bench_rounds, help="Proofs generated per variant"),
    index: Optional[int] = typer.Option(None, help="Leaf index (default: middle leaf)"),
):
    """Compare naive, optimized and frozen proof generation."""
    from merkle_toolkit.bench import run_benchmark

    try:
        results = run_benchmark(depth, rounds, index)
    except (MerkleError, ValueError) as e:
        raise typer.BadParameter(str(e)) from e

    table = Table(title=f"merkle_proof depth={depth} ({1 << depth} leaves)")
    table.add_column("variant")
    table.add_column("index", justify="right")
    table.add_column("rounds", justify="right")
    table.add_column("ms/proof", justify="right")
    for r in results:
        table.add_row(r.name, str(r.index), str(r.rounds), f"{r.per_call_ms:.3f}")
    Console().print(table)


if __name__ == "__main__":
    app()
