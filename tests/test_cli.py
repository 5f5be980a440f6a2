import json

from typer.testing import CliRunner

from merkle_cli.__main__ import app
from merkle_toolkit.bench import build_tree, run_benchmark
from merkle_toolkit.merkle import combine, ZERO_32
from tests._helpers import h

runner = CliRunner()


def test_root_hashes_text_leaves():
    r = runner.invoke(app, ["root", "leaf1", "leaf2", "leaf3", "--depth", "3"])
    assert r.exit_code == 0, r.output
    expected = combine(combine(h("leaf1"), h("leaf2")), combine(h("leaf3"), ZERO_32))
    assert r.output.strip() == expected.hex()


def test_root_accepts_hex_digests():
    a, b = h("a"), h("b")
    r = runner.invoke(app, ["root", "--hex", a.hex(), "0x" + b.hex()])
    assert r.exit_code == 0, r.output
    assert r.output.strip() == combine(a, b).hex()


def test_root_rejects_bad_hex_and_depth():
    r = runner.invoke(app, ["root", "--hex", "abcd"])
    assert r.exit_code != 0
    r = runner.invoke(app, ["root", "a", "--depth", "28"])
    assert r.exit_code != 0
    r = runner.invoke(app, ["root", "a", "b", "c", "--depth", "1"])
    assert r.exit_code != 0


def test_root_head_json():
    r = runner.invoke(app, ["root", "x", "y", "--head"])
    assert r.exit_code == 0, r.output
    head = json.loads(r.output)
    assert head["tree_size"] == 2


def test_prove_then_verify(tmp_path):
    out = tmp_path / "proofs" / "p2.json"
    r = runner.invoke(app, ["prove", "2", "a", "b", "c", "d", "e", "--out", str(out)])
    assert r.exit_code == 0, r.output
    bundle = json.loads(out.read_text())
    assert bundle["index"] == 2 and bundle["tree_size"] == 5
    assert len(bundle["siblings_b64"]) == 3

    r = runner.invoke(app, ["verify", str(out)])
    assert r.exit_code == 0, r.output
    assert json.loads(r.output) == {"proof_valid": True}

    bundle["index"] = 3
    out.write_text(json.dumps(bundle))
    r = runner.invoke(app, ["verify", str(out)])
    assert r.exit_code == 1
    assert json.loads(r.output) == {"proof_valid": False}


def test_prove_to_stdout_and_bad_index():
    r = runner.invoke(app, ["prove", "0", "only"])
    assert r.exit_code == 0, r.output
    assert json.loads(r.output)["siblings_b64"] == []
    r = runner.invoke(app, ["prove", "5", "a", "b"])
    assert r.exit_code != 0


def test_verify_unreadable_bundle(tmp_path):
    p = tmp_path / "junk.json"
    p.write_text("{not json")
    r = runner.invoke(app, ["verify", str(p)])
    assert r.exit_code == 2
    r = runner.invoke(app, ["verify", str(tmp_path / "missing.json")])
    assert r.exit_code == 2


def test_bench_command_small():
    r = runner.invoke(app, ["bench", "--depth", "4", "--rounds", "2"])
    assert r.exit_code == 0, r.output
    assert "get_proof_optimized" in r.output


def test_build_tree_fills_every_slot():
    tree = build_tree(3)
    assert len(tree) == 8
    assert tree.leaves[0] == h((0).to_bytes(4, "little"))


def test_run_benchmark_reports_all_variants():
    results = run_benchmark(5, 3)
    assert [r.name for r in results] == ["get_proof", "get_proof_optimized", "frozen.get_proof"]
    assert all(r.index == 16 and r.rounds == 3 for r in results)
    assert all(r.per_call_ms >= 0 for r in results)
    assert run_benchmark(0, 1)[0].index == 0
