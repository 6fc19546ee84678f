"""Tests for the command line interface."""

import json
import tempfile
from pathlib import Path

from click.testing import CliRunner

from blogclust.cli import cli

DATASET = (
    "Blog\tw1\tw2\tw3\n"
    "Alpha\t1\t2\t3\n"
    "Beta\t2\t4\t6\n"
    "Gamma\t10\t1\t1\n"
    "Delta\t9\t2\t1\n"
)


def _setup(dataset: str = DATASET) -> tuple[Path, Path]:
    tmpdir = Path(tempfile.mkdtemp())
    data = tmpdir / "blogdata.txt"
    data.write_text(dataset)
    config = tmpdir / "config.yaml"
    config.write_text(f"data_path: {data}\nclustering:\n  seed: 5\n")
    return data, config


def test_cluster_json():
    data, config = _setup()
    result = CliRunner().invoke(cli, ["-c", str(config), "cluster", "-k", "2", "--format", "json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert sorted(payload) == ["0", "1"]
    assert sum(v["count"] for v in payload.values()) == 4


def test_cluster_tree_and_output_file():
    data, config = _setup()
    out = data.parent / "clusters.json"
    result = CliRunner().invoke(
        cli, ["-c", str(config), "cluster", str(data), "-k", "2", "-o", str(out)]
    )

    assert result.exit_code == 0, result.output
    assert "Cluster 1 (Count:" in result.output
    assert "Cluster 2 (Count:" in result.output
    assert json.loads(out.read_text()).keys() == {"0", "1"}


def test_cluster_shape_error():
    data, config = _setup("Blog\tw1\tw2\tw3\nAlpha\t1\t2\t3\nBeta\t2\t4\n")
    result = CliRunner().invoke(cli, ["-c", str(config), "cluster", "-k", "1"])

    assert result.exit_code == 1
    assert "expected 3 counts" in result.output


def test_cluster_too_many_clusters():
    data, config = _setup()
    runner = CliRunner()

    rejected = runner.invoke(cli, ["-c", str(config), "cluster", "-k", "6"])
    assert rejected.exit_code == 1

    allowed = runner.invoke(
        cli, ["-c", str(config), "cluster", "-k", "6", "--allow-empty", "--format", "json"]
    )
    assert allowed.exit_code == 0, allowed.output
    assert len(json.loads(allowed.output)) == 6


def test_cluster_missing_dataset():
    data, config = _setup()
    result = CliRunner().invoke(cli, ["-c", str(config), "cluster", str(data.parent / "nope.txt")])

    assert result.exit_code == 1
    assert "Dataset not found" in result.output


def test_inspect():
    data, config = _setup("Blog\tw1\tw2\nFlat\t3\t3\nAlpha\t1\t2\n")
    result = CliRunner().invoke(cli, ["-c", str(config), "inspect"])

    assert result.exit_code == 0, result.output
    assert "Blogs: 2" in result.output
    assert "Constant blogs: 1" in result.output


def test_init_writes_config():
    tmpdir = tempfile.mkdtemp()
    result = CliRunner().invoke(cli, ["init", "--path", tmpdir])

    assert result.exit_code == 0, result.output
    assert (Path(tmpdir) / "config.yaml").exists()


def test_cluster_non_utf8_dataset():
    data, config = _setup()
    data.write_bytes(b"Blog\tw1\tw2\nCaf\xe9\t1\t2\n")
    result = CliRunner().invoke(cli, ["-c", str(config), "cluster", "-k", "1"])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "not valid UTF-8" in result.output


def test_cluster_bad_seed_env(monkeypatch):
    data, config = _setup()
    monkeypatch.setenv("BLOGCLUST_SEED", "abc")
    result = CliRunner().invoke(cli, ["-c", str(config), "cluster", "-k", "1"])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "BLOGCLUST_SEED" in result.output
