"""Tests for the clustering service."""

import tempfile
from pathlib import Path

import numpy as np
import pytest

from blogclust.errors import InputShapeError
from blogclust.ingest.loader import CorpusLoader
from blogclust.service import ClusterService

DATASET = (
    "Blog\tw1\tw2\tw3\tw4\n"
    "Alpha\t1\t2\t3\t4\n"
    "Beta\t2\t4\t6\t9\n"
    "Gamma\t10\t1\t1\t0\n"
    "Delta\t9\t2\t0\t1\n"
)


def _loader(text: str = DATASET) -> CorpusLoader:
    with tempfile.NamedTemporaryFile(suffix=".txt", mode="w", delete=False) as f:
        f.write(text)
    return CorpusLoader(Path(f.name))


def _config(**clustering):
    cfg = {"clustering": {"k": 2, "max_iterations": 20, "seed": 3}}
    cfg["clustering"].update(clustering)
    return cfg


def test_no_result_before_run():
    service = ClusterService(_config())
    assert service.get_grouping() is None
    assert not service.has_result


def test_initialize_publishes_result():
    service = ClusterService(_config())
    grouping = service.initialize(_loader(), timeout=5)

    assert service.has_result
    assert service.get_grouping() is grouping
    assert grouping.total == 4
    assert set(grouping.to_payload()) == {"0", "1"}


def test_recluster_overrides_are_per_run():
    config = _config()
    service = ClusterService(config)
    service.initialize(_loader(), timeout=5)

    grouping = service.recluster(k=3)
    assert grouping.k == 3
    assert service.get_grouping() is grouping
    assert config["clustering"]["k"] == 2


def test_recluster_without_corpus():
    with pytest.raises(RuntimeError):
        ClusterService(_config()).recluster()


def test_load_error_leaves_no_result():
    service = ClusterService(_config())
    with pytest.raises(InputShapeError):
        service.initialize(_loader("Blog\tw1\tw2\nAlpha\t1\n"), timeout=5)
    assert service.get_grouping() is None


class CountingRng:
    """numpy Generator wrapper that counts draws."""

    def __init__(self, seed):
        self._rng = np.random.default_rng(seed)
        self.calls = 0

    def uniform(self, low, high, size=None):
        self.calls += 1
        return self._rng.uniform(low, high, size=size)


def test_seed_override_bypasses_injected_rng():
    rng = CountingRng(0)
    service = ClusterService(_config(), rng=rng)
    service.initialize(_loader(), timeout=5)
    assert rng.calls == 1

    first = service.recluster(seed=11).to_payload()
    second = service.recluster(seed=11).to_payload()

    assert rng.calls == 1
    assert first == second


def test_injected_rng_used_without_seed_override():
    rng = CountingRng(0)
    service = ClusterService(_config(), rng=rng)
    service.initialize(_loader(), timeout=5)
    service.recluster(k=3)
    assert rng.calls == 2
