"""Owns the corpus and the latest clustering result."""

import copy
import logging
import threading
from typing import Any, Optional

from .clustering.kmeans import run_clustering
from .ingest.loader import CorpusLoader
from .models import ClusterGrouping, Corpus

logger = logging.getLogger(__name__)


class ClusterService:
    """Runs clustering on a loaded corpus and serves the latest result.

    `get_grouping()` returns None until a run has completed.

    An injected `rng` is shared, so runs that draw from it are serialized.
    A run given an explicit `seed` override gets its own fresh Generator
    instead and can proceed alongside others.
    """

    def __init__(self, config: dict[str, Any], rng=None):
        self.config = config
        self.rng = rng
        self.corpus: Optional[Corpus] = None
        self._result: Optional[ClusterGrouping] = None
        self._lock = threading.Lock()
        self._rng_lock = threading.Lock()

    def initialize(
        self, loader: CorpusLoader, timeout: float | None = None, **overrides
    ) -> ClusterGrouping:
        """Wait for the loader to finish, then run the first clustering."""
        self.corpus = loader.wait(timeout=timeout)
        return self.recluster(**overrides)

    def recluster(self, **overrides) -> ClusterGrouping:
        """Run clustering again on the loaded corpus.

        Keyword arguments override the `clustering` config section for this
        run only, e.g. `recluster(k=3, seed=7)`.
        """
        if self.corpus is None:
            raise RuntimeError("No corpus loaded; call initialize() first")

        cfg = copy.deepcopy(self.config)
        cfg.setdefault("clustering", {}).update(
            {k: v for k, v in overrides.items() if v is not None}
        )

        if self.rng is None or overrides.get("seed") is not None:
            grouping = run_clustering(self.corpus, cfg)
        else:
            with self._rng_lock:
                grouping = run_clustering(self.corpus, cfg, rng=self.rng)
        with self._lock:
            self._result = grouping
        return grouping

    @property
    def has_result(self) -> bool:
        with self._lock:
            return self._result is not None

    def get_grouping(self) -> Optional[ClusterGrouping]:
        """The most recently completed grouping, or None if none exists yet."""
        with self._lock:
            if self._result is None:
                logger.debug("Grouping requested before any run completed")
            return self._result
