"""
K-means clustering of blogs under Pearson correlation distance.

Centroids start at uniform random points inside the observed per-word
count ranges, then assignment and update alternate until the assignment
stops changing or the iteration cap is hit.
"""

import logging
import time
from enum import Enum
from typing import Any, Optional

import numpy as np

from ..errors import InvalidParameterError
from ..models import ClusterGroup, ClusterGrouping, Corpus
from .distance import pearson_distances, zero_variance

logger = logging.getLogger(__name__)


class RunState(Enum):
    INITIALIZING = "initializing"
    ITERATING = "iterating"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


def dimension_ranges(matrix: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Per-word (min, max) counts across all documents."""
    if matrix.shape[0] == 0:
        raise InvalidParameterError("Cannot compute ranges of an empty corpus")
    return matrix.min(axis=0), matrix.max(axis=0)


def initialize_centroids(k: int, ranges: tuple[np.ndarray, np.ndarray], rng) -> np.ndarray:
    """Draw k centroids uniformly inside the per-dimension ranges.

    `rng` is a numpy Generator or anything with a compatible `uniform`.
    A dimension with min == max always gets that constant.
    """
    mins, maxs = ranges
    centroids = np.asarray(rng.uniform(mins, maxs, size=(k, len(mins))), dtype=float)
    flat = mins == maxs
    if flat.any():
        centroids[:, flat] = mins[flat]
    return centroids


def assign(matrix: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Index of the nearest centroid for every document.

    Ties go to the lowest centroid index. A zero-variance centroid (such as
    the all-zero centroid of an emptied cluster) only wins when every
    centroid has zero variance.
    """
    distances = pearson_distances(matrix, centroids)
    flat = zero_variance(centroids)
    if flat.any() and not flat.all():
        distances = np.where(flat[None, :], np.inf, distances)
    return np.argmin(distances, axis=1)


def update_centroids(matrix: np.ndarray, assignments: np.ndarray, k: int) -> np.ndarray:
    """Mean of each cluster's members; an empty cluster becomes all zeros.

    A zeroed centroid has no variance, so `assign` never picks it while a
    centroid with variance exists and the cluster stays empty for the rest
    of the run.
    """
    centroids = np.zeros((k, matrix.shape[1]), dtype=float)
    for c in range(k):
        members = matrix[assignments == c]
        if len(members) > 0:
            centroids[c] = members.mean(axis=0)
    return centroids


def build_grouping(
    names: list[str],
    assignments: np.ndarray,
    k: int,
    iterations: int = 0,
    converged: bool = False,
    elapsed: float = 0.0,
) -> ClusterGrouping:
    """Group document names by cluster index, keeping every index 0..k-1."""
    groups = {i: ClusterGroup() for i in range(k)}
    for name, cluster_idx in zip(names, assignments):
        groups[int(cluster_idx)].add(name)
    return ClusterGrouping(
        groups=groups,
        iterations=iterations,
        converged=converged,
        elapsed=elapsed,
    )


class KMeansClusterer:
    """
    Pearson-distance k-means over a Corpus.

    Args:
        k: Number of clusters (default: 5)
        max_iterations: Cap on assignment/update rounds (default: 20)
        rng: Random source for centroid initialization; a numpy Generator
            or any object with a compatible `uniform`
        seed: Seed for a fresh numpy Generator when `rng` is not given
        allow_empty_clusters: Accept k larger than the number of documents
    """

    def __init__(
        self,
        k: int = 5,
        max_iterations: int = 20,
        rng=None,
        seed: Optional[int] = None,
        allow_empty_clusters: bool = False,
    ):
        if not isinstance(k, (int, np.integer)) or k < 1:
            raise InvalidParameterError(f"k must be a positive integer, got {k!r}")
        if not isinstance(max_iterations, (int, np.integer)) or max_iterations < 1:
            raise InvalidParameterError(
                f"max_iterations must be a positive integer, got {max_iterations!r}"
            )

        self.k = int(k)
        self.max_iterations = int(max_iterations)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.allow_empty_clusters = allow_empty_clusters
        self.state: Optional[RunState] = None

    def _check_corpus(self, corpus: Corpus) -> None:
        corpus.validate()
        if len(corpus) == 0:
            raise InvalidParameterError("Cannot cluster an empty corpus")
        if self.k > len(corpus) and not self.allow_empty_clusters:
            raise InvalidParameterError(
                f"k={self.k} exceeds the number of documents ({len(corpus)})"
            )

    def fit(self, corpus: Corpus) -> ClusterGrouping:
        """Run one clustering pass and return the grouping.

        Raises:
            InputShapeError: If a document does not match the vocabulary
            InvalidParameterError: If k does not fit the corpus
        """
        self._check_corpus(corpus)
        start = time.perf_counter()

        constant = corpus.constant_documents()
        if constant:
            logger.warning(
                f"{len(constant)} blog(s) with identical counts for every word "
                f"are at maximal distance from all centroids: {constant}"
            )

        self.state = RunState.INITIALIZING
        matrix = corpus.matrix()
        ranges = dimension_ranges(matrix)
        centroids = initialize_centroids(self.k, ranges, self.rng)

        logger.info(
            f"Clustering {len(corpus)} blogs over {corpus.dimensions} words "
            f"(k={self.k}, max_iterations={self.max_iterations})"
        )

        self.state = RunState.ITERATING
        previous: Optional[np.ndarray] = None
        iterations = 0
        while True:
            assignments = assign(matrix, centroids)
            logger.debug(f"Iteration {iterations + 1}")

            if previous is not None and np.array_equal(assignments, previous):
                self.state = RunState.CONVERGED
                break

            centroids = update_centroids(matrix, assignments, self.k)
            previous = assignments
            iterations += 1

            if iterations >= self.max_iterations:
                self.state = RunState.EXHAUSTED
                break

        elapsed = time.perf_counter() - start
        grouping = build_grouping(
            corpus.names,
            assignments,
            self.k,
            iterations=iterations,
            converged=self.state is RunState.CONVERGED,
            elapsed=elapsed,
        )

        empty = [idx for idx, g in grouping.groups.items() if g.count == 0]
        if empty:
            logger.warning(f"{len(empty)} empty cluster(s): {empty}")

        logger.info(
            f"Clustering {self.state.value} after {iterations} iteration(s) "
            f"in {elapsed:.3f}s"
        )
        return grouping


def run_clustering(corpus: Corpus, config: dict[str, Any], rng=None) -> ClusterGrouping:
    """Cluster a corpus using the `clustering` section of the config."""
    cluster_cfg = config.get("clustering", {})
    clusterer = KMeansClusterer(
        k=cluster_cfg.get("k", 5),
        max_iterations=cluster_cfg.get("max_iterations", 20),
        rng=rng,
        seed=cluster_cfg.get("seed"),
        allow_empty_clusters=cluster_cfg.get("allow_empty_clusters", False),
    )
    return clusterer.fit(corpus)
