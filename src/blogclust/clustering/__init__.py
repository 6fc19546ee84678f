"""Pearson-distance k-means clustering of blog word counts."""

from .distance import MAX_DISTANCE, pearson_distance, pearson_distances, zero_variance
from .kmeans import (
    KMeansClusterer,
    RunState,
    assign,
    build_grouping,
    dimension_ranges,
    initialize_centroids,
    run_clustering,
    update_centroids,
)

__all__ = [
    "MAX_DISTANCE",
    "pearson_distance",
    "pearson_distances",
    "zero_variance",
    "KMeansClusterer",
    "RunState",
    "assign",
    "build_grouping",
    "dimension_ranges",
    "initialize_centroids",
    "run_clustering",
    "update_centroids",
]
