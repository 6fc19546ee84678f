"""Data models used throughout blogclust."""

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from .errors import InputShapeError


@dataclass(frozen=True)
class Document:
    """A single blog and its word counts."""
    name: str
    features: tuple[float, ...]


@dataclass(frozen=True)
class Corpus:
    """The vocabulary and every document vector over it."""
    vocabulary: tuple[str, ...]
    documents: tuple[Document, ...]

    def __len__(self) -> int:
        return len(self.documents)

    @property
    def dimensions(self) -> int:
        return len(self.vocabulary)

    @property
    def names(self) -> list[str]:
        return [d.name for d in self.documents]

    def validate(self) -> None:
        """Raise InputShapeError if any document disagrees with the vocabulary."""
        n = self.dimensions
        for doc in self.documents:
            if len(doc.features) != n:
                raise InputShapeError(
                    f"Document '{doc.name}' has {len(doc.features)} counts, "
                    f"vocabulary has {n} words"
                )

    def matrix(self) -> np.ndarray:
        """Documents as a read-only (documents, dimensions) float array."""
        self.validate()
        data = np.array([d.features for d in self.documents], dtype=float)
        data = data.reshape(len(self.documents), self.dimensions)
        data.setflags(write=False)
        return data

    def constant_documents(self) -> list[str]:
        """Names of documents with identical counts for every word."""
        return [d.name for d in self.documents if len(set(d.features)) <= 1]


@dataclass
class ClusterGroup:
    """Members of one cluster, in assignment order."""
    count: int = 0
    blogs: list[str] = field(default_factory=list)

    def add(self, name: str) -> None:
        self.blogs.append(name)
        self.count += 1


@dataclass
class ClusterGrouping:
    """Result of a clustering run."""
    groups: dict[int, ClusterGroup]
    iterations: int = 0
    converged: bool = False
    elapsed: float = 0.0

    @property
    def k(self) -> int:
        return len(self.groups)

    @property
    def total(self) -> int:
        return sum(g.count for g in self.groups.values())

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready mapping keyed by stringified cluster index."""
        return {
            str(idx): {"count": group.count, "blogs": list(group.blogs)}
            for idx, group in sorted(self.groups.items())
        }
