"""Errors raised by blogclust."""


class ClusteringError(ValueError):
    """Base class for input and parameter problems."""


class InputShapeError(ClusteringError):
    """A document's feature count does not match the vocabulary length."""


class InvalidParameterError(ClusteringError):
    """Run parameters (k, max_iterations) are out of range."""


class CorpusFormatError(ClusteringError):
    """The dataset could not be parsed."""
