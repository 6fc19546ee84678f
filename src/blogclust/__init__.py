"""Blog clustering by word usage."""

__version__ = "0.1.0"
