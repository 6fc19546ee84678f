"""Dataset ingestion."""

from .loader import CorpusLoader, load_corpus, parse_corpus

__all__ = ["CorpusLoader", "load_corpus", "parse_corpus"]
