"""Load the tab-separated blog word-count dataset."""

import logging
import threading
from concurrent.futures import Future
from pathlib import Path
from typing import Iterable

from ..errors import CorpusFormatError, InputShapeError
from ..models import Corpus, Document

logger = logging.getLogger(__name__)


def parse_corpus(lines: Iterable[str]) -> Corpus:
    """Parse dataset lines into a Corpus.

    The first non-blank line is the vocabulary (its first cell is ignored).
    Every following line is `name<TAB>count_1<TAB>...<TAB>count_n`.

    Raises:
        InputShapeError: A row has the wrong number of counts.
        CorpusFormatError: Missing header, blank name or non-integer count.
    """
    vocabulary: tuple[str, ...] | None = None
    documents = []

    for lineno, raw in enumerate(lines, 1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        columns = line.split("\t")

        if vocabulary is None:
            vocabulary = tuple(columns[1:])
            if not vocabulary:
                raise CorpusFormatError(f"Line {lineno}: header has no words")
            continue

        if len(columns) != len(vocabulary) + 1:
            raise InputShapeError(
                f"Line {lineno}: expected {len(vocabulary)} counts, "
                f"got {len(columns) - 1}"
            )

        name = columns[0].strip()
        if not name:
            raise CorpusFormatError(f"Line {lineno}: missing blog name")

        try:
            counts = tuple(int(c) for c in columns[1:])
        except ValueError as e:
            raise CorpusFormatError(f"Line {lineno}: {e}") from e

        documents.append(Document(name=name, features=counts))

    if vocabulary is None:
        raise CorpusFormatError("Dataset is empty")

    return Corpus(vocabulary=vocabulary, documents=tuple(documents))


def load_corpus(path: str | Path) -> Corpus:
    """Read and parse a dataset file."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            corpus = parse_corpus(f)
    except UnicodeDecodeError as e:
        raise CorpusFormatError(f"{path.name} is not valid UTF-8: {e.reason}") from e
    logger.info(f"Loaded {len(corpus)} blogs over {corpus.dimensions} words from {path}")
    return corpus


class CorpusLoader:
    """Loads a dataset on a background thread.

    Readiness is a one-shot Future: `start()` kicks off the read once and
    returns the Future, which resolves to the Corpus or carries the
    parse error.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._future: Future | None = None
        self._lock = threading.Lock()

    def start(self) -> Future:
        with self._lock:
            if self._future is None:
                self._future = Future()
                thread = threading.Thread(
                    target=self._load, name="corpus-loader", daemon=True
                )
                thread.start()
            return self._future

    def _load(self):
        future = self._future
        if not future.set_running_or_notify_cancel():
            return
        try:
            corpus = load_corpus(self.path)
        except Exception as e:
            future.set_exception(e)
        else:
            future.set_result(corpus)

    @property
    def ready(self) -> bool:
        return self._future is not None and self._future.done()

    def wait(self, timeout: float | None = None) -> Corpus:
        """Block until the corpus is loaded; re-raises any load error."""
        return self.start().result(timeout=timeout)
