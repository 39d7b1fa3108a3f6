from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Sequence

import numpy as np

from app.services.similarity import cosine_similarity_matrix
from app.services.text_processing import tokenize_and_stem
from app.services.tfidf import TfidfModel, build_tfidf


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CourseRecord:
    course_id: int
    title: str
    category: str | None = None
    level: str | None = None


@dataclass(frozen=True)
class CourseCorpus:
    """Immutable snapshot of the course pool and its derived matrices."""

    courses: tuple[CourseRecord, ...]
    documents: tuple[tuple[str, ...], ...]
    tfidf: TfidfModel
    similarity: np.ndarray
    _index_by_id: dict[int, int] = field(default_factory=dict, repr=False, compare=False)

    @property
    def is_empty(self) -> bool:
        return not self.courses

    def __len__(self) -> int:
        return len(self.courses)

    def index_of(self, course_id: int) -> int | None:
        return self._index_by_id.get(course_id)

    def find_title(self, title: str | None) -> int | None:
        # Case-insensitive exact match; the first course with that title wins.
        if title is None:
            return None
        wanted = title.lower()
        for index, course in enumerate(self.courses):
            if course.title.lower() == wanted:
                return index
        return None


CorpusLoader = Callable[[], Sequence[CourseRecord]]


def build_course_corpus(courses: Sequence[CourseRecord]) -> CourseCorpus:
    records = tuple(courses)
    documents = tuple(tuple(tokenize_and_stem(course.title)) for course in records)
    tfidf = build_tfidf(documents)
    similarity = cosine_similarity_matrix(tfidf.matrix)
    index_by_id: dict[int, int] = {}
    for index, course in enumerate(records):
        index_by_id.setdefault(course.course_id, index)
    return CourseCorpus(
        courses=records,
        documents=documents,
        tfidf=tfidf,
        similarity=similarity,
        _index_by_id=index_by_id,
    )


class CorpusCache:
    """Holds one CourseCorpus per process.

    The first ``get`` builds it under a lock, so concurrent first requests
    trigger a single build. The snapshot is never refreshed on its own: call
    ``invalidate`` or ``rebuild`` after the course pool changes.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._corpus: CourseCorpus | None = None

    @property
    def is_built(self) -> bool:
        return self._corpus is not None

    def get(self, loader: CorpusLoader) -> CourseCorpus:
        corpus = self._corpus
        if corpus is not None:
            return corpus
        with self._lock:
            if self._corpus is None:
                self._corpus = self._build(loader)
            return self._corpus

    def rebuild(self, loader: CorpusLoader) -> CourseCorpus:
        with self._lock:
            self._corpus = self._build(loader)
            return self._corpus

    def invalidate(self) -> None:
        with self._lock:
            self._corpus = None
        logger.info("corpus.invalidated")

    @staticmethod
    def _build(loader: CorpusLoader) -> CourseCorpus:
        corpus = build_course_corpus(loader())
        logger.info("corpus.build courses=%s terms=%s", len(corpus), corpus.tfidf.num_terms)
        return corpus
