from __future__ import annotations

import threading
import time

import pytest

from app.services.corpus import CorpusCache, CourseRecord, build_course_corpus


COURSES = [
    CourseRecord(course_id=11, title="Intro to Python", category="PROGRAMMING", level="BEGINNER"),
    CourseRecord(course_id=12, title="Python for Data Science", category="DATA_SCIENCE", level="INTERMEDIATE"),
    CourseRecord(course_id=13, title="History of Art", category="DESIGN", level="BEGINNER"),
]


def test_build_course_corpus() -> None:
    corpus = build_course_corpus(COURSES)
    assert len(corpus) == 3
    assert corpus.documents[0] == ("intro", "python")
    assert corpus.similarity.shape == (3, 3)
    assert corpus.index_of(12) == 1
    assert corpus.index_of(99) is None


def test_find_title_is_case_insensitive_exact_match() -> None:
    corpus = build_course_corpus(COURSES)
    assert corpus.find_title("intro TO python") == 0
    assert corpus.find_title("Intro to Pyth") is None
    assert corpus.find_title(None) is None


def test_empty_corpus() -> None:
    corpus = build_course_corpus([])
    assert corpus.is_empty
    assert corpus.similarity.shape == (0, 0)


def test_cache_builds_once_and_reuses_snapshot() -> None:
    calls: list[int] = []

    def loader():
        calls.append(1)
        return COURSES

    cache = CorpusCache()
    assert not cache.is_built
    first = cache.get(loader)
    second = cache.get(loader)
    assert first is second
    assert len(calls) == 1
    assert cache.is_built


def test_cache_single_build_under_concurrent_first_requests() -> None:
    calls: list[int] = []
    lock = threading.Lock()

    def slow_loader():
        with lock:
            calls.append(1)
        time.sleep(0.05)
        return COURSES

    cache = CorpusCache()
    barrier = threading.Barrier(8)
    results = []

    def worker() -> None:
        barrier.wait()
        results.append(cache.get(slow_loader))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(calls) == 1
    assert len(results) == 8
    assert all(result is results[0] for result in results)


def test_invalidate_and_rebuild() -> None:
    pool = list(COURSES[:2])
    cache = CorpusCache()
    assert len(cache.get(lambda: pool)) == 2

    pool.append(COURSES[2])
    # Stale until told otherwise.
    assert len(cache.get(lambda: pool)) == 2

    cache.invalidate()
    assert not cache.is_built
    assert len(cache.get(lambda: pool)) == 3

    pool.pop()
    assert len(cache.rebuild(lambda: pool)) == 2


def test_snapshot_is_immutable() -> None:
    corpus = build_course_corpus(COURSES)
    with pytest.raises(AttributeError):
        corpus.courses = ()  # type: ignore[misc]
