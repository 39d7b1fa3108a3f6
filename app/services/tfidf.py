from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import Sequence

import numpy as np


@dataclass(frozen=True)
class TfidfModel:
    vocabulary: dict[str, int]
    terms: list[str]
    # Dense [num_docs x num_terms] weights; row i belongs to document i.
    matrix: np.ndarray

    @property
    def num_docs(self) -> int:
        return int(self.matrix.shape[0])

    @property
    def num_terms(self) -> int:
        return len(self.terms)


def build_vocabulary(documents: Sequence[Sequence[str]]) -> tuple[dict[str, int], list[str]]:
    """Assign column indexes in first-seen order across the corpus.

    Tie-breaks downstream depend on this order, so it must not be sorted.
    """
    vocabulary: dict[str, int] = {}
    terms: list[str] = []
    for tokens in documents:
        for term in tokens:
            if term not in vocabulary:
                vocabulary[term] = len(terms)
                terms.append(term)
    return vocabulary, terms


def document_frequencies(documents: Sequence[Sequence[str]]) -> Counter[str]:
    counts: Counter[str] = Counter()
    for tokens in documents:
        counts.update(set(tokens))
    return counts


def inverse_document_frequency(num_docs: int, doc_freq: int) -> float:
    # Smoothed on the denominator only: a term present in every document gets a
    # slightly negative weight, a term in all but one gets exactly 0.
    return math.log(num_docs / (doc_freq + 1))


def build_tfidf(documents: Sequence[Sequence[str]]) -> TfidfModel:
    """Build the dense TF-IDF matrix for tokenized documents.

    ``tf`` is the raw count of the term in the document and
    ``idf = ln(N / (df + 1))``. Documents without terms get an all-zero row.
    Document frequencies are counted in one pass instead of re-scanning the
    corpus for every term.
    """
    vocabulary, terms = build_vocabulary(documents)
    num_docs = len(documents)
    matrix = np.zeros((num_docs, len(terms)), dtype=np.float64)
    if num_docs == 0:
        return TfidfModel(vocabulary=vocabulary, terms=terms, matrix=matrix)

    doc_freq = document_frequencies(documents)
    idf = {term: inverse_document_frequency(num_docs, doc_freq[term]) for term in terms}

    for row, tokens in enumerate(documents):
        for term, tf in Counter(tokens).items():
            matrix[row, vocabulary[term]] = tf * idf[term]

    return TfidfModel(vocabulary=vocabulary, terms=terms, matrix=matrix)
