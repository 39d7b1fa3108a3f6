# similarity.py
from typing import AbstractSet
import numpy as np
from sklearn.preprocessing import normalize


def l2_normalize_rows(matrix: np.ndarray) -> np.ndarray:
    """Divide every row by its L2 norm; zero rows stay zero."""
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.size == 0:
        return np.zeros(matrix.shape, dtype=np.float64)
    return normalize(matrix, norm="l2", axis=1)


def cosine_similarity_matrix(matrix: np.ndarray) -> np.ndarray:
    """Pairwise cosine similarity between the rows of a 2-D matrix.

    Rows without any weight resolve to 0.0 against everything, themselves
    included, never NaN.
    """
    normalized = l2_normalize_rows(matrix)
    num_rows = normalized.shape[0]
    if normalized.size == 0:
        return np.zeros((num_rows, num_rows), dtype=np.float64)
    return normalized @ normalized.T


def jaccard_similarity(first: AbstractSet[str], second: AbstractSet[str]) -> float:
    # Two empty sets score 0.0, not 1.0: "no data" is not a perfect match.
    if not first and not second:
        return 0.0
    intersection = len(first & second)
    union = len(first | second)
    return intersection / union if union else 0.0
