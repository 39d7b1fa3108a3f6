from __future__ import annotations

import logging
from typing import Callable, Mapping, Sequence, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")

BatchCountLookup = Callable[[Sequence[int]], Mapping[int, int]]
SingleCountLookup = Callable[[int], int]

# Used when there is nothing to normalize against (no candidates, or every
# candidate has zero enrollments) so the division stays defined.
DEFAULT_POPULARITY_DENOMINATOR = 1_000_000


def resolve_enrollment_counts(
    ids: Sequence[int],
    batch_lookup: BatchCountLookup,
    single_lookup: SingleCountLookup | None = None,
) -> dict[int, int]:
    """Fetch enrollment counts for all ids with one batched lookup.

    If the batched lookup fails, each id is looked up on its own; an id whose
    lookup fails (or that is missing from the result) counts as 0.
    """
    if not ids:
        return {}
    try:
        counts = dict(batch_lookup(ids))
    except Exception as exc:
        logger.warning("popularity.batch_lookup_failed ids=%s error=%s", len(ids), exc)
        counts = {}
        if single_lookup is not None:
            for item_id in ids:
                try:
                    counts[item_id] = int(single_lookup(item_id))
                except Exception as item_exc:
                    logger.warning("popularity.lookup_failed id=%s error=%s", item_id, item_exc)
                    counts[item_id] = 0
    return {item_id: int(counts.get(item_id, 0) or 0) for item_id in ids}


def normalize_popularity(counts: Sequence[int]) -> list[float]:
    denominator = max(counts) if counts else 0
    if denominator <= 0:
        denominator = DEFAULT_POPULARITY_DENOMINATOR
    return [count / denominator for count in counts]


def rerank_by_popularity(items: Sequence[T], counts: Sequence[int]) -> list[tuple[T, float]]:
    """Order items by normalized popularity, highest first.

    Similarity decides which items are here; popularity decides their final
    order. The sort is stable, so equally popular items keep the order they
    arrived in.
    """
    if len(items) != len(counts):
        raise ValueError("items and counts must have the same length")
    ranked = list(zip(items, normalize_popularity(counts)))
    ranked.sort(key=lambda pair: pair[1], reverse=True)
    return ranked
