# text_processing.py
import re
from nltk.stem import PorterStemmer


STOP_WORDS = frozenset({"a", "an", "the", "and", "or", "in", "on", "at", "to"})

_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_STEMMER = PorterStemmer()


def normalize_text(text: str | None) -> str:
    if not text:
        return ""
    return _NON_ALNUM_RE.sub("", text.lower())


def stem(token: str) -> str:
    return _STEMMER.stem(token)


def tokenize_and_stem(text: str | None) -> list[str]:
    """Turn free text into stemmed terms.

    Lowercases, drops anything outside ``[a-z0-9\\s]`` (so "C++" becomes "c" and
    "data-driven" becomes "datadriven"), splits on whitespace runs, removes the
    small stop-word set and Porter-stems what is left. Order and repeats are
    kept because term frequency depends on them.
    """
    tokens: list[str] = []
    for word in normalize_text(text).split():
        if word in STOP_WORDS:
            continue
        tokens.append(stem(word))
    return tokens


def normalize_tag(value: str | None) -> str:
    return (value or "").strip().lower()


def split_tags(raw: str | None) -> list[str]:
    """Split a comma-separated skill string into normalized, non-empty tags."""
    if not raw:
        return []
    return [tag for tag in (normalize_tag(part) for part in raw.split(",")) if tag]
