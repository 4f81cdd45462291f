"""Name normalisation and match-quality scoring for proxy factor lookup."""

from __future__ import annotations

import re

_NON_WORD = re.compile(r"[^a-z0-9]+")

# Words that carry no identity for a material name.
_STOPWORDS = frozenset({"the", "and", "of", "for", "with", "in", "a", "an"})


def normalize_name(name: str) -> str:
    """Lower-case, strip punctuation and collapse whitespace."""
    return " ".join(_NON_WORD.sub(" ", (name or "").lower()).split())


def _tokens(name: str) -> set[str]:
    return {t for t in normalize_name(name).split() if t not in _STOPWORDS}


def match_score(query: str, candidate: str) -> float:
    """Score how well ``candidate`` matches ``query``.

    Returns a float between 0.0 and 1.0:
    - identical normalised names            -> 1.0
    - one name contained in the other       -> 0.70 - 0.95, by length ratio
    - otherwise                             -> token overlap (Jaccard) * 0.85
    """
    q = normalize_name(query)
    c = normalize_name(candidate)
    if not q or not c:
        return 0.0
    if q == c:
        return 1.0

    if q in c or c in q:
        ratio = min(len(q), len(c)) / max(len(q), len(c))
        return 0.70 + 0.25 * ratio

    q_tokens = _tokens(q)
    c_tokens = _tokens(c)
    if not q_tokens or not c_tokens:
        return 0.0
    overlap = len(q_tokens & c_tokens) / len(q_tokens | c_tokens)
    return max(0.0, min(1.0, overlap * 0.85))
