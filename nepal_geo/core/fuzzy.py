"""Similarity scoring between search queries and place names.

Relevance is a priority cascade rather than a weighted sum: the first rule
that applies decides the score, so an exact hit always beats a prefix hit,
which always beats an edit-distance hit.
"""
import re
from typing import Iterable, List, Optional, Tuple
from rapidfuzz.distance import Levenshtein
from nepal_geo.core.normalization import round_half_up


EXACT_SCORE = 100
PREFIX_SCORE = 80
CONTAINS_SCORE = 60
ABBREVIATION_SCORE = 75
ACRONYM_SCORE = 70
TOKEN_SCORE = 20

# Edit-distance similarity must exceed this before it scores at all
EDIT_SIMILARITY_CUTOFF = 0.6
# Scale applied to edit-distance similarity, keeping typos below substring hits
EDIT_SCORE_SCALE = 50

ACRONYM_MIN_LENGTH = 2
ACRONYM_MAX_LENGTH = 4

# Common abbreviations and colloquial spellings -> full place name
ABBREVIATIONS = {
    "ktm": "kathmandu",
    "pok": "pokhara",
    "pokhra": "pokhara",
    "bhkt": "bhaktapur",
    "bkt": "bhaktapur",
    "chit": "chitwan",
    "chitawan": "chitwan",
}


def levenshtein_distance(a: str, b: str) -> int:
    """Unit-cost edit distance (insertions, deletions, substitutions)."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """
    Normalized edit-distance similarity in [0, 1].

    Args:
        a: First string
        b: Second string

    Returns:
        1 - distance / max(len(a), len(b)); 1.0 when both are empty
    """
    max_length = max(len(a), len(b))
    if max_length == 0:
        return 1.0
    return 1 - levenshtein_distance(a, b) / max_length


def _abbreviation_score(text: str, query: str) -> int:
    expansion = ABBREVIATIONS.get(query)
    if expansion and expansion in text:
        return ABBREVIATION_SCORE

    for abbrev, full in ABBREVIATIONS.items():
        if query == full and abbrev in text:
            return ABBREVIATION_SCORE

    return 0


def _acronym_score(text: str, query: str) -> int:
    if not ACRONYM_MIN_LENGTH <= len(query) <= ACRONYM_MAX_LENGTH:
        return 0

    words = re.split(r"[\s-]", text)
    if len(words) < len(query):
        return 0

    acronym = "".join(word[:1] for word in words[:len(query)])
    return ACRONYM_SCORE if acronym == query else 0


def _edit_distance_score(text: str, query: str) -> int:
    score = similarity(text, query)
    if score > EDIT_SIMILARITY_CUTOFF:
        return int(round_half_up(score * EDIT_SCORE_SCALE))
    return 0


def fuzzy_score(text: str, query: str) -> int:
    """
    Score abbreviation, acronym and typo matches of lowercased inputs.

    Returns 0 when none of them applies.
    """
    for scorer in (_abbreviation_score, _acronym_score, _edit_distance_score):
        score = scorer(text, query)
        if score > 0:
            return score
    return 0


def relevance(text: str, query: str) -> int:
    """
    Relevance of a candidate name for a query, from 0 to 100.

    Case-insensitive. Rules are checked in order and the first that applies
    wins: exact (100), prefix (80), substring (60), abbreviation (75),
    acronym (70), edit distance (up to 50), then 20 per query word found in
    the candidate.

    Args:
        text: Candidate name
        query: Search query

    Returns:
        Integer relevance score
    """
    normalized_text = text.lower()
    normalized_query = query.lower()

    if normalized_text == normalized_query:
        return EXACT_SCORE
    if normalized_text.startswith(normalized_query):
        return PREFIX_SCORE
    if normalized_query in normalized_text:
        return CONTAINS_SCORE

    score = fuzzy_score(normalized_text, normalized_query)
    if score > 0:
        return score

    score = sum(TOKEN_SCORE for word in normalized_query.split() if word in normalized_text)
    return min(score, EXACT_SCORE)


def rank_similar(
    query: str,
    candidates: Iterable[str],
    threshold: float = 0.3,
    limit: Optional[int] = None
) -> List[Tuple[str, float]]:
    """
    Rank candidates by edit-distance similarity to the query.

    Comparison is case-insensitive. Ties keep candidate order.

    Args:
        query: String to match
        candidates: Candidate strings
        threshold: Similarity must be strictly greater than this
        limit: Maximum number of results to return

    Returns:
        List of (candidate, similarity) sorted by similarity descending
    """
    normalized_query = query.lower()
    scored = [
        (candidate, similarity(normalized_query, candidate.lower()))
        for candidate in candidates
    ]
    matches = [item for item in scored if item[1] > threshold]
    matches.sort(key=lambda x: x[1], reverse=True)

    return matches[:limit] if limit is not None else matches
