"""
Deterministic, symmetric text similarity.

Texts are reduced to sets of word shingles (runs of `size` consecutive
tokens) and compared with the Jaccard index. Texts shorter than one shingle
contribute a single shingle of all their tokens.
"""

from typing import FrozenSet, Iterable, Optional, Tuple

from core.text import tokenize

DEFAULT_SHINGLE_SIZE = 3

Shingle = Tuple[str, ...]


def shingles(text: str, size: int = DEFAULT_SHINGLE_SIZE) -> FrozenSet[Shingle]:
    tokens = tokenize(text)
    if not tokens:
        return frozenset()
    if len(tokens) < size:
        return frozenset([tuple(tokens)])
    return frozenset(
        tuple(tokens[i:i + size]) for i in range(len(tokens) - size + 1)
    )


def jaccard(a: FrozenSet, b: FrozenSet) -> float:
    """Jaccard index; 0.0 when either set is empty"""
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def text_similarity(a: str, b: str, size: int = DEFAULT_SHINGLE_SIZE) -> float:
    return jaccard(shingles(a, size), shingles(b, size))


def max_similarity(
    text: str,
    corpus: Iterable[str],
    size: int = DEFAULT_SHINGLE_SIZE
) -> Tuple[float, Optional[int]]:
    """
    Highest similarity between text and any corpus document.

    Returns:
        (similarity, index of the most similar document or None)
    """
    own = shingles(text, size)
    best = 0.0
    best_index = None
    for index, doc in enumerate(corpus):
        score = jaccard(own, shingles(doc, size))
        if score > best:
            best = score
            best_index = index
    return best, best_index
