"""
Text helpers shared by script generation, dedup and uniqueness checks.

Tokenization treats every CJK character as its own token and every run of
other letters/digits as one token, so word counts and similarity work the
same way for English and Chinese narration.
"""

import re
from typing import Iterable, List

_CJK_RANGES = "\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff"

_TOKEN_RE = re.compile(rf"[{_CJK_RANGES}]|[^\W_{_CJK_RANGES}]+")
_SENTENCE_RE = re.compile(r"[^.!?。！？\n]+[.!?。！？]*")

CJK_SENTENCE_END = ("。", "！", "？")


def tokenize(text: str) -> List[str]:
    """Lower-cased word tokens of text"""
    return _TOKEN_RE.findall(text.lower())


def normalize(text: str) -> str:
    """Punctuation-free, lower-cased, single-spaced form of text"""
    return " ".join(tokenize(text))


def count_words(text: str) -> int:
    return len(tokenize(text))


def split_sentences(text: str) -> List[str]:
    """Split text into sentences, keeping their terminal punctuation"""
    return [s.strip() for s in _SENTENCE_RE.findall(text) if s.strip()]


def join_sentences(sentences: Iterable[str]) -> str:
    result = ""
    for sentence in sentences:
        if result and not result.endswith(CJK_SENTENCE_END):
            result += " "
        result += sentence
    return result


def join_segments(contents: Iterable[str]) -> str:
    """Full script content: segment contents separated by a blank line"""
    return "\n\n".join(contents)


def match_case(original: str, replacement: str) -> str:
    """Give replacement the capitalization style of original"""
    if original.isupper() and len(original) > 1:
        return replacement.upper()
    if original[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement
