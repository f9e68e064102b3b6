"""
Originality checking for generated scripts.

Three detection strategies run over the script's segments:

- exact: sentences repeated inside the script, or copied verbatim from the
  reference corpus
- semantic: segments whose shingle similarity to another segment or to a
  corpus document reaches the configured threshold
- template: stock boilerplate phrases (English and Chinese)

The score starts at 100 and loses a fixed penalty per finding, so more
findings never raise it. auto_fix applies small one-directional edits to the
flagged segments until nothing changes.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional, Pattern, Set

from core.models.originality import DuplicateFinding, DuplicateType, OriginalityReport
from core.models.script import ScriptData
from core.models.workflow import DedupConfig
from core.similarity import text_similarity
from core.text import match_case, normalize, split_sentences, join_sentences, tokenize

logger = logging.getLogger(__name__)

EXACT_PENALTY = 15
SEMANTIC_PENALTY = 10
TEMPLATE_PENALTY = 5

# Sentences shorter than this are too generic to count as copied
MIN_EXACT_TOKENS = 5

MAX_FIX_PASSES = 5

# Stock phrase -> plainer wording. No replacement contains a listed phrase.
BOILERPLATE_PHRASES: Dict[str, str] = {
    "don't forget to like and subscribe": "tell us what you noticed",
    "smash that like button": "share what stood out to you",
    "make sure to subscribe": "come back for the next one",
    "without further ado": "now",
    "in today's video": "here",
    "in this video": "here",
    "let's dive in": "let's look closer",
    "let's get started": "here is how it begins",
    "at the end of the day": "ultimately",
    "it goes without saying": "clearly",
    "stay tuned": "keep watching",
    "废话不多说": "直接来看",
    "话不多说": "直接来看",
    "记得点赞关注": "欢迎留言说说你的看法",
    "一键三连": "留言分享你的看法",
    "今天给大家": "这次带你",
    "欢迎来到我的频道": "这里",
}

# One-directional vocabulary: no value is also a key, so repeated passes
# converge.
SYNONYMS: Dict[str, str] = {
    "very": "remarkably",
    "really": "truly",
    "good": "solid",
    "great": "excellent",
    "big": "large",
    "small": "compact",
    "beautiful": "striking",
    "amazing": "remarkable",
    "important": "essential",
    "show": "reveal",
    "shows": "reveals",
    "see": "notice",
    "start": "begin",
    "fast": "quick",
    "easy": "simple",
    "help": "assist",
    "use": "employ",
    "make": "create",
    "thing": "element",
    "things": "elements",
    "many": "numerous",
    "often": "frequently",
    "非常": "格外",
    "美丽": "秀美",
    "重要": "关键",
    "看到": "瞧见",
}


def _term_pattern(terms: Iterable[str]) -> Pattern:
    """Case-insensitive alternation, longest terms first, word-bounded for Latin terms"""
    parts = []
    for term in sorted(terms, key=len, reverse=True):
        escaped = re.escape(term)
        parts.append(rf"\b{escaped}\b" if term.isascii() else escaped)
    return re.compile("|".join(parts), re.IGNORECASE)


_PHRASE_RE = _term_pattern(BOILERPLATE_PHRASES)
_SYNONYM_RE = _term_pattern(SYNONYMS)


def _substitute(pattern: Pattern, mapping: Dict[str, str], text: str) -> str:
    return pattern.sub(lambda m: match_case(m.group(0), mapping[m.group(0).lower()]), text)


class DedupEngine:
    """
    Scores a script's originality and repairs flagged segments.

    Args:
        config: Dedup options (threshold, strategies)
        reference_corpus: Documents the script must not copy from
    """

    def __init__(
        self,
        config: Optional[DedupConfig] = None,
        reference_corpus: Optional[List[str]] = None
    ):
        self.config = config or DedupConfig()
        self.reference_corpus = list(reference_corpus or [])

    def update_config(self, config: DedupConfig):
        self.config = config

    def generate_originality_report(self, script: ScriptData) -> OriginalityReport:
        """
        Detect duplicates with the enabled strategies and score the script.

        Never raises: a failing detection pass is logged and reported as an
        empty report with `error` set.
        """
        try:
            findings = self._detect(script)
        except Exception as e:
            logger.warning(f"Originality check failed for script {script.id}: {e}")
            return OriginalityReport(error=str(e))

        return OriginalityReport(
            score=self.compute_score(findings),
            duplicates=findings,
            suggestions=self._suggestions(findings),
        )

    @staticmethod
    def compute_score(findings: List[DuplicateFinding]) -> int:
        penalty = 0.0
        for finding in findings:
            if finding.type == DuplicateType.EXACT:
                penalty += EXACT_PENALTY
            elif finding.type == DuplicateType.SEMANTIC:
                penalty += SEMANTIC_PENALTY * finding.similarity
            else:
                penalty += TEMPLATE_PENALTY
        return max(0, min(100, round(100 - penalty)))

    def auto_fix(self, script: ScriptData) -> ScriptData:
        """
        Rewrite flagged segments until no edit applies.

        A script without findings is returned as the same object.
        """
        current = script
        for _ in range(MAX_FIX_PASSES):
            report = self.generate_originality_report(current)
            if report.error or not report.duplicates:
                break
            fixed = self._apply_fixes(current, report)
            if fixed is current:
                break
            current = fixed

        if current is not script:
            logger.info(f"Auto-fixed script {script.id}")
        return current

    # ============================================================
    # Detection
    # ============================================================

    def _detect(self, script: ScriptData) -> List[DuplicateFinding]:
        strategies = set(self.config.strategies)
        findings: List[DuplicateFinding] = []
        if DuplicateType.EXACT in strategies:
            findings.extend(self._detect_exact(script))
        if DuplicateType.SEMANTIC in strategies:
            findings.extend(self._detect_semantic(script))
        if DuplicateType.TEMPLATE in strategies:
            findings.extend(self._detect_template(script))

        for index, finding in enumerate(findings, start=1):
            finding.id = f"dup_{index}"
        return findings

    def _detect_exact(self, script: ScriptData) -> List[DuplicateFinding]:
        findings = []
        seen: Set[str] = set()
        corpus = [f" {normalize(doc)} " for doc in self.reference_corpus]

        for segment in script.segments:
            for sentence in split_sentences(segment.content):
                key = normalize(sentence)
                if len(key.split()) < MIN_EXACT_TOKENS:
                    continue
                if key in seen:
                    findings.append(DuplicateFinding(
                        id="",
                        type=DuplicateType.EXACT,
                        segment_id=segment.id,
                        content=sentence,
                        similarity=1.0,
                        suggestion="Remove the repeated sentence",
                    ))
                elif any(f" {key} " in doc for doc in corpus):
                    findings.append(DuplicateFinding(
                        id="",
                        type=DuplicateType.EXACT,
                        segment_id=segment.id,
                        content=sentence,
                        similarity=1.0,
                        suggestion="Rephrase the sentence copied from existing content",
                        source="corpus",
                    ))
                seen.add(key)
        return findings

    def _detect_semantic(self, script: ScriptData) -> List[DuplicateFinding]:
        findings = []
        threshold = self.config.threshold
        segments = [s for s in script.segments if tokenize(s.content)]

        for j, later in enumerate(segments):
            for earlier in segments[:j]:
                similarity = text_similarity(earlier.content, later.content)
                if similarity >= threshold:
                    findings.append(DuplicateFinding(
                        id="",
                        type=DuplicateType.SEMANTIC,
                        segment_id=later.id,
                        content=later.content,
                        similarity=similarity,
                        suggestion=f"Vary the wording; too close to segment '{earlier.id}'",
                    ))
            for doc in self.reference_corpus:
                similarity = text_similarity(later.content, doc)
                if similarity >= threshold:
                    findings.append(DuplicateFinding(
                        id="",
                        type=DuplicateType.SEMANTIC,
                        segment_id=later.id,
                        content=later.content,
                        similarity=similarity,
                        suggestion="Vary the wording; too close to existing content",
                        source="corpus",
                    ))
        return findings

    def _detect_template(self, script: ScriptData) -> List[DuplicateFinding]:
        findings = []
        for segment in script.segments:
            for match in _PHRASE_RE.finditer(segment.content):
                phrase = match.group(0)
                replacement = BOILERPLATE_PHRASES[phrase.lower()]
                findings.append(DuplicateFinding(
                    id="",
                    type=DuplicateType.TEMPLATE,
                    segment_id=segment.id,
                    content=phrase,
                    similarity=1.0,
                    suggestion=f'Replace "{phrase}" with "{replacement}"',
                    source="phrase-list",
                ))
        return findings

    @staticmethod
    def _suggestions(findings: List[DuplicateFinding]) -> List[str]:
        counts: Dict[DuplicateType, int] = {}
        for finding in findings:
            counts[finding.type] = counts.get(finding.type, 0) + 1

        suggestions = []
        if counts.get(DuplicateType.EXACT):
            suggestions.append(
                f"Remove or rephrase {counts[DuplicateType.EXACT]} repeated sentence(s)"
            )
        if counts.get(DuplicateType.SEMANTIC):
            suggestions.append("Vary wording between segments that say the same thing")
        if counts.get(DuplicateType.TEMPLATE):
            suggestions.append("Replace stock phrases with wording specific to this video")
        return suggestions

    # ============================================================
    # Fixing
    # ============================================================

    def _apply_fixes(self, script: ScriptData, report: OriginalityReport) -> ScriptData:
        by_segment: Dict[str, Set[DuplicateType]] = {}
        for finding in report.duplicates:
            by_segment.setdefault(finding.segment_id, set()).add(finding.type)

        contents: Dict[str, str] = {}
        seen: Set[str] = set()
        corpus = [f" {normalize(doc)} " for doc in self.reference_corpus]

        for segment in script.segments:
            sentences = split_sentences(segment.content)
            kinds = by_segment.get(segment.id, set())
            content = segment.content

            if DuplicateType.EXACT in kinds:
                kept = []
                for sentence in sentences:
                    key = normalize(sentence)
                    copied = len(key.split()) >= MIN_EXACT_TOKENS and (
                        key in seen or any(f" {key} " in doc for doc in corpus)
                    )
                    seen.add(key)
                    if not copied:
                        kept.append(sentence)
                if not kept and sentences:
                    # never empty a segment; reword its first sentence instead
                    kept = [_substitute(_SYNONYM_RE, SYNONYMS, sentences[0])]
                if kept != sentences:
                    content = join_sentences(kept)
            else:
                seen.update(normalize(s) for s in sentences)

            if DuplicateType.TEMPLATE in kinds:
                content = _substitute(_PHRASE_RE, BOILERPLATE_PHRASES, content)
            if DuplicateType.SEMANTIC in kinds:
                content = _substitute(_SYNONYM_RE, SYNONYMS, content)

            if kinds and content != segment.content:
                contents[segment.id] = content

        return script.with_segment_contents(contents)
