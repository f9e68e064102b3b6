"""
Uniqueness enforcement against previously generated scripts.

The enforcer compares a script with a read-only history corpus and drives
a bounded Check -> Rewrite -> Check loop. It never writes to the history;
the controller decides which scripts make up the corpus.
"""

import hashlib
import logging
import random
import re
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Dict, List, Optional

from core.models.originality import (
    HistoryEntry,
    UniquenessCheck,
    UniquenessReport,
    UniquenessResult,
)
from core.models.script import ScriptData
from core.models.workflow import UniquenessConfig
from core.similarity import max_similarity
from core.text import join_sentences, match_case, normalize, split_sentences

logger = logging.getLogger(__name__)

Rewriter = Callable[[ScriptData], Awaitable[ScriptData]]

SUBSTITUTION_RATE = 0.35
RECENT_WINDOW = timedelta(days=7)

# Interchangeable words; any member may replace any other
SYNONYM_GROUPS = [
    ("show", "reveal", "present"),
    ("big", "large", "huge"),
    ("small", "little", "tiny"),
    ("quick", "fast", "rapid"),
    ("look", "glance", "peek"),
    ("begin", "start", "kick off"),
    ("important", "key", "crucial"),
    ("beautiful", "gorgeous", "lovely"),
    ("simple", "easy", "straightforward"),
    ("moment", "instant", "beat"),
    ("finally", "at last", "in the end"),
    ("then", "next", "after that"),
    ("非常", "十分", "格外"),
    ("美丽", "漂亮", "秀美"),
    ("开始", "起初", "一开始"),
    ("然后", "接着", "随后"),
]

_SYNONYMS: Dict[str, List[str]] = {}
for _group in SYNONYM_GROUPS:
    for _word in _group:
        _SYNONYMS[_word] = [w for w in _group if w != _word]

_SYNONYM_RE = re.compile(
    "|".join(
        rf"\b{re.escape(w)}\b" if w.isascii() else re.escape(w)
        for w in sorted(_SYNONYMS, key=len, reverse=True)
    ),
    re.IGNORECASE,
)


class UniquenessEnforcer:
    """
    Keeps scripts stylistically distinct from history.

    Args:
        config: Threshold, attempt budget and randomness seed
        history: Previously generated scripts (not modified)
    """

    def __init__(
        self,
        config: Optional[UniquenessConfig] = None,
        history: Optional[List[HistoryEntry]] = None
    ):
        self.config = config or UniquenessConfig()
        self._history: List[HistoryEntry] = list(history or [])

    def _corpus_for(self, script: ScriptData) -> List[HistoryEntry]:
        # a script is never compared with its own earlier versions
        return [h for h in self._history if h.script_id != script.id]

    def check(self, script: ScriptData) -> UniquenessCheck:
        corpus = self._corpus_for(script)
        if not corpus:
            return UniquenessCheck(is_unique=True, similarity=0.0)

        similarity, index = max_similarity(script.content, [h.content for h in corpus])
        return UniquenessCheck(
            is_unique=similarity < self.config.similarity_threshold,
            similarity=similarity,
            most_similar_id=corpus[index].script_id if index is not None else None,
        )

    async def ensure_uniqueness(
        self,
        script: ScriptData,
        rewrite: Optional[Rewriter] = None
    ) -> UniquenessResult:
        """
        Check, and rewrite while the script is too similar to history.

        Attempts count the checks performed and never exceed
        max_rewrite_attempts. When the budget runs out, or a rewrite fails,
        the least similar script seen so far is returned with
        is_unique=False.
        """
        max_attempts = self.config.max_rewrite_attempts
        original_id = script.id
        checks: List[UniquenessCheck] = []
        current = script
        best = script
        best_similarity: Optional[float] = None
        error = None

        while True:
            check = self.check(current)
            check.attempts = len(checks) + 1
            checks.append(check)

            if best_similarity is None or check.similarity < best_similarity:
                best, best_similarity = current, check.similarity

            if check.is_unique:
                return UniquenessResult(
                    script=current,
                    is_unique=True,
                    attempts=len(checks),
                    similarity=check.similarity,
                    checks=checks,
                )

            if len(checks) >= max_attempts or rewrite is None or not self.config.auto_rewrite:
                break

            try:
                rewritten = await rewrite(current)
            except Exception as e:
                logger.warning(f"Rewrite of script {original_id} failed: {e}")
                error = str(e)
                break

            if rewritten.id != original_id:
                rewritten = replace(rewritten, id=original_id)
            current = rewritten

        logger.info(
            f"Script {original_id} still similar to history after {len(checks)} check(s) "
            f"(best similarity {best_similarity:.2f})"
        )
        return UniquenessResult(
            script=best,
            is_unique=False,
            attempts=len(checks),
            similarity=best_similarity,
            checks=checks,
            error=error,
        )

    def add_randomness(self, script: ScriptData) -> ScriptData:
        """
        Perturb wording with seeded synonym swaps and, in longer segments,
        one swap of adjacent middle sentences.
        """
        rng = random.Random(self.config.seed)

        def substitute(match: re.Match) -> str:
            word = match.group(0)
            if rng.random() >= SUBSTITUTION_RATE:
                return word
            return match_case(word, rng.choice(_SYNONYMS[word.lower()]))

        contents = {}
        for segment in script.segments:
            content = _SYNONYM_RE.sub(substitute, segment.content)
            sentences = split_sentences(content)
            if len(sentences) >= 4:
                i = rng.randint(1, len(sentences) - 3)
                sentences[i], sentences[i + 1] = sentences[i + 1], sentences[i]
                content = join_sentences(sentences)
            contents[segment.id] = content

        return script.with_segment_contents(contents)

    def generate_uniqueness_report(self, script: ScriptData) -> UniquenessReport:
        check = self.check(script)
        corpus = self._corpus_for(script)
        cutoff = datetime.utcnow() - RECENT_WINDOW
        stamps = [_parse_time(h.created_at) for h in corpus]
        recent = sum(1 for t in stamps if t and t >= cutoff)

        suggestions = []
        if not check.is_unique:
            suggestions.append(
                f"Rewrite passages that echo script {check.most_similar_id} "
                f"({check.similarity:.0%} similar)"
            )
            suggestions.append("Try a different style or tone for this video")
        if recent >= 5:
            suggestions.append(f"{recent} scripts generated in the last 7 days; vary templates")

        return UniquenessReport(
            fingerprint=hashlib.sha256(normalize(script.content).encode("utf-8")).hexdigest(),
            check=check,
            total_scripts=len(corpus),
            recent_scripts=recent,
            suggestions=suggestions,
        )


def _parse_time(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
