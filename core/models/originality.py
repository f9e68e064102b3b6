"""Originality (dedup) and uniqueness result models"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .script import ScriptData


class DuplicateType(str, Enum):
    """Duplicate-detection strategy that produced a finding"""
    EXACT = "exact"
    SEMANTIC = "semantic"
    TEMPLATE = "template"


@dataclass
class DuplicateFinding:
    """A single duplicated or boilerplate passage in a script"""
    id: str
    type: DuplicateType
    segment_id: str
    content: str            # the offending sentence, segment or phrase
    similarity: float       # 0-1
    suggestion: str
    source: str = "script"  # "script", "corpus" or "phrase-list"


@dataclass
class OriginalityReport:
    """
    Originality of the current script content.

    Always recomputed from content; a report with `error` set is the
    degraded result of a failed detection pass.
    """
    score: int = 100
    duplicates: List[DuplicateFinding] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class UniquenessCheck:
    """Similarity of a script against the historical corpus"""
    is_unique: bool
    similarity: float
    attempts: int = 1
    most_similar_id: Optional[str] = None


@dataclass
class UniquenessResult:
    """Outcome of the check/rewrite loop"""
    script: ScriptData
    is_unique: bool
    attempts: int
    similarity: float
    checks: List[UniquenessCheck] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class UniquenessReport:
    """Summary shown to the user after uniqueness enforcement"""
    fingerprint: str
    check: UniquenessCheck
    total_scripts: int
    recent_scripts: int
    suggestions: List[str] = field(default_factory=list)


@dataclass
class HistoryEntry:
    """A previously generated script in the uniqueness corpus"""
    script_id: str
    content: str
    created_at: Optional[str] = None
    project_id: Optional[str] = None
