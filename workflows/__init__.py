"""
Workflows Package - Video-to-export pipeline

WorkflowController sequences the steps in workflows/steps.py and owns
persistence, progress and run state.
"""

from .controller import PROGRESS_BANDS, WorkflowController
from .steps import (
    execute_analyze_step,
    execute_clip_step,
    execute_dedup_step,
    execute_export_step,
    execute_script_step,
    execute_template_step,
    execute_timeline_step,
    execute_uniqueness_step,
    execute_upload_step,
    fallback_analysis,
)

__all__ = [
    "WorkflowController",
    "PROGRESS_BANDS",
    "execute_upload_step",
    "execute_analyze_step",
    "execute_template_step",
    "execute_script_step",
    "execute_dedup_step",
    "execute_uniqueness_step",
    "execute_clip_step",
    "execute_timeline_step",
    "execute_export_step",
    "fallback_analysis",
]
