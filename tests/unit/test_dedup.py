"""Unit tests for the originality / dedup engine"""

import pytest
from unittest.mock import patch

from core.dedup import DedupEngine
from core.models.originality import DuplicateFinding, DuplicateType
from core.models.workflow import DedupConfig
from tests.mocks.fixtures import make_script

REPEATED = "The old bridge carries traffic across the river every single day."


class TestDetection:

    def test_clean_script_scores_100(self, sample_script):
        report = DedupEngine().generate_originality_report(sample_script)
        assert report.score == 100
        assert report.duplicates == []
        assert report.error is None

    def test_exact_repeat_detected(self):
        script = make_script([
            f"Morning comes slowly. {REPEATED}",
            f"{REPEATED} Evening falls.",
        ])
        report = DedupEngine(DedupConfig(strategies=[DuplicateType.EXACT])).generate_originality_report(script)

        assert len(report.duplicates) == 1
        finding = report.duplicates[0]
        assert finding.type == DuplicateType.EXACT
        assert finding.segment_id == "section_2"
        assert finding.id == "dup_1"
        assert report.score == 85

    def test_short_sentences_not_exact_duplicates(self):
        script = make_script(["Look at this.", "Look at this."])
        report = DedupEngine(DedupConfig(strategies=[DuplicateType.EXACT])).generate_originality_report(script)
        assert report.duplicates == []

    def test_corpus_copy_detected(self):
        engine = DedupEngine(
            DedupConfig(strategies=[DuplicateType.EXACT]),
            reference_corpus=[f"Some intro. {REPEATED} Some outro."],
        )
        report = engine.generate_originality_report(make_script([REPEATED]))
        assert report.duplicates[0].source == "corpus"

    def test_semantic_similarity_detected(self):
        text = "The camera follows the river as it bends through the quiet green valley"
        script = make_script([text, text + " today"])
        engine = DedupEngine(DedupConfig(strategies=[DuplicateType.SEMANTIC], threshold=0.7))
        report = engine.generate_originality_report(script)

        assert len(report.duplicates) == 1
        assert report.duplicates[0].segment_id == "section_2"
        assert report.duplicates[0].similarity >= 0.7

    def test_template_phrase_detected(self):
        script = make_script(["Without further ado, here is the harbor at dawn."])
        report = DedupEngine().generate_originality_report(script)

        assert [d.type for d in report.duplicates] == [DuplicateType.TEMPLATE]
        assert report.duplicates[0].content == "Without further ado"
        assert report.duplicates[0].source == "phrase-list"
        assert report.score == 95

    def test_chinese_template_phrase_detected(self):
        script = make_script(["话不多说，我们出发吧。"])
        report = DedupEngine().generate_originality_report(script)
        assert report.duplicates[0].content == "话不多说"

    def test_disabled_strategy_skipped(self):
        script = make_script(["Without further ado, here is the harbor at dawn."])
        engine = DedupEngine(DedupConfig(strategies=[DuplicateType.EXACT, DuplicateType.SEMANTIC]))
        assert engine.generate_originality_report(script).duplicates == []

    def test_detection_failure_reported_not_raised(self, sample_script):
        engine = DedupEngine()
        with patch.object(engine, "_detect_exact", side_effect=RuntimeError("boom")):
            report = engine.generate_originality_report(sample_script)
        assert report.error == "boom"
        assert report.duplicates == []


class TestScore:

    def test_penalties(self):
        findings = [
            DuplicateFinding(id="1", type=DuplicateType.EXACT, segment_id="s", content="", similarity=1.0, suggestion=""),
            DuplicateFinding(id="2", type=DuplicateType.SEMANTIC, segment_id="s", content="", similarity=0.8, suggestion=""),
            DuplicateFinding(id="3", type=DuplicateType.TEMPLATE, segment_id="s", content="", similarity=1.0, suggestion=""),
        ]
        assert DedupEngine.compute_score(findings) == 72

    def test_more_findings_never_raise_score(self):
        finding = DuplicateFinding(
            id="1", type=DuplicateType.TEMPLATE, segment_id="s", content="", similarity=1.0, suggestion=""
        )
        scores = [DedupEngine.compute_score([finding] * n) for n in range(30)]
        assert scores == sorted(scores, reverse=True)
        assert scores[-1] == 0


class TestAutoFix:

    def test_clean_script_returned_unchanged(self, sample_script):
        assert DedupEngine().auto_fix(sample_script) is sample_script

    def test_repeated_sentence_removed(self):
        script = make_script([
            f"Morning comes slowly. {REPEATED}",
            f"{REPEATED} Evening falls over the town.",
        ])
        engine = DedupEngine()
        fixed = engine.auto_fix(script)

        assert fixed.segments[0].content == script.segments[0].content
        assert fixed.segments[1].content == "Evening falls over the town."
        assert fixed.id == script.id
        assert engine.generate_originality_report(fixed).score > engine.generate_originality_report(script).score

    def test_segment_never_emptied(self):
        script = make_script([REPEATED, REPEATED])
        fixed = DedupEngine().auto_fix(script)
        assert all(s.content.strip() for s in fixed.segments)

    def test_boilerplate_replaced(self):
        script = make_script(["Without further ado, here is the harbor at dawn."])
        fixed = DedupEngine().auto_fix(script)
        assert fixed.segments[0].content == "Now, here is the harbor at dawn."
        assert fixed.content == "Now, here is the harbor at dawn."

    def test_auto_fix_does_not_lower_score(self):
        text = "The very big boat is really good and shows many things in the harbor today"
        script = make_script([text, text, "Without further ado the tour starts now for everyone"])
        engine = DedupEngine()
        before = engine.generate_originality_report(script).score
        after = engine.generate_originality_report(engine.auto_fix(script)).score
        assert after >= before

    def test_auto_fix_leaves_input_untouched(self):
        script = make_script(["Stay tuned for the harbor at dawn."])
        original = script.segments[0].content
        DedupEngine().auto_fix(script)
        assert script.segments[0].content == original

    def test_update_config(self):
        engine = DedupEngine()
        config = DedupConfig(threshold=0.5)
        engine.update_config(config)
        assert engine.config is config


@pytest.mark.parametrize("phrase,expected", [
    ("Stay tuned for more.", "Keep watching for more."),
    ("In this video we ride the tram.", "Here we ride the tram."),
])
def test_phrase_replacements(phrase, expected):
    fixed = DedupEngine().auto_fix(make_script([phrase]))
    assert fixed.segments[0].content == expected

    def test_second_fix_of_dirty_script_is_noop(self):
        script = make_script([
            f"Without further ado, the very big boat shows many things. {REPEATED}",
            f"{REPEATED} The very big boat shows many things in the harbor.",
            "Stay tuned for the market at dawn, it is really good.",
        ])
        engine = DedupEngine(DedupConfig(threshold=0.3))
        kinds = {f.type for f in engine.generate_originality_report(script).duplicates}
        assert kinds == {DuplicateType.EXACT, DuplicateType.SEMANTIC, DuplicateType.TEMPLATE}

        once = engine.auto_fix(script)
        twice = engine.auto_fix(once)

        assert once is not script
        assert twice is once
        assert once.content.count(REPEATED) == 1
