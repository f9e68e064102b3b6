"""Unit tests for SRT subtitle generation"""

import pytest

from core.models.timeline import TimelineData
from core.subtitles import format_srt_time, generate_srt, subtitle_cues
from tests.mocks.fixtures import make_script, make_timeline


@pytest.mark.parametrize("seconds,expected", [
    (0, "00:00:00,000"),
    (1.5, "00:00:01,500"),
    (61.25, "00:01:01,250"),
    (3725.0, "01:02:05,000"),
    (29.9996, "00:00:29,999"),
    (59.9996, "00:00:59,999"),
    (200 / 3, "00:01:06,666"),
    (1.001, "00:00:01,001"),
    (-2.0, "00:00:00,000"),
])
def test_format_srt_time(seconds, expected):
    assert format_srt_time(seconds) == expected


class TestGenerateSrt:

    def test_three_segments_over_90_seconds(self):
        script = make_script(["First part.", "Second part.", "Third part."])
        srt = generate_srt(script, make_timeline(90.0))

        assert srt == (
            "1\n00:00:00,000 --> 00:00:30,000\nFirst part.\n"
            "\n"
            "2\n00:00:30,000 --> 00:01:00,000\nSecond part.\n"
            "\n"
            "3\n00:01:00,000 --> 00:01:30,000\nThird part.\n"
        )

    def test_uses_subtitle_clip_bounds(self):
        script = make_script(["First part.", "Second part.", "Third part."])
        timeline = make_timeline(90.0)
        clips = timeline.tracks[2].clips
        clips[0].end_time = 10.0
        clips[1].start_time = 10.0

        cues = subtitle_cues(script, timeline)

        assert cues[0] == (0.0, 10.0, "First part.")
        assert cues[1][0] == 10.0

    def test_segments_looked_up_by_id(self):
        script = make_script(["First part.", "Second part."])
        timeline = make_timeline(60.0, segment_ids=["section_2", "section_1"])
        cues = subtitle_cues(script, timeline)
        assert [c[2] for c in cues] == ["Second part.", "First part."]

    def test_even_split_without_subtitle_track(self):
        script = make_script(["A.", "B."])
        cues = subtitle_cues(script, TimelineData(duration=40.0))
        assert cues == [(0.0, 20.0, "A."), (20.0, 40.0, "B.")]

    def test_empty_script(self):
        assert generate_srt(make_script([]), TimelineData(duration=10.0)) == ""

    def test_unicode_content(self):
        script = make_script(["你好，世界。"])
        srt = generate_srt(script, TimelineData(duration=5.0))
        assert "你好，世界。" in srt
