"""Unit tests for timeline placement"""

import pytest

from core.errors import ValidationError
from core.models.clip import ClipPlan, ClipSegment
from core.models.timeline import TimelineClip, TimelineData, TimelineTrack, TrackType
from core.timeline import build_timeline, find_nearest_scene, place_segments, validate_timeline
from tests.mocks.fixtures import make_analysis, make_script, make_video


class TestBuildTimeline:

    def test_three_tracks(self, sample_video, sample_analysis, sample_script):
        timeline = build_timeline(sample_video, sample_analysis, sample_script)
        assert [t.id for t in timeline.tracks] == ["video-track-1", "audio-track-1", "subtitle-track-1"]
        assert timeline.duration == 90.0

    def test_segments_split_evenly(self, sample_video, sample_analysis, sample_script):
        timeline = build_timeline(sample_video, sample_analysis, sample_script)
        subtitles = timeline.track(TrackType.SUBTITLE).clips

        assert [(c.start_time, c.end_time) for c in subtitles] == [(0.0, 30.0), (30.0, 60.0), (60.0, 90.0)]
        assert [c.script_segment_id for c in subtitles] == ["section_1", "section_2", "section_3"]

    def test_last_clip_ends_at_duration(self):
        video = make_video(duration=100.0)
        timeline = build_timeline(video, make_analysis(duration=100.0), make_script())
        assert timeline.track(TrackType.SUBTITLE).clips[-1].end_time == 100.0

    def test_video_clips_sourced_from_nearest_scene(self, sample_video, sample_analysis, sample_script):
        timeline = build_timeline(sample_video, sample_analysis, sample_script)
        clips = timeline.track(TrackType.VIDEO).clips

        assert [(c.source_start, c.source_end) for c in clips] == [(0.0, 30.0), (30.0, 60.0), (60.0, 90.0)]
        assert clips[0].transition is None
        assert clips[1].transition == "fade"

    def test_without_analysis_uses_whole_video(self, sample_video, sample_script):
        timeline = build_timeline(sample_video, None, sample_script)
        clip = timeline.track(TrackType.VIDEO).clips[0]
        assert (clip.source_start, clip.source_end) == (0.0, 90.0)

    def test_clip_plan_drives_video_track(self, sample_video, sample_analysis, sample_script):
        plan = ClipPlan(
            video_id=sample_video.id,
            segments=[
                ClipSegment(id="clip_1", start_time=0.0, end_time=5.0, source_start=10.0,
                            source_end=15.0, source_id=sample_video.id),
                ClipSegment(id="clip_2", start_time=5.0, end_time=12.0, source_start=40.0,
                            source_end=47.0, source_id=sample_video.id, transition="fade"),
            ],
            total_duration=12.0,
        )
        timeline = build_timeline(sample_video, sample_analysis, sample_script, clip_plan=plan)

        video_clips = timeline.track(TrackType.VIDEO).clips
        assert timeline.duration == 12.0
        assert [c.source_start for c in video_clips] == [10.0, 40.0]
        assert timeline.track(TrackType.SUBTITLE).clips[-1].end_time == 12.0

    def test_empty_clip_plan_ignored(self, sample_video, sample_analysis, sample_script):
        plan = ClipPlan(video_id=sample_video.id)
        timeline = build_timeline(sample_video, sample_analysis, sample_script, clip_plan=plan)
        assert timeline.duration == 90.0
        assert len(timeline.track(TrackType.VIDEO).clips) == 3

    def test_auto_match_off(self, sample_video, sample_analysis, sample_script):
        timeline = build_timeline(sample_video, sample_analysis, sample_script, auto_match=False)
        assert timeline.total_clips == 0


class TestPlaceSegments:

    def test_segment_times_copied(self, sample_video, sample_analysis, sample_script):
        timeline = build_timeline(sample_video, sample_analysis, sample_script)
        placed = place_segments(sample_script, timeline)

        assert [(s.start_time, s.end_time) for s in placed.segments] == [(0.0, 30.0), (30.0, 60.0), (60.0, 90.0)]
        assert placed.id == sample_script.id
        assert sample_script.segments[0].end_time == 0.0


class TestValidateTimeline:

    def _timeline(self, *spans):
        clips = [TimelineClip(id=f"c{i}", start_time=s, end_time=e) for i, (s, e) in enumerate(spans)]
        return TimelineData(duration=100.0, tracks=[TimelineTrack(id="t", type=TrackType.VIDEO, clips=clips)])

    def test_valid(self):
        validate_timeline(self._timeline((0, 10), (10, 20)))

    def test_overlap_rejected(self):
        with pytest.raises(ValidationError):
            validate_timeline(self._timeline((0, 10), (5, 20)))

    def test_reversed_rejected(self):
        with pytest.raises(ValidationError):
            validate_timeline(self._timeline((10, 5)))


def test_find_nearest_scene():
    analysis = make_analysis(duration=90.0)
    assert find_nearest_scene(analysis.scenes, 0.0).id == "scene_1"
    assert find_nearest_scene(analysis.scenes, 0.5).id == "scene_2"
    assert find_nearest_scene(analysis.scenes, 0.99).id == "scene_3"
    assert find_nearest_scene([], 0.5) is None
