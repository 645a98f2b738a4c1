"""
Tests for merging cues into sentence segments.
"""

import pytest

from stepsentence.exceptions import SubtitleDecodeError
from stepsentence.models import Cue
from stepsentence.segment_merger import (
    ends_with_sentence_terminator,
    merge_cues_to_segments,
    segment_subtitles,
)
from stepsentence.subtitle_parser import parse_srt_text
from tests.helpers import make_cues


class TestSentenceTerminator:

    @pytest.mark.parametrize("text", [
        "Hello.", "Really?", "Stop!", "你好。", "真的？", "好！", "Well…",
        'He said "yes."', "It's 'done.'", "“结束。”", "‘Fine!’", "  Padded.  ",
    ])
    def test_terminated(self, text):
        assert ends_with_sentence_terminator(text)

    @pytest.mark.parametrize("text", [
        "", "   ", "Hello", "Hello,", "wait;", "list:", '"', "’”", "Hola ¿", "Why؟",
    ])
    def test_not_terminated(self, text):
        assert not ends_with_sentence_terminator(text)


class TestMergeCues:

    def test_single_terminated_cue(self):
        segments = merge_cues_to_segments(make_cues("Hello there."))

        assert len(segments) == 1
        assert segments[0].text == "Hello there."
        assert segments[0].covered_indices == [1]
        assert (segments[0].start, segments[0].end) == (0.0, 1.0)

    def test_wrapped_sentence_is_joined(self):
        segments = merge_cues_to_segments(make_cues("Hello", "there."))

        assert len(segments) == 1
        assert segments[0].text == "Hello there."
        assert segments[0].covered_indices == [1, 2]
        assert (segments[0].start, segments[0].end) == (0.0, 2.0)

    def test_trailing_unterminated_cue_is_flushed(self):
        segments = merge_cues_to_segments(make_cues("One.", "Two.", "Trailing"))

        assert [s.text for s in segments] == ["One.", "Two.", "Trailing"]
        assert [s.covered_indices for s in segments] == [[1], [2], [3]]

    def test_cue_with_several_sentences_is_not_split(self):
        segments = merge_cues_to_segments(make_cues("First. Second", "end."))

        assert len(segments) == 1
        assert segments[0].text == "First. Second end."

    def test_only_the_current_cue_decides_the_boundary(self):
        # "Done." ends the first cue's sentence; "and" does not end anything
        segments = merge_cues_to_segments(make_cues("Done.", "and", "more!"))
        assert [s.text for s in segments] == ["Done.", "and more!"]

    def test_timing_comes_from_first_and_last_cue(self):
        cues = [
            Cue(index=10, start_sec=2.0, end_sec=3.0, text="Part one"),
            Cue(index=11, start_sec=3.1, end_sec=4.0, text="part two"),
            Cue(index=12, start_sec=4.2, end_sec=6.5, text="part three?"),
        ]
        segment = merge_cues_to_segments(cues)[0]

        assert segment.start == 2.0
        assert segment.end == 6.5
        assert segment.covered_indices == [10, 11, 12]

    def test_does_not_resort_input(self):
        cues = [
            Cue(index=2, start_sec=5.0, end_sec=6.0, text="Later."),
            Cue(index=1, start_sec=1.0, end_sec=2.0, text="Earlier."),
        ]
        assert [s.covered_indices for s in merge_cues_to_segments(cues)] == [[2], [1]]

    def test_empty_input(self):
        assert merge_cues_to_segments([]) == []

    def test_accepts_any_iterable(self):
        segments = merge_cues_to_segments(iter(make_cues("A", "b.")))
        assert segments[0].covered_indices == [1, 2]

    def test_every_cue_covered_exactly_once_in_order(self, sample_srt_content):
        cues = parse_srt_text(sample_srt_content)
        segments = merge_cues_to_segments(cues)

        flattened = [i for s in segments for i in s.covered_indices]
        assert flattened == [c.index for c in cues]

        by_index = {c.index: c for c in cues}
        for segment in segments:
            assert segment.start == by_index[segment.covered_indices[0]].start_sec
            assert segment.end == by_index[segment.covered_indices[-1]].end_sec

    def test_sample_file_segments(self, sample_srt_content):
        segments = merge_cues_to_segments(parse_srt_text(sample_srt_content))

        assert [s.text for s in segments] == [
            "Hello there, how are you?",
            'She said "fine."',
            "and then left",
        ]
        assert [s.covered_indices for s in segments] == [[1, 2], [3], [4]]


class TestSegmentSubtitles:

    def test_pipeline_from_bytes(self, sample_srt_content):
        segments = segment_subtitles(sample_srt_content.encode("utf-8"))
        assert len(segments) == 3
        assert segments[0].start == 1.0
        assert segments[0].end == 5.0

    def test_undecodable_bytes(self):
        with pytest.raises(SubtitleDecodeError):
            segment_subtitles(b"\xff")
