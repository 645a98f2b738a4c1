"""
Tests for writing merged segments as SRT or JSON previews.
"""

import json

import pytest

from stepsentence.exceptions import FormattingError
from stepsentence.models import Segment
from stepsentence.segment_merger import merge_cues_to_segments
from stepsentence.subtitle_formatter import JSONFormatter, SRTFormatter, get_formatter
from stepsentence.subtitle_parser import parse_srt_file


SEGMENTS = [
    Segment(start=1.0, end=5.0, text="Hello there, how are you?", covered_indices=[1, 2]),
    Segment(start=5.2, end=7.0, text="Fine.", covered_indices=[3]),
]


def test_srt_render():
    assert SRTFormatter().render(SEGMENTS) == (
        "1\n00:00:01,000 --> 00:00:05,000\nHello there, how are you?\n"
        "\n"
        "2\n00:00:05,200 --> 00:00:07,000\nFine.\n"
    )


def test_srt_output_parses_back_to_one_cue_per_segment(tmp_path):
    output = tmp_path / "out" / "preview.srt"
    SRTFormatter().format_segments(SEGMENTS, str(output))

    cues = parse_srt_file(str(output))
    assert [(c.index, c.start_sec, c.end_sec, c.text) for c in cues] == [
        (1, 1.0, 5.0, "Hello there, how are you?"),
        (2, 5.2, 7.0, "Fine."),
    ]
    assert [s.text for s in merge_cues_to_segments(cues)] == [s.text for s in SEGMENTS]


def test_json_output(tmp_path):
    output = tmp_path / "preview.json"
    JSONFormatter().format_segments(SEGMENTS, str(output))

    data = json.loads(output.read_text(encoding="utf-8"))
    assert data[0] == {"start": 1.0, "end": 5.0, "text": "Hello there, how are you?", "covered_indices": [1, 2]}
    assert len(data) == 2


def test_empty_segments_give_empty_srt():
    assert SRTFormatter().render([]) == ""


def test_get_formatter():
    assert isinstance(get_formatter("SRT"), SRTFormatter)
    assert isinstance(get_formatter("json"), JSONFormatter)
    with pytest.raises(FormattingError):
        get_formatter("vtt")


def test_write_failure_raises_formatting_error(tmp_path):
    target = tmp_path / "is_a_dir.srt"
    target.mkdir()
    with pytest.raises(FormattingError):
        SRTFormatter().format_segments(SEGMENTS, str(target))
