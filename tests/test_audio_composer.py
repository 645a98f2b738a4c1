"""
Tests for stitched export and reference clips. ffmpeg itself is never run.
"""

import ffmpeg
import pytest

from stepsentence.audio_composer import AudioComposer
from stepsentence.exceptions import AudioExportError, MissingRecordingError
from stepsentence.models import Project, Sentence
from tests.helpers import write_recording


@pytest.fixture
def ffmpeg_calls(monkeypatch):
    """Replaces ffmpeg.run, records the command line and creates the output file."""
    calls = []

    def fake_run(stream, cmd="ffmpeg", **kwargs):
        args = ffmpeg.get_args(stream)
        calls.append({"cmd": cmd, "args": args})
        output_path = [a for a in args if a != "-y"][-1]
        with open(output_path, "wb") as f:
            f.write(b"audio")
        return b"", b""

    monkeypatch.setattr(ffmpeg, "run", fake_run)
    return calls


@pytest.fixture
def recorded_project(audio_store, tmp_path):
    project = Project(title="Lesson", full_text="A. B.", sentences=[
        Sentence(order=1, text="B."),
        Sentence(order=0, text="A."),
    ])
    for sentence in project.sentences:
        audio_store.attach_recording(project, sentence, write_recording(tmp_path, f"{sentence.text}.m4a"))
    return project


def test_compose_project(ffmpeg_calls, recorded_project, audio_store, tmp_path):
    output = str(tmp_path / "out" / "lesson.m4a")
    result = AudioComposer(ffmpeg_path="/opt/ffmpeg").compose_project(recorded_project, audio_store, output)

    assert result == output
    assert len(ffmpeg_calls) == 1
    call = ffmpeg_calls[0]
    assert call["cmd"] == "/opt/ffmpeg"
    args = call["args"]
    assert output in args
    assert "-filter_complex" in args

    inputs = [args[i + 1] for i, a in enumerate(args) if a == "-i"]
    recordings = {audio_store.absolute_path(s.audio_file_name) for s in recorded_project.sentences}
    assert recordings <= set(inputs)
    assert len([i for i in inputs if i.startswith("anullsrc=")]) == 1
    assert len(inputs) == 3
    graph = args[args.index("-filter_complex") + 1]
    assert "asplit=2" in graph
    assert "concat" in graph


def test_compose_without_gap(ffmpeg_calls, recorded_project, audio_store, tmp_path):
    AudioComposer().compose_project(recorded_project, audio_store, str(tmp_path / "o.m4a"), gap_seconds=0)
    args = ffmpeg_calls[0]["args"]
    inputs = [args[i + 1] for i, a in enumerate(args) if a == "-i"]
    assert len(inputs) == 2
    assert "anullsrc" not in " ".join(args)


def test_compose_missing_recording(ffmpeg_calls, audio_store, tmp_path):
    project = Project(title="T", full_text="A.", sentences=[Sentence(order=0, text="Unrecorded.")])
    with pytest.raises(MissingRecordingError) as exc_info:
        AudioComposer().compose_project(project, audio_store, str(tmp_path / "o.m4a"))
    assert exc_info.value.sentence_text == "Unrecorded."
    assert ffmpeg_calls == []


def test_compose_empty_project(ffmpeg_calls, audio_store, tmp_path):
    with pytest.raises(AudioExportError):
        AudioComposer().compose_project(Project(title="T", full_text=""), audio_store, str(tmp_path / "o.m4a"))


def test_ffmpeg_failure_is_wrapped_and_cleans_up(monkeypatch, recorded_project, audio_store, tmp_path):
    output = tmp_path / "o.m4a"

    def failing_run(stream, **kwargs):
        output.write_bytes(b"partial")
        raise ffmpeg.Error("ffmpeg", b"", b"boom")

    monkeypatch.setattr(ffmpeg, "run", failing_run)
    with pytest.raises(AudioExportError, match="boom"):
        AudioComposer().compose_project(recorded_project, audio_store, str(output))
    assert not output.exists()


def test_extract_reference_clip(ffmpeg_calls, sample_mp3_file, tmp_path):
    output = str(tmp_path / "clip.mp3")
    AudioComposer().extract_reference_clip(sample_mp3_file, 1.5, 4.0, output)

    args = ffmpeg_calls[0]["args"]
    assert args[args.index("-ss") + 1] == "1.5"
    assert args[args.index("-t") + 1] == "2.5"
    assert output in args


@pytest.mark.parametrize("start, end", [(3.0, 3.0), (5.0, 1.0)])
def test_extract_reference_clip_rejects_bad_range(ffmpeg_calls, sample_mp3_file, tmp_path, start, end):
    with pytest.raises(AudioExportError):
        AudioComposer().extract_reference_clip(sample_mp3_file, start, end, str(tmp_path / "c.mp3"))
    assert ffmpeg_calls == []


def test_extract_reference_clip_missing_source(ffmpeg_calls, tmp_path):
    with pytest.raises(FileNotFoundError):
        AudioComposer().extract_reference_clip(str(tmp_path / "no.mp3"), 0.0, 1.0, str(tmp_path / "c.mp3"))
