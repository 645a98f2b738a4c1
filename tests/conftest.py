"""Shared test configuration and fixtures for all tests."""

import logging

import pytest

from stepsentence.audio_store import AudioFileStore
from stepsentence.project_builder import ProjectBuilder
from stepsentence.project_store import JsonProjectStore


@pytest.fixture
def sample_srt_content() -> str:
    """Sample SRT content: a wrapped sentence, a quoted one and an unterminated tail."""
    return """1
00:00:01,000 --> 00:00:03,500
Hello there,

2
00:00:03,500 --> 00:00:05,000
how are you?

3
00:00:05,200 --> 00:00:07,000
She said "fine."

4
00:00:07,500 --> 00:00:09,250
and then
left
"""


@pytest.fixture
def sample_srt_file(tmp_path, sample_srt_content: str) -> str:
    """Write the sample SRT to a temporary file."""
    path = tmp_path / "lesson.srt"
    path.write_text(sample_srt_content, encoding="utf-8")
    return str(path)


@pytest.fixture
def sample_mp3_file(tmp_path) -> str:
    """A fake MP3; only its bytes are copied, never decoded."""
    path = tmp_path / "Lesson One.mp3"
    path.write_bytes(b"ID3fake-mp3-bytes")
    return str(path)


@pytest.fixture
def storage_dir(tmp_path) -> str:
    path = tmp_path / "storage"
    return str(path)


@pytest.fixture
def audio_store(storage_dir: str) -> AudioFileStore:
    return AudioFileStore(storage_dir)


@pytest.fixture
def project_store(storage_dir: str, audio_store: AudioFileStore) -> JsonProjectStore:
    return JsonProjectStore(storage_dir, audio_store=audio_store)


@pytest.fixture
def builder(project_store: JsonProjectStore, audio_store: AudioFileStore) -> ProjectBuilder:
    return ProjectBuilder(project_store, audio_store)



@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging replaces root handlers; put the originals back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
