"""Orchestrates project creation from text or from an MP3 + SRT pair."""

import logging
import os
from typing import List, Optional

from .audio_store import AudioFileStore
from .exceptions import ProjectCreationError
from .models import Project, Segment, Sentence
from .project_store import ProjectStore
from .segment_merger import merge_cues_to_segments
from .subtitle_parser import parse_srt_file
from .text_splitter import split_sentences

logger = logging.getLogger(__name__)

class ProjectBuilder:
    """
    Creates practice projects and hands them to a ProjectStore.
    """

    SUPPORTED_AUDIO_EXTENSIONS = (".mp3",)

    def __init__(self, project_store: ProjectStore, audio_store: AudioFileStore):
        """
        Initializes the ProjectBuilder.

        Args:
            project_store: Where created projects are saved.
            audio_store: Storage that receives imported source audio.
        """
        self.project_store = project_store
        self.audio_store = audio_store

    def preview_subtitles(self, srt_path: str) -> List[Segment]:
        """
        Parses and merges a subtitle file into sentence segments.

        Raises:
            FileNotFoundError: If the subtitle file does not exist.
            SubtitleDecodeError: If the file is not UTF-8 or UTF-16 text.
        """
        segments = merge_cues_to_segments(parse_srt_file(srt_path))
        logger.info(f"Subtitle preview for {srt_path}: {len(segments)} sentences.")
        return segments

    def create_text_project(self, title: str, body_text: str) -> Project:
        """
        Creates a project whose sentences are split from free text.

        Args:
            title: Project title.
            body_text: Text to practise.

        Returns:
            The saved project.

        Raises:
            ProjectCreationError: If the title or text is blank.
        """
        trimmed_title = title.strip()
        trimmed_text = body_text.strip()
        if not trimmed_title:
            raise ProjectCreationError("Project title must not be empty.")
        if not trimmed_text:
            raise ProjectCreationError("Project text must not be empty.")

        project = Project(title=trimmed_title, full_text=trimmed_text)
        project.sentences = [
            Sentence(order=i, text=text) for i, text in enumerate(split_sentences(trimmed_text))
        ]
        self.project_store.save(project)
        logger.info(f"Created text project '{project.title}' with {project.total_count} sentences.")
        return project

    def create_file_project(self, audio_path: str, srt_path: str, title: Optional[str] = None) -> Project:
        """
        Creates a time-aligned project from an MP3 file and its subtitles.

        Each merged subtitle segment becomes one sentence carrying the
        segment's start and end time. The audio is copied into managed
        storage.

        Args:
            audio_path: Path to the source MP3.
            srt_path: Path to the matching SRT file.
            title: Project title; defaults to the audio file's base name.

        Returns:
            The saved project.

        Raises:
            ProjectCreationError: If the audio is not an MP3, the title is
                                  blank, or the subtitles contain no cues.
            SubtitleDecodeError: If the subtitle file cannot be decoded.
            FileNotFoundError: If an input file does not exist.
            FileSystemError: If the audio cannot be copied.
        """
        ext = os.path.splitext(audio_path)[1].lower()
        if ext not in self.SUPPORTED_AUDIO_EXTENSIONS:
            raise ProjectCreationError(f"Source audio must be an mp3 file: {audio_path}")
        if not os.path.isfile(audio_path):
            raise FileNotFoundError(f"Audio file not found: {audio_path}")

        if title is None or not title.strip():
            title = os.path.splitext(os.path.basename(audio_path))[0]
        title = title.strip()
        if not title:
            raise ProjectCreationError("Project title must not be empty.")

        segments = self.preview_subtitles(srt_path)
        if not segments:
            raise ProjectCreationError(f"No subtitles found in {srt_path}")

        stored_audio = self.audio_store.copy_source_audio(audio_path)

        project = Project(
            title=title,
            full_text="\n".join(segment.text for segment in segments),
            source_audio_file_name=stored_audio,
        )
        project.sentences = [
            Sentence(
                order=i,
                text=segment.text,
                start_time_sec=segment.start,
                end_time_sec=segment.end,
            )
            for i, segment in enumerate(segments)
        ]
        try:
            self.project_store.save(project)
        except Exception:
            self.audio_store.remove(stored_audio)
            raise
        logger.info(f"Created file project '{project.title}' with {project.total_count} time-aligned sentences.")
        return project
