"""Builds stitched practice recordings and reference clips using ffmpeg."""

import ffmpeg
import os
import logging
from typing import List, Optional

from .audio_store import AudioFileStore
from .exceptions import AudioExportError, FileSystemError, MissingRecordingError
from .models import Project
from .utils import ensure_dir_exists

logger = logging.getLogger(__name__)

class AudioComposer:
    """Concatenates sentence recordings and cuts segments from source audio."""

    SAMPLE_RATE = 44100

    def __init__(self, ffmpeg_path: Optional[str] = None):
        """
        Initializes the AudioComposer.

        Args:
            ffmpeg_path: Optional path to the ffmpeg executable.
                         If None, assumes ffmpeg is in the system PATH.
        """
        self.ffmpeg_cmd = ffmpeg_path or 'ffmpeg'
        logger.info(f"Using ffmpeg command: {self.ffmpeg_cmd}")

    def _prepare_output(self, output_path: str) -> None:
        output_dir = os.path.dirname(output_path)
        if output_dir:
            ensure_dir_exists(output_dir)
        if os.path.exists(output_path):
            logger.warning(f"Output audio file already exists, overwriting: {output_path}")
            try:
                os.remove(output_path)
            except OSError as e:
                raise FileSystemError(f"Could not remove existing audio file {output_path}: {e}") from e

    def _run(self, stream, output_path: str) -> None:
        try:
            ffmpeg.run(stream, cmd=self.ffmpeg_cmd, capture_stdout=True, capture_stderr=True)
        except ffmpeg.Error as e:
            stderr_output = e.stderr.decode('utf-8', errors='replace') if e.stderr else "No stderr output"
            logger.error(f"ffmpeg stderr: {stderr_output}")
            if os.path.exists(output_path):
                try:
                    os.remove(output_path)
                except OSError:
                    logger.warning(f"Could not clean up partially created audio file: {output_path}")
            raise AudioExportError(f"ffmpeg failed: {stderr_output}") from e

    def _silences(self, seconds: float, count: int) -> list:
        """Returns count separate silent streams of the given length."""
        silence = ffmpeg.input(
            f"anullsrc=r={self.SAMPLE_RATE}:cl=mono", f='lavfi', t=seconds
        ).audio
        if count == 1:
            return [silence]
        # A stream feeds only one filter; asplit fans the one source out
        split = silence.filter_multi_output('asplit', count)
        return [split[i] for i in range(count)]

    def compose_project(
        self,
        project: Project,
        store: AudioFileStore,
        output_path: str,
        gap_seconds: float = 0.2
    ) -> str:
        """
        Concatenates every sentence recording of a project into one file.

        Sentences are taken in order, each followed by gap_seconds of silence.

        Args:
            project: Project whose recordings are stitched.
            store: Storage holding the recordings.
            output_path: Destination file (.m4a).
            gap_seconds: Silence inserted after each sentence.

        Returns:
            The output path.

        Raises:
            MissingRecordingError: If a sentence has no stored recording.
            AudioExportError: If the project has no sentences or ffmpeg fails.
        """
        sentences = project.ordered_sentences()
        if not sentences:
            raise AudioExportError(f"Project '{project.title}' has no sentences to export.")

        recording_paths: List[str] = []
        for sentence in sentences:
            if not store.exists(sentence.audio_file_name):
                raise MissingRecordingError(sentence.text)
            recording_paths.append(store.absolute_path(sentence.audio_file_name))

        self._prepare_output(output_path)
        logger.info(f"Composing {len(recording_paths)} recordings of '{project.title}' into {output_path}")

        gaps = self._silences(gap_seconds, len(recording_paths)) if gap_seconds > 0 else []
        streams = []
        for i, path in enumerate(recording_paths):
            streams.append(
                ffmpeg.input(path).audio.filter(
                    'aformat', sample_rates=self.SAMPLE_RATE, channel_layouts='mono'
                )
            )
            if gaps:
                streams.append(gaps[i])

        joined = ffmpeg.concat(*streams, v=0, a=1)
        stream = ffmpeg.output(joined, output_path, acodec='aac').overwrite_output()
        self._run(stream, output_path)
        logger.info(f"Successfully exported stitched recording to: {output_path}")
        return output_path

    def extract_reference_clip(self, source_audio: str, start: float, end: float, output_path: str) -> str:
        """
        Cuts the [start, end) span of the source audio into a separate file.

        Args:
            source_audio: Path to the project's source audio.
            start: Clip start in seconds.
            end: Clip end in seconds.
            output_path: Destination file; its extension selects the format.

        Returns:
            The output path.

        Raises:
            FileNotFoundError: If the source audio does not exist.
            AudioExportError: If end is not after start, or if ffmpeg fails.
        """
        if not os.path.isfile(source_audio):
            raise FileNotFoundError(f"Source audio not found: {source_audio}")
        # Subtitle end times are not validated, so a backwards span can get here
        if end <= start:
            raise AudioExportError(f"Clip end ({end}) must be after start ({start}).")

        self._prepare_output(output_path)
        logger.debug(f"Extracting {start:.3f}-{end:.3f}s of {source_audio} to {output_path}")
        stream = (
            ffmpeg
            .input(source_audio, ss=start, t=end - start)
            .output(output_path)
            .overwrite_output()
        )
        self._run(stream, output_path)
        return output_path
