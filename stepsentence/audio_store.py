"""Managed storage for imported source audio and sentence recordings."""

import logging
import os
import shutil
from typing import Optional

from .exceptions import FileSystemError
from .models import Project, Sentence, SentenceStatus
from .utils import ensure_dir_exists, unique_file_name

logger = logging.getLogger(__name__)

class AudioFileStore:
    """
    Keeps audio files under a single storage root.

    Source audio for subtitle-aligned projects lives directly in the root;
    recordings live in Recordings/<project_id>/<sentence_id>.<ext>. All
    identifiers handed out are paths relative to the root.
    """

    RECORDINGS_FOLDER = "Recordings"

    def __init__(self, root_dir: str):
        self.root_dir = root_dir
        ensure_dir_exists(self.root_dir)

    def absolute_path(self, relative_path: str) -> str:
        return os.path.join(self.root_dir, relative_path)

    def exists(self, relative_path: Optional[str]) -> bool:
        return bool(relative_path) and os.path.isfile(self.absolute_path(relative_path))

    def copy_source_audio(self, src_path: str, timestamp: Optional[int] = None) -> str:
        """
        Copies a user-chosen audio file into the storage root.

        An existing file with the generated name is replaced.

        Args:
            src_path: Path of the audio file to import.
            timestamp: Unix time embedded in the stored name; defaults to now.

        Returns:
            The stored file name, relative to the storage root.

        Raises:
            FileNotFoundError: If the source file does not exist.
            FileSystemError: If the copy fails.
        """
        if not os.path.isfile(src_path):
            raise FileNotFoundError(f"Audio file not found: {src_path}")

        base, ext = os.path.splitext(os.path.basename(src_path))
        stored_name = unique_file_name(base, ext, timestamp=timestamp)
        dest_path = self.absolute_path(stored_name)

        try:
            if os.path.exists(dest_path):
                os.remove(dest_path)
            shutil.copyfile(src_path, dest_path)
        except OSError as e:
            logger.error(f"Failed to copy audio file {src_path} to {dest_path}: {e}", exc_info=True)
            raise FileSystemError(f"Could not copy audio file {src_path}: {e}") from e

        logger.info(f"Copied source audio to: {dest_path}")
        return stored_name

    def recording_relative_path(self, project_id: str, sentence_id: str, ext: str = "m4a") -> str:
        return f"{self.RECORDINGS_FOLDER}/{project_id}/{sentence_id}.{ext.lstrip('.')}"

    def ensure_recording_dir(self, project_id: str) -> str:
        """Creates (if needed) and returns the recordings directory of a project."""
        dir_path = os.path.join(self.root_dir, self.RECORDINGS_FOLDER, project_id)
        ensure_dir_exists(dir_path)
        return dir_path

    def attach_recording(self, project: Project, sentence: Sentence, recording_path: str) -> str:
        """
        Stores a recording for a sentence and marks the sentence as recorded.

        A previous recording of the sentence is replaced.

        Args:
            project: Project owning the sentence.
            sentence: Sentence the recording belongs to.
            recording_path: Path of the recorded audio file.

        Returns:
            The recording's path relative to the storage root.

        Raises:
            FileNotFoundError: If the recording file does not exist.
            FileSystemError: If the copy fails.
        """
        if not os.path.isfile(recording_path):
            raise FileNotFoundError(f"Recording file not found: {recording_path}")

        ext = os.path.splitext(recording_path)[1] or ".m4a"
        self.ensure_recording_dir(project.id)
        relative_path = self.recording_relative_path(project.id, sentence.id, ext=ext)

        if sentence.audio_file_name and sentence.audio_file_name != relative_path:
            self.remove(sentence.audio_file_name)

        try:
            shutil.copyfile(recording_path, self.absolute_path(relative_path))
        except OSError as e:
            logger.error(f"Failed to store recording {recording_path}: {e}", exc_info=True)
            raise FileSystemError(f"Could not store recording {recording_path}: {e}") from e

        sentence.audio_file_name = relative_path
        sentence.status = SentenceStatus.RECORDED
        logger.info(f"Stored recording for sentence {sentence.order} of project {project.id}: {relative_path}")
        return relative_path

    def reset_recording(self, project: Project, sentence: Sentence) -> None:
        """Deletes the sentence's recording and puts it back to not started."""
        if sentence.audio_file_name:
            self.remove(sentence.audio_file_name)
        sentence.audio_file_name = None
        sentence.status = SentenceStatus.NOT_STARTED
        logger.info(f"Reset sentence {sentence.order} of project {project.id}")

    def remove(self, relative_path: str) -> None:
        """Deletes a stored file if present; failures are logged, not raised."""
        path = self.absolute_path(relative_path)
        if os.path.exists(path):
            try:
                os.remove(path)
                logger.info(f"Removed stored audio file: {path}")
            except OSError as e:
                logger.warning(f"Could not remove stored audio file {path}: {e}")

    def remove_project_recordings(self, project_id: str) -> None:
        """Deletes the recordings directory of a project."""
        dir_path = os.path.join(self.root_dir, self.RECORDINGS_FOLDER, project_id)
        if not os.path.isdir(dir_path):
            return
        try:
            shutil.rmtree(dir_path)
            logger.info(f"Removed recordings directory: {dir_path}")
        except OSError as e:
            logger.error(f"Failed to remove recordings directory {dir_path}: {e}", exc_info=True)
            raise FileSystemError(f"Could not remove recordings for project {project_id}: {e}") from e
