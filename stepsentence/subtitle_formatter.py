"""Handles writing merged sentence segments to preview files (SRT, JSON)."""

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Sequence

from .models import Segment
from .exceptions import FormattingError
from .utils import ensure_dir_exists, format_time_srt

logger = logging.getLogger(__name__)

class SubtitleFormatter(ABC):
    """Abstract base class for segment formatters."""

    extension = ""

    @abstractmethod
    def render(self, segments: Sequence[Segment]) -> str:
        """Returns the file content for the given segments."""
        pass

    def format_segments(self, segments: Sequence[Segment], output_path: str) -> None:
        """
        Writes segments to a file, one entry per segment.

        Args:
            segments: Merged sentence segments.
            output_path: The path to save the formatted file.

        Raises:
            FormattingError: If formatting or writing fails.
            FileSystemError: If the output directory is invalid.
        """
        output_dir = os.path.dirname(output_path)
        if output_dir:
            ensure_dir_exists(output_dir)
        try:
            content = self.render(segments)
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(content)
        except (IOError, TypeError, ValueError) as e:
            logger.error(f"Failed to write {self.extension} file to {output_path}: {e}", exc_info=True)
            raise FormattingError(f"Could not write {self.extension} file: {e}") from e
        logger.info(f"Successfully wrote {len(segments)} segments to {output_path}")


class SRTFormatter(SubtitleFormatter):
    """Formats segments as SRT, one block per sentence."""

    extension = "srt"

    def render(self, segments: Sequence[Segment]) -> str:
        blocks = []
        for number, segment in enumerate(segments, 1):
            if segment.end < segment.start:
                logger.warning(f"Segment {number} ends before it starts ({segment.start:.3f} -> {segment.end:.3f}).")
            blocks.append(
                f"{number}\n"
                f"{format_time_srt(segment.start)} --> {format_time_srt(segment.end)}\n"
                f"{segment.text}\n"
            )
        return "\n".join(blocks)


class JSONFormatter(SubtitleFormatter):
    """Formats segments as a JSON list of {start, end, text, covered_indices}."""

    extension = "json"

    def render(self, segments: Sequence[Segment]) -> str:
        return json.dumps([s.to_dict() for s in segments], ensure_ascii=False, indent=2) + "\n"


FORMATTERS = {
    SRTFormatter.extension: SRTFormatter,
    JSONFormatter.extension: JSONFormatter,
}

def get_formatter(output_format: str) -> SubtitleFormatter:
    """
    Returns a formatter instance for 'srt' or 'json'.

    Raises:
        FormattingError: If the format is not supported.
    """
    formatter_cls = FORMATTERS.get(output_format.lower())
    if formatter_cls is None:
        raise FormattingError(f"Unsupported output format '{output_format}'.")
    return formatter_cls()
