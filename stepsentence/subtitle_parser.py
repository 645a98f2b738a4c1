"""Parses SRT subtitle content into ordered, timed cues."""

import logging
import os
from typing import Iterator, List, Optional

from .exceptions import FileSystemError, SubtitleDecodeError
from .models import Cue
from .utils import parse_int_field, parse_time_srt

logger = logging.getLogger(__name__)

TIME_SEPARATOR = "-->"

def decode_subtitle_bytes(data: bytes) -> str:
    """
    Decodes raw subtitle bytes, trying UTF-8 first and UTF-16 second.

    A UTF-8 byte order mark is dropped.

    Args:
        data: File content as read from disk.

    Returns:
        The decoded text.

    Raises:
        SubtitleDecodeError: If the bytes are valid in neither encoding.
    """
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.debug("Subtitle content is not valid UTF-8, trying UTF-16.")
    try:
        return data.decode("utf-16")
    except UnicodeDecodeError as e:
        logger.error(f"Subtitle content could not be decoded as UTF-8 or UTF-16: {e}")
        raise SubtitleDecodeError("Invalid subtitle content: not decodable as UTF-8 or UTF-16") from e

def _iter_blocks(content: str) -> Iterator[List[str]]:
    """Yields groups of consecutive non-blank lines."""
    block: List[str] = []
    for line in content.split("\n"):
        if line.strip():
            block.append(line)
        elif block:
            yield block
            block = []
    if block:
        yield block

def _parse_block(lines: List[str]) -> Optional[Cue]:
    """Builds a cue from one block, or returns None if the block is malformed."""
    if len(lines) < 2:
        return None
    try:
        index = parse_int_field(lines[0].strip())
    except ValueError:
        return None

    parts = lines[1].strip().split(TIME_SEPARATOR)
    if len(parts) != 2:
        return None
    try:
        start_sec = parse_time_srt(parts[0])
        end_sec = parse_time_srt(parts[1])
    except ValueError:
        return None

    text = " ".join(lines[2:]).strip()
    if not text:
        return None
    return Cue(index=index, start_sec=start_sec, end_sec=end_sec, text=text)

def parse_srt_text(text: str) -> List[Cue]:
    """
    Parses SRT text into cues sorted by start time.

    Each block is an index line, a "HH:MM:SS,mmm --> HH:MM:SS,mmm" line and
    one or more text lines; blocks are separated by blank lines. Malformed
    blocks are skipped and never abort the parse. Cues sharing a start time
    keep their file order.

    Args:
        text: Decoded subtitle file content.

    Returns:
        The cues, ascending by start_sec.
    """
    content = text.replace("\r\n", "\n").replace("\r", "\n")
    cues: List[Cue] = []
    skipped = 0
    for block in _iter_blocks(content):
        cue = _parse_block(block)
        if cue is None:
            skipped += 1
            logger.debug(f"Skipping malformed subtitle block starting with: {block[0][:40]!r}")
            continue
        cues.append(cue)

    if skipped:
        logger.debug(f"Skipped {skipped} malformed subtitle block(s).")
    cues.sort(key=lambda cue: cue.start_sec)
    return cues

def parse_srt_bytes(data: bytes) -> List[Cue]:
    """Decodes and parses raw SRT bytes. Raises SubtitleDecodeError if undecodable."""
    return parse_srt_text(decode_subtitle_bytes(data))

def parse_srt_file(srt_path: str) -> List[Cue]:
    """
    Reads and parses an SRT file.

    Args:
        srt_path: Path to the subtitle file.

    Returns:
        The cues, ascending by start_sec.

    Raises:
        FileNotFoundError: If the file does not exist.
        FileSystemError: If the file cannot be read.
        SubtitleDecodeError: If the content is not valid UTF-8 or UTF-16.
    """
    logger.info(f"Parsing subtitle file: {srt_path}")
    if not os.path.isfile(srt_path):
        raise FileNotFoundError(f"Subtitle file not found: {srt_path}")
    try:
        with open(srt_path, "rb") as f:
            data = f.read()
    except OSError as e:
        logger.error(f"Error reading subtitle file {srt_path}: {e}", exc_info=True)
        raise FileSystemError(f"Could not read subtitle file {srt_path}: {e}") from e

    cues = parse_srt_bytes(data)
    logger.info(f"Parsed {len(cues)} cues from {srt_path}")
    return cues
