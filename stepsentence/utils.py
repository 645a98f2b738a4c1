"""Utility functions for StepSentence."""

import os
import re
import logging
import time
from typing import Optional
from .exceptions import FileSystemError

logger = logging.getLogger(__name__)

# ASCII digits only; int() alone would take "1_0" or Arabic-Indic digits
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

def ensure_dir_exists(dir_path: str) -> None:
    """
    Ensures that a directory exists. Creates it if it doesn't.

    Args:
        dir_path: The path to the directory.

    Raises:
        FileSystemError: If the directory cannot be created due to permissions
                         or if the path exists but is not a directory.
    """
    if not dir_path:
        raise ValueError("Directory path cannot be empty.")
    try:
        if not os.path.exists(dir_path):
            os.makedirs(dir_path)
            logger.info(f"Created directory: {dir_path}")
        elif not os.path.isdir(dir_path):
            raise FileSystemError(f"Path exists but is not a directory: {dir_path}")
    except OSError as e:
        logger.error(f"Error creating or accessing directory {dir_path}: {e}", exc_info=True)
        raise FileSystemError(f"Could not create or access directory {dir_path}: {e}") from e

def parse_int_field(value: str) -> int:
    """Parses a plain signed decimal integer. Raises ValueError otherwise."""
    if not _INTEGER_RE.fullmatch(value):
        raise ValueError(f"Not an integer: {value!r}")
    return int(value)

def parse_time_srt(time_code: str) -> float:
    """
    Parses an SRT time code (HH:MM:SS,mmm) into seconds.

    The millisecond field is read as an integer count of milliseconds, so
    "00:00:01,5" is 1.005 seconds.

    Args:
        time_code: Time code such as "01:02:03,450".

    Returns:
        Total seconds as a float.

    Raises:
        ValueError: If the time code does not have the HH:MM:SS,mmm shape
                    or a field is not an integer.
    """
    parts = time_code.strip().split(":")
    if len(parts) != 3:
        raise ValueError(f"Malformed SRT time code: {time_code!r}")
    sec_milli = parts[2].split(",")
    if len(sec_milli) != 2:
        raise ValueError(f"Malformed SRT time code: {time_code!r}")
    hours = parse_int_field(parts[0])
    minutes = parse_int_field(parts[1])
    seconds = parse_int_field(sec_milli[0])
    millis = parse_int_field(sec_milli[1])
    return float(hours * 3600 + minutes * 60 + seconds) + millis / 1000.0

def format_time_srt(seconds: float) -> str:
    """
    Formats seconds into SRT time format HH:MM:SS,ms.

    Args:
        seconds: Time in seconds.

    Returns:
        Formatted time string.
    """
    if seconds < 0:
        seconds = 0.0 # Ensure non-negative time
    milliseconds = round(seconds * 1000)
    hrs = milliseconds // 3600000
    milliseconds %= 3600000
    mins = milliseconds // 60000
    milliseconds %= 60000
    secs = milliseconds // 1000
    milliseconds %= 1000
    return f"{hrs:02d}:{mins:02d}:{secs:02d},{milliseconds:03d}"

def safe_file_stem(name: str) -> str:
    """Keeps only letters, digits, '_' and '-' from a file base name."""
    return "".join(ch for ch in name if ch.isalnum() or ch in "_-")

def unique_file_name(base: str, ext: str, timestamp: Optional[int] = None) -> str:
    """
    Builds a storage file name of the form <safe_base>_<unix_ts>.<ext>.

    Args:
        base: Original base name (without extension).
        ext: Extension, with or without a leading dot.
        timestamp: Unix time to embed; defaults to now.
    """
    stamp = int(time.time()) if timestamp is None else timestamp
    ext = ext.lstrip(".")
    return f"{safe_file_stem(base)}_{stamp}.{ext}"
