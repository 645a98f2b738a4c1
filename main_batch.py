#!/usr/bin/env python3
"""
StepSentence Batch Processing Entry Point

Merges every SRT file in a directory into sentence segments and writes one
<name>.sentences.<format> file per input.
"""

import argparse
import logging
import os
import sys
import time
from typing import List, Optional, Tuple

# Progress bar library
from tqdm import tqdm

from stepsentence.config_loader import ConfigLoader
from stepsentence.log_setup import setup_logging, setup_logging_from_config
from stepsentence.segment_merger import merge_cues_to_segments
from stepsentence.subtitle_parser import parse_srt_file
from stepsentence.subtitle_formatter import SubtitleFormatter, get_formatter
from stepsentence.exceptions import StepSentenceError, ConfigurationError, FileSystemError
from stepsentence.utils import ensure_dir_exists

logger = logging.getLogger(__name__)

OUTPUT_MARKER = ".sentences"

def find_subtitle_files(input_dir: str) -> List[str]:
    """
    Finds all .srt files in the input directory, sorted by file name.

    Files produced by an earlier batch run (*.sentences.srt) are ignored.

    Raises:
        FileNotFoundError: If the input directory doesn't exist.
        ValueError: If the input path is not a directory.
    """
    if not os.path.exists(input_dir):
        raise FileNotFoundError(f"Input directory not found: {input_dir}")
    if not os.path.isdir(input_dir):
        raise ValueError(f"Input path is not a directory: {input_dir}")

    subtitle_files = []
    for filename in sorted(os.listdir(input_dir)):
        lower = filename.lower()
        if lower.endswith(".srt") and not lower.endswith(f"{OUTPUT_MARKER}.srt"):
            filepath = os.path.join(input_dir, filename)
            if os.path.isfile(filepath):
                subtitle_files.append(filepath)
    logger.info(f"Found {len(subtitle_files)} SRT files in {input_dir}.")
    return subtitle_files

def segment_directory(
    input_dir: str,
    output_dir: Optional[str],
    formatter: SubtitleFormatter,
    show_progress: bool = True
) -> Tuple[int, int]:
    """
    Segments every SRT file of a directory.

    Args:
        input_dir: Directory with .srt files.
        output_dir: Where output files go; defaults to input_dir.
        formatter: Writer for the merged segments.
        show_progress: Whether to draw a tqdm progress bar.

    Returns:
        (files_processed, files_failed)
    """
    subtitle_files = find_subtitle_files(input_dir)
    output_dir = output_dir or input_dir
    ensure_dir_exists(output_dir)

    files_processed = 0
    files_failed = 0
    with tqdm(total=len(subtitle_files), unit="file", desc="Segmenting", disable=not show_progress) as pbar:
        for srt_path in subtitle_files:
            filename = os.path.basename(srt_path)
            pbar.set_description(f"Processing: {filename[:30]}")
            base_name = os.path.splitext(filename)[0]
            output_path = os.path.join(output_dir, f"{base_name}{OUTPUT_MARKER}.{formatter.extension}")
            try:
                cues = parse_srt_file(srt_path)
                segments = merge_cues_to_segments(cues)
                formatter.format_segments(segments, output_path)
                logger.info(f"{filename} -> {os.path.basename(output_path)} ({len(cues)} cues -> {len(segments)} sentences)")
                files_processed += 1
            except (StepSentenceError, FileNotFoundError) as e:
                logger.error(f"Segmentation failed for '{filename}': {e}")
                files_failed += 1
            except Exception as e:
                logger.error(f"An unexpected error occurred processing '{filename}': {e}", exc_info=True)
                files_failed += 1
            finally:
                pbar.update(1)
    return files_processed, files_failed


def run_batch_processing():
    """Parses arguments, sets up, and runs the batch segmentation."""
    parser = argparse.ArgumentParser(
        description="StepSentence Batch: merge every SRT in a directory into sentence segments.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "-i", "--input-dir",
        required=True,
        help="Directory containing the input SRT files."
    )
    parser.add_argument(
        "-o", "--output-dir",
        default=None,
        help="Directory for the output files (defaults to the input directory)."
    )
    parser.add_argument(
        "-c", "--config",
        default="config.yaml",
        help="Path to the configuration YAML file."
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level for console and file output."
    )
    args = parser.parse_args()

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    setup_logging(log_level=log_level, log_dir='logs', log_file='stepsentence_batch_init.log')

    try:
        config = ConfigLoader().load_config(args.config)
    except (ConfigurationError, FileNotFoundError) as e:
        logger.critical(f"Failed to load configuration: {e}", exc_info=True)
        sys.exit(1)

    setup_logging_from_config(config, log_level, log_file='stepsentence_batch.log')

    try:
        formatter = get_formatter(config['output_format'])
        batch_start_time = time.time()
        logger.info(f"--- Starting batch segmentation of {args.input_dir} ---")
        files_processed, files_failed = segment_directory(args.input_dir, args.output_dir, formatter)
    except (FileNotFoundError, ValueError, FileSystemError, StepSentenceError) as e:
        logger.critical(f"Batch segmentation could not run: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Batch process interrupted by user (Ctrl+C). Exiting.")
        sys.exit(1)

    total_files = files_processed + files_failed
    logger.info(f"--- Batch Segmentation Finished in {time.time() - batch_start_time:.2f} seconds ---")
    logger.info(f"Successfully processed: {files_processed}/{total_files} files")
    logger.info(f"Failed: {files_failed}/{total_files} files")
    sys.exit(1 if files_failed > 0 else 0)


if __name__ == "__main__":
    if sys.version_info < (3, 8):
        sys.stderr.write("StepSentence requires Python 3.8 or later.\n")
        sys.exit(1)

    run_batch_processing()
