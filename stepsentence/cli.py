"""Command-Line Interface handler for StepSentence."""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .config_loader import ConfigLoader
from .log_setup import setup_logging, setup_logging_from_config
from .audio_store import AudioFileStore
from .audio_composer import AudioComposer
from .project_store import JsonProjectStore
from .project_builder import ProjectBuilder
from .models import SentenceStatus
from .segment_merger import merge_cues_to_segments
from .subtitle_parser import parse_srt_file
from .subtitle_formatter import get_formatter
from .utils import format_time_srt
from .exceptions import StepSentenceError, ConfigurationError

logger = logging.getLogger(__name__) # Get logger for this module

DEFAULT_CONFIG_PATH = "config.yaml"

class CLIHandler:
    """Parses arguments and dispatches StepSentence commands."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Creates the argument parser for the CLI."""
        parser = argparse.ArgumentParser(
            description="StepSentence: practise a text sentence by sentence, from plain text or an MP3 + SRT pair.",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter
        )
        parser.add_argument(
            "-c", "--config",
            default=DEFAULT_CONFIG_PATH,
            help="Path to the configuration YAML file."
        )
        parser.add_argument(
            "--storage-dir",
            default=None, # Default taken from config file
            help="Override the storage directory specified in the config file."
        )
        parser.add_argument(
            "--log-level",
            default="INFO",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Set the logging level for console and file output."
        )

        subparsers = parser.add_subparsers(dest="command", required=True)

        segment = subparsers.add_parser("segment", help="Merge an SRT file into sentence segments.")
        segment.add_argument("srt", help="Path to the SRT file.")
        segment.add_argument("-o", "--output", default=None, help="Write the segments to this file instead of stdout.")
        segment.add_argument("--format", default=None, choices=["srt", "json"], help="Override the output format from config.")

        create_text = subparsers.add_parser("create-text", help="Create a project from text.")
        create_text.add_argument("--title", required=True, help="Project title.")
        source = create_text.add_mutually_exclusive_group(required=True)
        source.add_argument("--text", help="Text to practise.")
        source.add_argument("--text-file", help="UTF-8 file holding the text to practise.")

        create_file = subparsers.add_parser("create-file", help="Create a time-aligned project from an MP3 and its SRT.")
        create_file.add_argument("--audio", required=True, help="Path to the source MP3.")
        create_file.add_argument("--srt", required=True, help="Path to the SRT file.")
        create_file.add_argument("--title", default=None, help="Project title (defaults to the MP3 name).")

        subparsers.add_parser("list", help="List stored projects.")

        delete = subparsers.add_parser("delete", help="Delete a project with its sentences and recordings.")
        delete.add_argument("project_id", help="Project id.")

        record = subparsers.add_parser("record", help="Attach a recording to a sentence.")
        record.add_argument("project_id", help="Project id.")
        record.add_argument("order", type=int, help="Sentence order (0-based).")
        record.add_argument("recording", help="Path to the recorded audio file.")

        approve = subparsers.add_parser("approve", help="Mark a sentence as approved.")
        approve.add_argument("project_id", help="Project id.")
        approve.add_argument("order", type=int, help="Sentence order (0-based).")

        reset = subparsers.add_parser("reset", help="Delete a sentence's recording and mark it not started.")
        reset.add_argument("project_id", help="Project id.")
        reset.add_argument("order", type=int, help="Sentence order (0-based).")

        clip = subparsers.add_parser("clip", help="Cut the reference audio of a time-aligned sentence.")
        clip.add_argument("project_id", help="Project id.")
        clip.add_argument("order", type=int, help="Sentence order (0-based).")
        clip.add_argument("-o", "--output", required=True, help="Output audio path.")

        export = subparsers.add_parser("export", help="Stitch all sentence recordings into one file.")
        export.add_argument("project_id", help="Project id.")
        export.add_argument("-o", "--output", required=True, help="Output .m4a path.")

        return parser

    def _load_config(self, config_path: str) -> dict:
        config_loader = ConfigLoader()
        if config_path == DEFAULT_CONFIG_PATH and not os.path.exists(config_path):
            logger.warning(f"No {DEFAULT_CONFIG_PATH} found, using built-in defaults.")
            return config_loader.defaults()
        return config_loader.load_config(config_path)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Parses arguments, sets up logging, loads config, and runs the command."""
        args = self.parser.parse_args(argv)

        log_level = getattr(logging, args.log_level.upper(), logging.INFO)
        setup_logging(log_level=log_level, log_dir='logs', log_file='stepsentence_init.log')

        # --- Load Configuration ---
        try:
            config = self._load_config(args.config)
        except ConfigurationError as e:
            logger.critical(f"Failed to load configuration from {args.config}: {e}", exc_info=True)
            sys.exit(1)
        except FileNotFoundError:
            logger.critical(f"Configuration file not found: {args.config}", exc_info=True)
            sys.exit(1)

        setup_logging_from_config(config, log_level)

        if args.storage_dir:
            logger.info(f"Overriding storage_dir from config with CLI argument: {args.storage_dir}")
            config['storage_dir'] = args.storage_dir

        try:
            handler = getattr(self, "_cmd_" + args.command.replace("-", "_"))
            handler(args, config)
            sys.exit(0)
        except StepSentenceError as e:
            logger.error(f"A StepSentence error occurred: {e}")
            sys.exit(1)
        except FileNotFoundError as e:
            logger.error(str(e))
            sys.exit(1)
        except KeyboardInterrupt:
            logger.warning("Process interrupted by user (Ctrl+C). Exiting.")
            sys.exit(1)
        except Exception as e:
            logger.critical(f"An unexpected critical error occurred at the top level: {e}", exc_info=True)
            sys.exit(2)

    # --- Commands ---

    def _stores(self, config: dict):
        audio_store = AudioFileStore(config['storage_dir'])
        project_store = JsonProjectStore(config['storage_dir'], audio_store=audio_store)
        return audio_store, project_store

    def _sentence(self, project, order: int):
        try:
            return project.sentence_at(order)
        except KeyError as e:
            raise StepSentenceError(f"Project {project.id} has no sentence {order}") from e

    def _cmd_segment(self, args, config: dict) -> None:
        # Read-only: no storage is touched
        segments = merge_cues_to_segments(parse_srt_file(args.srt))
        if args.output:
            formatter = get_formatter(args.format or config['output_format'])
            formatter.format_segments(segments, args.output)
            return
        for segment in segments:
            print(f"[{format_time_srt(segment.start)} --> {format_time_srt(segment.end)}] {segment.text}")

    def _cmd_create_text(self, args, config: dict) -> None:
        if args.text_file:
            with open(args.text_file, 'r', encoding='utf-8') as f:
                body_text = f.read()
        else:
            body_text = args.text
        audio_store, project_store = self._stores(config)
        project = ProjectBuilder(project_store, audio_store).create_text_project(args.title, body_text)
        print(project.id)

    def _cmd_create_file(self, args, config: dict) -> None:
        audio_store, project_store = self._stores(config)
        project = ProjectBuilder(project_store, audio_store).create_file_project(args.audio, args.srt, title=args.title)
        print(project.id)

    def _cmd_list(self, args, config: dict) -> None:
        _, project_store = self._stores(config)
        for project in project_store.list_projects():
            print(f"{project.id}\t{project.completed_count}/{project.total_count}\t{project.title}")

    def _cmd_delete(self, args, config: dict) -> None:
        _, project_store = self._stores(config)
        project_store.delete(args.project_id)

    def _cmd_record(self, args, config: dict) -> None:
        audio_store, project_store = self._stores(config)
        project = project_store.load(args.project_id)
        sentence = self._sentence(project, args.order)
        audio_store.attach_recording(project, sentence, args.recording)
        project_store.save(project)

    def _cmd_approve(self, args, config: dict) -> None:
        _, project_store = self._stores(config)
        project = project_store.load(args.project_id)
        sentence = self._sentence(project, args.order)
        sentence.status = SentenceStatus.APPROVED
        project_store.save(project)
        logger.info(f"Approved sentence {args.order} of project {project.id}")
        print(f"{project.completed_count}/{project.total_count}")

    def _cmd_reset(self, args, config: dict) -> None:
        audio_store, project_store = self._stores(config)
        project = project_store.load(args.project_id)
        sentence = self._sentence(project, args.order)
        audio_store.reset_recording(project, sentence)
        project_store.save(project)

    def _cmd_clip(self, args, config: dict) -> None:
        audio_store, project_store = self._stores(config)
        project = project_store.load(args.project_id)
        sentence = self._sentence(project, args.order)
        if not sentence.has_timing or not audio_store.exists(project.source_audio_file_name):
            raise StepSentenceError(f"Sentence {args.order} of project {project.id} has no source audio span.")
        composer = AudioComposer(ffmpeg_path=config.get('ffmpeg_path'))
        composer.extract_reference_clip(
            audio_store.absolute_path(project.source_audio_file_name),
            sentence.start_time_sec,
            sentence.end_time_sec,
            args.output
        )
        print(args.output)

    def _cmd_export(self, args, config: dict) -> None:
        audio_store, project_store = self._stores(config)
        project = project_store.load(args.project_id)
        composer = AudioComposer(ffmpeg_path=config.get('ffmpeg_path'))
        composer.compose_project(
            project,
            audio_store,
            args.output,
            gap_seconds=config['sentence_gap_seconds']
        )
        print(args.output)


def main() -> None:
    """Console script entry point."""
    CLIHandler().run()
