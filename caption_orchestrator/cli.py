"""Command-line interface for the caption orchestrator.

WHY: Editors and batch scripts need captions for transcriptions they
already have on disk, without running the API. The CLI wires together the
whole flow (transcription parsing, caption generation, pluggable formatter
output, and file saving) behind a single command.

HOW: Uses argparse to accept a transcription JSON file (or ``-`` for stdin),
caption option overrides, output format selection, and output directory.
Starts from the environment defaults (config.load_default_options), applies
the flags, runs generate_captions(), and saves every selected formatter's
output next to the input (or to --output-dir). Status messages go to
stderr.

RULES:
- Positional argument: transcription JSON path, or "-" for stdin
- --formats: comma-separated formatter keys (default: all registered)
- Output naming: {stem}{suffix}, numeric suffix for conflicts
  (-captions-2.srt); stdin input uses the stem "captions"
- Status output goes to stderr (not stdout)
- Exit code 0 on success, 1 on any error
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from caption_chunker.models import GenerationOptions
from caption_orchestrator.adapters import InvalidTranscriptionError, parse_transcription
from caption_orchestrator.config import LOG_LEVEL, OUTPUT_STEM, load_default_options
from caption_orchestrator.core.pipeline import generate_captions
from caption_orchestrator.formatters import FORMATTERS, create_formatter
from caption_orchestrator.formatters.base import FormatterOutput


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    WHY: Users may regenerate captions for the same transcription several
    times while tuning options. Overwriting previous output would lose
    work.

    RULES:
    - First attempt: {stem}{suffix} (e.g. interview-captions.srt)
    - Conflict: split suffix at last dot, insert counter before extension
      (e.g. interview-captions-2.srt)
    - Counter starts at 2 and increments

    Returns:
        A Path that does not yet exist.
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    # e.g. "-captions.srt" → ("-captions", ".srt")
    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    """Save a single formatter output to disk as UTF-8 text."""
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _read_input(source: str) -> Any:
    """Load the transcription JSON from a path or from stdin ("-")."""
    if source == "-":
        raw = sys.stdin.read()
    else:
        path = Path(source)
        if not path.is_file():
            raise FileNotFoundError("File not found: {}".format(path.resolve()))
        raw = path.read_text(encoding="utf-8")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidTranscriptionError("Input is not valid JSON: {}".format(exc)) from exc


def _parse_formats(formats: Optional[str]) -> List[str]:
    if not formats:
        return list(FORMATTERS.keys())
    keys = [f.strip() for f in formats.split(",") if f.strip()]
    for key in keys:
        if key not in FORMATTERS:
            available = ", ".join(sorted(FORMATTERS.keys()))
            raise ValueError(
                "Unknown format '{}'. Available formats: {}".format(key, available)
            )
    return keys


def build_options(args: argparse.Namespace) -> GenerationOptions:
    """Apply command-line overrides to the environment defaults.

    Raises:
        ValueError: If the environment or the flags give invalid options.
    """
    overrides = {}  # type: Dict[str, Any]
    if args.max_words is not None:
        overrides["max_words_per_chunk"] = args.max_words
    if args.min_duration is not None:
        overrides["min_chunk_duration"] = args.min_duration
    if args.max_duration is not None:
        overrides["max_chunk_duration"] = args.max_duration
    if args.frame_rate is not None:
        overrides["frame_rate"] = args.frame_rate
    if args.max_chars is not None:
        overrides["max_chars_per_line"] = args.max_chars
    if args.audio_duration is not None:
        overrides["audio_duration"] = args.audio_duration
    if args.prevent_overlap:
        overrides["prevent_overlap"] = True
    return dataclasses.replace(load_default_options(), **overrides)


def _run(args: argparse.Namespace) -> None:
    """Execute the caption generation flow for parsed arguments."""
    if args.input_file == "-":
        stem = OUTPUT_STEM
        default_dir = Path.cwd()
    else:
        input_path = Path(args.input_file).resolve()
        stem = input_path.stem
        default_dir = input_path.parent

    output_dir = Path(args.output_dir).resolve() if args.output_dir else default_dir
    if not output_dir.is_dir():
        _fail("Output directory does not exist: {}".format(output_dir))

    try:
        format_keys = _parse_formats(args.formats)
        options = build_options(args)
        _status("Reading transcription...")
        analysis = parse_transcription(_read_input(args.input_file))
    except (OSError, ValueError) as exc:
        _fail(str(exc))

    _status("  {} segments, {} words".format(len(analysis.segments), analysis.word_count))

    _status("Generating captions...")
    response = generate_captions(analysis, options)
    if not response.success:
        _fail(response.error or "Caption generation failed")

    metrics = response.quality_metrics
    _status("  {} chunks, {:.2f} words/chunk over {:.2f}s".format(
        response.total_chunks, response.avg_words_per_chunk, response.total_duration
    ))
    _status("  Quality: confidence {:.2f}, timing {:.2f}, readability {:.2f}".format(
        metrics.avg_confidence, metrics.timing_precision, metrics.readability_score
    ))

    _status("Formatting output...")
    saved_files = []  # type: List[Path]
    for key in format_keys:
        formatter = create_formatter(key, frame_rate=options.frame_rate)
        for output in formatter.format(response):
            saved_path = _save_output(output, stem, output_dir)
            saved_files.append(saved_path)
            _status("  Saved: {}".format(saved_path.name))

    _status("")
    _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable; tests can inspect the parser without running the pipeline.

    RULES:
    - Positional: input_file (required, "-" for stdin)
    - Option flags default to None so unset flags keep environment defaults
    """
    parser = argparse.ArgumentParser(
        prog="caption_orchestrator",
        description="Generate frame-aligned captions from word-level "
                    "transcription timings (timeline track items, SRT, JSON).",
    )

    parser.add_argument(
        "input_file",
        help="Path to a transcription JSON file, or '-' to read stdin.",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )
    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )
    parser.add_argument(
        "--max-words",
        type=int,
        default=None,
        help="Maximum words per caption chunk.",
    )
    parser.add_argument(
        "--min-duration",
        type=float,
        default=None,
        help="Minimum chunk display duration in seconds.",
    )
    parser.add_argument(
        "--max-duration",
        type=float,
        default=None,
        help="Chunk span in seconds that forces a break.",
    )
    parser.add_argument(
        "--frame-rate",
        type=float,
        default=None,
        help="Video frame rate that chunk boundaries are aligned to.",
    )
    parser.add_argument(
        "--max-chars",
        type=int,
        default=None,
        help="Maximum characters per caption line.",
    )
    parser.add_argument(
        "--audio-duration",
        type=float,
        default=None,
        help="Known audio duration in seconds (hard ceiling for chunk ends).",
    )
    parser.add_argument(
        "--prevent-overlap",
        action="store_true",
        help="Stop minimum-duration extensions at the next word's start.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    _run(args)


if __name__ == "__main__":
    main()
