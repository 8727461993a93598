"""Main CLI entry point for the basic diff tool."""

import argparse
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from . import __version__
from .config import COLOR_MODES, DiffConfig
from .context import ContextEnricher
from .errors import BasicDiffError
from .logging_utils import configure_logging
from .parser import UnifiedDiffParser
from .scanner import strip_ansi
from .serialize import DeterministicSerializer
from .settings import get_default_context_radius
from .vcs import GitClient


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="basicdiff",
        description="Parse a unified git diff into a deterministic JSON document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  basicdiff --output out/basic-diff.json
  basicdiff --commits abc123..def456 -o out/range.json
  basicdiff --staged -o out/staged.json
  git diff | basicdiff -o out/piped.json
  basicdiff --input changes.patch --no-context
        """,
    )

    # Diff selection
    parser.add_argument(
        "refs",
        nargs="*",
        help="Optional base and head refs (base..head)",
    )
    parser.add_argument(
        "--commits",
        help="Commit range like a..b (overrides positional refs)",
    )
    parser.add_argument(
        "--staged",
        "--cached",
        action="store_true",
        help="Show only staged changes vs HEAD",
    )
    parser.add_argument(
        "--name-only",
        action="store_true",
        help="Pass --name-only to git diff",
    )
    parser.add_argument(
        "--word-diff",
        action="store_true",
        help="Pass --word-diff to git diff (not parsed for intra-line spans)",
    )
    parser.add_argument(
        "--stat",
        action="store_true",
        help="Pass --stat to git diff",
    )
    parser.add_argument(
        "--color",
        default="never",
        choices=COLOR_MODES,
        help="Color mode passed to git; ANSI codes are stripped (default: never)",
    )
    parser.add_argument(
        "-U",
        "--unified",
        type=int,
        help="Number of context lines; git default when omitted",
    )

    # Parsing
    parser.add_argument(
        "--file-id-seed",
        default="",
        help="Extra seed mixed into every file id",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on unexpected lines inside hunks instead of treating them as context",
    )
    parser.add_argument(
        "--detect-mode-changes",
        action="store_true",
        help="Report mode-only and file-type changes as modeChanged/typeChanged",
    )

    # Context enrichment
    parser.add_argument(
        "--context-radius",
        type=int,
        default=get_default_context_radius(),
        help="Context lines to attach around hunks, 0 to disable (default: %(default)s)",
    )
    parser.add_argument(
        "--no-context",
        action="store_true",
        help="Disable code context attachment to hunks",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=4,
        help="Parallel context lookups (default: 4)",
    )

    # Input / output
    parser.add_argument(
        "--input",
        help="Read diff text from a file ('-' for stdin) instead of running git",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Write JSON to file instead of stdout",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-essential error output",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command line arguments."""
    if len(args.refs) > 2:
        raise ValueError("at most two refs may be given")
    if args.unified is not None and args.unified < 0:
        raise ValueError("--unified cannot be negative")
    if args.context_radius < 0:
        raise ValueError("--context-radius cannot be negative")
    if args.workers <= 0:
        raise ValueError("--workers must be positive")


def create_config(args: argparse.Namespace) -> DiffConfig:
    """Create configuration from command line arguments."""
    return DiffConfig.from_env(
        refs=tuple(args.refs),
        commits_range=args.commits,
        staged=args.staged,
        unified_context=args.unified,
        color_mode=args.color,
        word_diff=args.word_diff,
        name_only=args.name_only,
        stat=args.stat,
        file_id_seed=args.file_id_seed,
        strict=args.strict,
        detect_mode_changes=args.detect_mode_changes,
        context_radius=args.context_radius,
        no_context=args.no_context,
        max_workers=args.workers,
        input_path=args.input,
        output_path=args.output,
        cwd=os.getcwd(),
    )


def read_diff_text(config: DiffConfig, stdin: TextIO) -> Optional[str]:
    """Diff text supplied by the caller, or ``None`` when git should be run."""
    if config.input_path == "-":
        return strip_ansi(stdin.read())
    if config.input_path:
        return strip_ansi(Path(config.input_path).read_text(encoding="utf-8"))
    if not stdin.isatty():
        piped = stdin.read()
        if piped.strip():
            return strip_ansi(piped)
    return None


def build_meta(config: DiffConfig) -> Dict[str, Any]:
    """Provenance recorded in ``meta``."""
    return {
        "created_at": datetime.now(timezone.utc).isoformat(),
        "tool": {"name": "basicdiff", "version": __version__},
        "cwd": config.cwd,
        "git": config.to_meta_dict(),
    }


def process_diff(config: DiffConfig, diff_text: Optional[str] = None) -> dict:
    """Parse (and optionally enrich) a diff and return the serialized document."""
    client = GitClient(config)
    if diff_text is None:
        diff_text = client.run_diff()

    parser = UnifiedDiffParser(
        file_id_seed=config.file_id_seed,
        strict=config.strict,
        detect_mode_changes=config.detect_mode_changes,
    )
    document = parser.parse(diff_text, meta=build_meta(config))

    if config.effective_radius > 0:
        enricher = ContextEnricher(
            client,
            radius=config.effective_radius,
            base_ref=config.base_ref,
            head_ref=config.head_ref,
            max_workers=config.max_workers,
        )
        document = enricher.enrich(document)

    serializer = DeterministicSerializer()
    return serializer.serialize_document(document)


def output_result(result: dict, output_path: Optional[str]) -> None:
    """Output result to stdout or file."""
    json_str = DeterministicSerializer().to_json_string(result)

    if output_path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json_str, encoding="utf-8")
    else:
        print(json_str)


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()
    configure_logging(quiet=args.quiet)
    serializer = DeterministicSerializer()

    try:
        validate_args(args)
        config = create_config(args)

        diff_text = read_diff_text(config, sys.stdin)
        payload = process_diff(config, diff_text)

        result = serializer.create_success_envelope(payload)
        output_result(result, args.output)
        return 0

    except BasicDiffError as e:
        result = serializer.create_error_envelope(e.code, e.message, e.details)
        output_result(result, args.output)
        if not args.quiet:
            sys.stderr.write(f"Error: {e.message}\n")
        return 1

    except Exception as e:
        result = serializer.create_error_envelope(
            "INTERNAL_ERROR",
            f"Internal error: {str(e)}",
            {"type": type(e).__name__},
        )
        output_result(result, args.output)
        if not args.quiet:
            sys.stderr.write(f"Error: {e}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())
