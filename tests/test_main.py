"""Tests for main CLI module."""

import io
import json
import sys
from unittest.mock import patch

import pytest

from basicdiff.config import DiffConfig
from basicdiff.errors import DiffCommandFailedError
from basicdiff.main import (
    create_config,
    create_parser,
    main,
    process_diff,
    read_diff_text,
    validate_args,
)

from diff_samples import MODIFIED_DIFF


class TestCLI:
    """Test CLI functionality."""

    def test_create_parser_defaults(self):
        """Test argument parser creation."""
        args = create_parser().parse_args([])

        assert args.refs == []
        assert args.commits is None
        assert args.staged is False
        assert args.color == "never"
        assert args.unified is None
        assert args.no_context is False
        assert args.workers == 4
        assert args.input is None
        assert args.output is None

    def test_create_parser_with_optional_args(self):
        """Test parser with optional arguments."""
        args = create_parser().parse_args([
            "main", "topic",
            "--cached",
            "--word-diff",
            "--color", "always",
            "-U", "5",
            "--context-radius", "7",
            "--file-id-seed", "seed",
            "--strict",
            "--detect-mode-changes",
            "-o", "out.json",
            "-q",
        ])

        assert args.refs == ["main", "topic"]
        assert args.staged is True
        assert args.word_diff is True
        assert args.color == "always"
        assert args.unified == 5
        assert args.context_radius == 7
        assert args.file_id_seed == "seed"
        assert args.strict is True
        assert args.detect_mode_changes is True
        assert args.output == "out.json"
        assert args.quiet is True

    def test_invalid_color_rejected(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--color", "rainbow"])

    @pytest.mark.parametrize(
        "argv,message",
        [
            (["a", "b", "c"], "at most two refs"),
            (["-U", "-1"], "--unified cannot be negative"),
            (["--context-radius", "-1"], "--context-radius cannot be negative"),
            (["--workers", "0"], "--workers must be positive"),
        ],
    )
    def test_validate_args_invalid(self, argv, message):
        """Test argument validation failures."""
        args = create_parser().parse_args(argv)
        with pytest.raises(ValueError, match=message):
            validate_args(args)

    def test_create_config(self):
        """Test config creation from args."""
        args = create_parser().parse_args([
            "--commits", "abc123..def456",
            "--no-context",
            "--input", "changes.patch",
        ])

        config = create_config(args)

        assert config.commits_range == "abc123..def456"
        assert config.effective_radius == 0
        assert config.input_path == "changes.patch"
        assert config.cwd is not None


class TestReadDiffText:
    """Test where the diff text comes from."""

    def test_input_file(self, temp_dir):
        patch_file = temp_dir / "changes.patch"
        patch_file.write_text("\x1b[32m+x\x1b[m\n", encoding="utf-8")
        config = DiffConfig(input_path=str(patch_file))
        assert read_diff_text(config, io.StringIO("")) == "+x\n"

    def test_dash_reads_stdin(self):
        config = DiffConfig(input_path="-")
        assert read_diff_text(config, io.StringIO(MODIFIED_DIFF)) == MODIFIED_DIFF

    def test_piped_stdin(self):
        assert read_diff_text(DiffConfig(), io.StringIO(MODIFIED_DIFF)) == MODIFIED_DIFF

    def test_empty_stdin_runs_git(self):
        assert read_diff_text(DiffConfig(), io.StringIO("  \n")) is None


class TestProcessDiff:
    """Test the parse pipeline without a git binary."""

    def test_parses_given_text(self):
        config = DiffConfig(no_context=True, cwd="/tmp")
        payload = process_diff(config, MODIFIED_DIFF)

        assert payload["totals"]["additions"] == 2
        assert payload["meta"]["tool"]["name"] == "basicdiff"
        assert payload["meta"]["git"]["context_radius"] == 0
        assert len(payload["meta"]["checksum"]) == 64

    @patch("basicdiff.main.GitClient.run_diff")
    def test_runs_git_without_text(self, mock_run_diff):
        mock_run_diff.return_value = MODIFIED_DIFF
        payload = process_diff(DiffConfig(no_context=True))

        mock_run_diff.assert_called_once()
        assert payload["files"][0]["path_new"] == "src/app.py"


class TestMain:
    """Test the entry point envelopes and exit codes."""

    @patch("basicdiff.main.process_diff")
    def test_main_success(self, mock_process_diff, capsys):
        """Test successful main execution."""
        mock_process_diff.return_value = {"meta": {"checksum": "test123"}, "files": []}

        with patch.object(sys, "argv", ["basicdiff"]), patch.object(sys, "stdin", io.StringIO("")):
            exit_code = main()

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["ok"] is True
        assert output["data"]["meta"]["checksum"] == "test123"

    def test_main_with_input_file(self, temp_dir):
        patch_file = temp_dir / "changes.patch"
        patch_file.write_text(MODIFIED_DIFF, encoding="utf-8")
        output_file = temp_dir / "out" / "doc.json"
        argv = ["basicdiff", "--input", str(patch_file), "--no-context", "-o", str(output_file)]

        with patch.object(sys, "argv", argv):
            exit_code = main()

        assert exit_code == 0
        result = json.loads(output_file.read_text(encoding="utf-8"))
        assert result["ok"] is True
        assert result["data"]["files"][0]["hunks"][0]["raw_header"] == (
            "@@ -10,3 +10,4 @@ def main():"
        )

    @patch("basicdiff.main.process_diff")
    def test_main_known_error(self, mock_process_diff, capsys):
        mock_process_diff.side_effect = DiffCommandFailedError(
            ["git", "diff", "nope"], 128, "fatal: bad revision 'nope'\n"
        )

        with patch.object(sys, "argv", ["basicdiff", "nope"]), patch.object(
            sys, "stdin", io.StringIO("")
        ):
            exit_code = main()

        assert exit_code == 1
        captured = capsys.readouterr()
        output = json.loads(captured.out)
        assert output["ok"] is False
        assert output["error"]["code"] == "DIFF_COMMAND_FAILED"
        assert output["error"]["details"]["returncode"] == 128
        assert "Error: fatal: bad revision" in captured.err

    @patch("basicdiff.main.validate_args")
    def test_main_validation_error(self, mock_validate, capsys):
        """Test main with validation error."""
        mock_validate.side_effect = ValueError("Invalid argument")

        with patch.object(sys, "argv", ["basicdiff", "-q"]):
            exit_code = main()

        assert exit_code == 1
        captured = capsys.readouterr()
        output = json.loads(captured.out)
        assert output["ok"] is False
        assert output["error"]["code"] == "INTERNAL_ERROR"
        assert "Error:" not in captured.err
