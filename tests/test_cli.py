"""Tests for the command-line entry point."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock, patch

import pytest

from video_label_batch.cli import EXIT_CONFIG, EXIT_FAILED, EXIT_OK, main
from video_label_batch.errors import AnnotationError, ErrorCategory


@pytest.fixture()
def in_tmp_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def spy_pipeline():
    """Spy on everything that could touch the filesystem or network."""
    with (
        patch("video_label_batch.cli.run_labels_file", new_callable=AsyncMock) as run,
        patch("video_label_batch.cli.update_config") as update,
        patch("video_label_batch.client.AnnotationClient.get") as get,
    ):
        yield {"run": run, "update_config": update, "get": get}


class TestNoOpInvocations:
    def test_no_arguments_prints_usage(self, in_tmp_cwd, spy_pipeline, capsys):
        assert main([]) == EXIT_OK

        out = capsys.readouterr().out
        assert "usage: video-label-batch" in out
        assert "labels-file" in out
        spy_pipeline["run"].assert_not_called()
        spy_pipeline["update_config"].assert_not_called()
        spy_pipeline["get"].assert_not_called()
        assert list(in_tmp_cwd.iterdir()) == []

    def test_unknown_command_is_silent_noop(self, in_tmp_cwd, spy_pipeline, capsys):
        assert main(["shots", str(in_tmp_cwd)]) == EXIT_OK

        assert capsys.readouterr().out == ""
        spy_pipeline["run"].assert_not_called()
        spy_pipeline["update_config"].assert_not_called()
        spy_pipeline["get"].assert_not_called()
        assert not (in_tmp_cwd / "Output.txt").exists()

    @pytest.mark.parametrize("argv", [
        ["shots", "dir", "extra"],
        ["shots", "--frames"],
        ["--output", "x.txt"],
    ])
    def test_other_commands_ignore_their_arguments(self, argv, in_tmp_cwd, spy_pipeline, capsys):
        assert main(argv) == EXIT_OK

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""
        spy_pipeline["run"].assert_not_called()
        spy_pipeline["update_config"].assert_not_called()
        assert list(in_tmp_cwd.iterdir()) == []


class TestLabelsFile:
    def test_writes_output_in_working_directory(self, in_tmp_cwd, video_dir, mock_annotate_labels):
        d = video_dir("myvideo.mp4")
        mock_annotate_labels.return_value = {"cat": 0.85, "dog": 0.90}

        assert main(["labels-file", str(d)]) == EXIT_OK

        lines = (in_tmp_cwd / "Output.txt").read_text(encoding="utf-8").splitlines()
        assert lines == ["myvideo.mp4 {dog=0.90, cat=0.85}"]

    def test_empty_directory_succeeds(self, in_tmp_cwd, mock_annotate_labels):
        empty = in_tmp_cwd / "empty"
        empty.mkdir()

        assert main(["labels-file", str(empty)]) == EXIT_OK
        assert (in_tmp_cwd / "Output.txt").read_text(encoding="utf-8") == ""

    def test_missing_directory_argument_fails(self, in_tmp_cwd, mock_annotate_labels):
        assert main(["labels-file"]) == EXIT_FAILED
        mock_annotate_labels.assert_not_awaited()

    def test_nonexistent_directory_fails(self, in_tmp_cwd, mock_annotate_labels):
        assert main(["labels-file", str(in_tmp_cwd / "missing")]) == EXIT_FAILED
        assert not (in_tmp_cwd / "Output.txt").exists()

    def test_remote_failure_aborts_with_nonzero_exit(self, in_tmp_cwd, video_dir, mock_annotate_labels):
        d = video_dir("a.mp4", "b.mp4")
        mock_annotate_labels.side_effect = AnnotationError(
            "Label detection failed: 403", category=ErrorCategory.API_PERMISSION_DENIED,
        )

        assert main(["labels-file", str(d)]) == EXIT_FAILED
        assert mock_annotate_labels.await_count == 1
        assert (in_tmp_cwd / "Output.txt").read_text(encoding="utf-8") == ""

    def test_keep_going_continues_but_reports_failure(self, in_tmp_cwd, video_dir, mock_annotate_labels):
        d = video_dir("a.mp4", "b.mp4")
        mock_annotate_labels.side_effect = [
            AnnotationError("Label detection failed: quota", category=ErrorCategory.API_QUOTA_EXCEEDED),
            {"tree": 0.3},
        ]

        assert main(["labels-file", str(d), "--keep-going"]) == EXIT_FAILED

        lines = (in_tmp_cwd / "Output.txt").read_text(encoding="utf-8").splitlines()
        assert lines == ["b.mp4 {tree=0.30}"]

    def test_unexpected_error_is_reported(self, in_tmp_cwd, video_dir, mock_annotate_labels):
        d = video_dir("a.mp4")
        mock_annotate_labels.side_effect = RuntimeError("unexpected")

        assert main(["labels-file", str(d)]) == EXIT_FAILED

    def test_options_override_config(self, in_tmp_cwd, video_dir, mock_annotate_labels):
        d = video_dir("a.mp4")
        mock_annotate_labels.return_value = {"b": 0.5, "a": 0.5, "c": 0.25}
        out = in_tmp_cwd / "logs" / "labels.txt"

        code = main([
            "labels-file", str(d),
            "--output", str(out),
            "--timeout", "30",
            "--aggregation", "max",
            "--tie-break", "label",
            "--digits", "3",
        ])

        assert code == EXIT_OK
        assert out.read_text(encoding="utf-8") == "a.mp4 {a=0.500, b=0.500, c=0.250}\n"
        assert mock_annotate_labels.await_args.kwargs == {"timeout": 30.0, "aggregation": "max"}

    def test_invalid_option_value(self, in_tmp_cwd, video_dir, mock_annotate_labels, capsys):
        d = video_dir("a.mp4")

        assert main(["labels-file", str(d), "--digits", "9"]) == EXIT_CONFIG
        err = capsys.readouterr().err
        assert "Invalid configuration [CONFIG_INVALID]" in err
        assert "VIDEO_LABELS_" in err
        mock_annotate_labels.assert_not_awaited()

    def test_invalid_env_value(self, in_tmp_cwd, video_dir, mock_annotate_labels, monkeypatch):
        monkeypatch.setenv("VIDEO_LABELS_TIMEOUT", "soon")
        d = video_dir("a.mp4")

        assert main(["labels-file", str(d)]) == EXIT_CONFIG

    def test_closes_client_after_run(self, in_tmp_cwd, video_dir, mock_annotate_labels):
        d = video_dir("a.mp4")
        with patch(
            "video_label_batch.client.AnnotationClient.close_all", new_callable=AsyncMock,
        ) as close_all:
            main(["labels-file", str(d)])
        close_all.assert_awaited_once()

    def test_reports_vars_loaded_from_env_file(self, in_tmp_cwd, video_dir, mock_annotate_labels, monkeypatch, caplog):
        env_file = in_tmp_cwd / "labels.env"
        env_file.write_text("VIDEO_LABELS_DIGITS=3\n")
        monkeypatch.setattr("video_label_batch.dotenv.DEFAULT_ENV_PATH", env_file)
        monkeypatch.setenv("VIDEO_LABELS_DIGITS", "")
        d = video_dir("a.mp4")
        mock_annotate_labels.return_value = {"sky": 0.5}

        with caplog.at_level(logging.INFO, logger="video_label_batch"):
            assert main(["labels-file", str(d)]) == EXIT_OK

        assert "Loaded 1 var(s) from config: VIDEO_LABELS_DIGITS" in caplog.text
        assert (in_tmp_cwd / "Output.txt").read_text(encoding="utf-8") == "a.mp4 {sky=0.500}\n"
