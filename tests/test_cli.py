"""Unit tests for the pys3sync CLI commands."""

import json
from unittest.mock import Mock, patch

import pytest
from click.testing import CliRunner

from pys3sync.cli import main
from pys3sync.config import S3Config
from pys3sync.exceptions import (
    S3SyncConfigError,
    S3SyncIOError,
    S3SyncPermissionError,
)

STATS = {
    "local_files": 3,
    "remote_files": 2,
    "uploads": 1,
    "deletes": 1,
    "unchanged": 2,
    "upload_bytes": 2048,
}


@pytest.fixture
def runner():
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def mock_load_config():
    """Mock config loading with no bucket configured."""
    with patch("pys3sync.cli.load_config") as mock:
        mock.return_value = S3Config()
        yield mock


@pytest.fixture
def mock_engine_class():
    """Mock the sync engine and the client it is built with."""
    with patch("pys3sync.cli.S3Client"), patch("pys3sync.cli.SyncEngine") as mock:
        engine = Mock()
        engine.sync_pair.return_value = dict(STATS)
        mock.return_value = engine
        yield mock


class TestMainGroup:
    """Tests for the main CLI group."""

    def test_main_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "push" in result.output
        assert "--bucket" in result.output
        assert "--endpoint-url" in result.output

    def test_push_help(self, runner):
        result = runner.invoke(main, ["push", "--help"])
        assert result.exit_code == 0
        assert "--dry-run" in result.output


class TestPushCommand:
    """Tests for the push command."""

    def test_push_bucket_in_location(
        self, runner, mock_load_config, mock_engine_class, tmp_path
    ):
        result = runner.invoke(main, ["push", str(tmp_path), "my-bucket/www"])

        assert result.exit_code == 0, result.output
        assert "Bucket: my-bucket" in result.output
        assert "Prefix: www/" in result.output
        engine = mock_engine_class.return_value
        pair = engine.sync_pair.call_args.args[0]
        assert pair.bucket == "my-bucket"
        assert pair.prefix == "www/"
        assert pair.local == tmp_path
        assert engine.sync_pair.call_args.kwargs == {"dry_run": False}

    def test_push_configured_bucket(
        self, runner, mock_load_config, mock_engine_class, tmp_path
    ):
        mock_load_config.return_value = S3Config(bucket="cfg-bucket")

        result = runner.invoke(main, ["push", str(tmp_path), "www"])

        assert result.exit_code == 0, result.output
        pair = mock_engine_class.return_value.sync_pair.call_args.args[0]
        assert pair.bucket == "cfg-bucket"
        assert pair.prefix == "www/"

    def test_bucket_from_dotenv_in_working_directory(self, runner, mock_engine_class):
        with runner.isolated_filesystem():
            with open(".env", "w") as f:
                f.write("AWS_BUCKET=from-cwd-env\n")

            result = runner.invoke(
                main,
                ["push", ".", "www", "--dry-run"],
                env={"AWS_BUCKET": None},
            )

        assert result.exit_code == 0, result.output
        assert "Bucket: from-cwd-env" in result.output
        pair = mock_engine_class.return_value.sync_pair.call_args.args[0]
        assert pair.bucket == "from-cwd-env"
        assert pair.prefix == "www/"

    def test_global_options_become_overrides(
        self, runner, mock_load_config, mock_engine_class, tmp_path
    ):
        result = runner.invoke(
            main,
            [
                "--bucket",
                "b",
                "--region",
                "eu-west-1",
                "--endpoint-url",
                "http://localhost:9000",
                "push",
                str(tmp_path),
                "p",
            ],
        )

        assert result.exit_code == 0, result.output
        mock_load_config.assert_called_once_with(
            None,
            bucket="b",
            region="eu-west-1",
            endpoint_url="http://localhost:9000",
            profile=None,
        )

    def test_dry_run_flag(self, runner, mock_load_config, mock_engine_class, tmp_path):
        result = runner.invoke(main, ["push", str(tmp_path), "b/p", "--dry-run"])

        assert result.exit_code == 0
        kwargs = mock_engine_class.return_value.sync_pair.call_args.kwargs
        assert kwargs == {"dry_run": True}

    def test_json_output(self, runner, mock_load_config, mock_engine_class, tmp_path):
        mock_load_config.return_value = S3Config(endpoint_url="http://minio:9000")

        result = runner.invoke(main, ["--json", "push", str(tmp_path), "b/p"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["bucket"] == "b"
        assert data["prefix"] == "p/"
        assert data["dry_run"] is False
        assert data["uploads"] == 1
        assert data["deletes"] == 1

    def test_quiet_suppresses_output(
        self, runner, mock_load_config, mock_engine_class, tmp_path
    ):
        result = runner.invoke(main, ["--quiet", "push", str(tmp_path), "b/p"])

        assert result.exit_code == 0
        assert result.output == ""

    def test_missing_bucket(self, runner, mock_load_config, mock_engine_class, tmp_path):
        result = runner.invoke(main, ["push", str(tmp_path), "/"])

        assert result.exit_code == 1
        assert "Configuration error" in result.output
        mock_engine_class.return_value.sync_pair.assert_not_called()

    @pytest.mark.parametrize(
        "error,label",
        [
            (S3SyncConfigError("Local directory does not exist: x"), "Configuration"),
            (S3SyncIOError("Cannot read file x"), "Local file error"),
            (S3SyncPermissionError("put k failed: AccessDenied"), "Storage error"),
            (RuntimeError("kaput"), "Unexpected error"),
        ],
    )
    def test_engine_errors_exit_nonzero(
        self, runner, mock_load_config, mock_engine_class, tmp_path, error, label
    ):
        mock_engine_class.return_value.sync_pair.side_effect = error

        result = runner.invoke(main, ["push", str(tmp_path), "b/p"])

        assert result.exit_code == 1
        assert label in result.output

    def test_keyboard_interrupt(
        self, runner, mock_load_config, mock_engine_class, tmp_path
    ):
        mock_engine_class.return_value.sync_pair.side_effect = KeyboardInterrupt

        result = runner.invoke(main, ["push", str(tmp_path), "b/p"])

        assert result.exit_code == 130
