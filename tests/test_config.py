"""Unit tests for configuration loading."""

import os
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from pys3sync.config import S3Config, load_config

AWS_VARS = (
    "AWS_BUCKET",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
    "AWS_ENDPOINT_URL",
    "AWS_PROFILE",
)


@pytest.fixture
def clean_env():
    """Run with no AWS variables in the environment."""
    env = {k: v for k, v in os.environ.items() if k not in AWS_VARS}
    with patch.dict(os.environ, env, clear=True):
        yield


class TestS3Config:
    """Tests for the S3Config dataclass."""

    def test_from_env(self):
        config = S3Config.from_env(
            {
                "AWS_BUCKET": "my-bucket",
                "AWS_ACCESS_KEY_ID": "AKIA",
                "AWS_SECRET_ACCESS_KEY": "secret",
                "AWS_REGION": "eu-central-1",
                "AWS_ENDPOINT_URL": "http://localhost:9000",
            }
        )
        assert config.bucket == "my-bucket"
        assert config.access_key_id == "AKIA"
        assert config.secret_access_key == "secret"
        assert config.region == "eu-central-1"
        assert config.endpoint_url == "http://localhost:9000"
        assert config.profile is None

    def test_from_env_empty_values_are_unset(self):
        config = S3Config.from_env({"AWS_BUCKET": "", "AWS_REGION": ""})
        assert config.bucket is None
        assert config.region is None

    def test_default_region_fallback(self):
        config = S3Config.from_env({"AWS_DEFAULT_REGION": "us-west-2"})
        assert config.region == "us-west-2"

    def test_region_wins_over_default_region(self):
        config = S3Config.from_env(
            {"AWS_REGION": "eu-west-1", "AWS_DEFAULT_REGION": "us-west-2"}
        )
        assert config.region == "eu-west-1"

    def test_explicit_credentials_need_both_parts(self):
        assert not S3Config(access_key_id="AKIA").has_explicit_credentials
        assert not S3Config(secret_access_key="s").has_explicit_credentials
        assert S3Config(
            access_key_id="AKIA", secret_access_key="s"
        ).has_explicit_credentials

    def test_merged_applies_non_empty_overrides(self):
        base = S3Config(bucket="env-bucket", region="eu-west-1")
        merged = base.merged(bucket="cli-bucket", region=None, endpoint_url="")
        assert merged.bucket == "cli-bucket"
        assert merged.region == "eu-west-1"
        assert merged.endpoint_url is None
        assert base.bucket == "env-bucket"

    def test_merged_rejects_unknown_field(self):
        with pytest.raises(TypeError, match="Unknown config field"):
            S3Config().merged(colour="blue")


class TestLoadConfig:
    """Tests for load_config."""

    def test_reads_environment(self, clean_env):
        os.environ["AWS_BUCKET"] = "from-env"
        with patch("pys3sync.config.find_dotenv", return_value=""), patch(
            "pys3sync.config.load_dotenv"
        ) as mock_load:
            config = load_config()
        mock_load.assert_not_called()
        assert config.bucket == "from-env"

    def test_dotenv_in_working_directory(self, clean_env, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("AWS_BUCKET=from-cwd-env\n")
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config.bucket == "from-cwd-env"

    def test_dotenv_in_parent_of_working_directory(
        self, clean_env, tmp_path, monkeypatch
    ):
        (tmp_path / ".env").write_text("AWS_REGION=eu-north-1\n")
        (tmp_path / "site").mkdir()
        monkeypatch.chdir(tmp_path / "site")

        config = load_config()

        assert config.region == "eu-north-1"

    def test_overrides_win(self, clean_env):
        os.environ["AWS_BUCKET"] = "from-env"
        with patch("pys3sync.config.load_dotenv"):
            config = load_config(bucket="from-cli")
        assert config.bucket == "from-cli"

    def test_env_file(self, clean_env):
        with tempfile.TemporaryDirectory() as tmpdir:
            env_file = Path(tmpdir) / "test.env"
            env_file.write_text(
                "AWS_BUCKET=dotenv-bucket\nAWS_ENDPOINT_URL=http://minio:9000\n"
            )
            config = load_config(env_file)
        assert config.bucket == "dotenv-bucket"
        assert config.endpoint_url == "http://minio:9000"

    def test_env_file_does_not_override_environment(self, clean_env):
        os.environ["AWS_BUCKET"] = "process-bucket"
        with tempfile.TemporaryDirectory() as tmpdir:
            env_file = Path(tmpdir) / "test.env"
            env_file.write_text("AWS_BUCKET=dotenv-bucket\n")
            config = load_config(env_file)
        assert config.bucket == "process-bucket"
