"""Configuration loading for pys3sync.

Settings are resolved once at startup into an :class:`S3Config` which is
then handed to :class:`pys3sync.api.S3Client`. Precedence, highest first:

1. Values passed explicitly (CLI options)
2. Process environment, including variables loaded from a ``.env`` file
3. boto3's default discovery chain (shared credentials file, instance
   metadata, ...) for anything still unset
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Union

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

ENV_BUCKET = "AWS_BUCKET"
ENV_ACCESS_KEY_ID = "AWS_ACCESS_KEY_ID"
ENV_SECRET_ACCESS_KEY = "AWS_SECRET_ACCESS_KEY"
ENV_SESSION_TOKEN = "AWS_SESSION_TOKEN"
ENV_REGION = "AWS_REGION"
ENV_DEFAULT_REGION = "AWS_DEFAULT_REGION"
ENV_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_PROFILE = "AWS_PROFILE"


@dataclass
class S3Config:
    """Connection settings for the object store."""

    bucket: Optional[str] = None
    """Default bucket; may be absent when the location names the bucket"""

    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    session_token: Optional[str] = None

    region: Optional[str] = None
    """Region name, e.g. ``eu-central-1``"""

    endpoint_url: Optional[str] = None
    """Custom endpoint for S3-compatible stores (MinIO, R2, ...)"""

    profile: Optional[str] = None
    """Named profile from the shared AWS config files"""

    @property
    def has_explicit_credentials(self) -> bool:
        """True when a key pair was configured instead of the discovery chain."""
        return bool(self.access_key_id and self.secret_access_key)

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "S3Config":
        """Build a config from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            S3Config instance
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            value = env.get(name)
            return value if value else None

        return cls(
            bucket=get(ENV_BUCKET),
            access_key_id=get(ENV_ACCESS_KEY_ID),
            secret_access_key=get(ENV_SECRET_ACCESS_KEY),
            session_token=get(ENV_SESSION_TOKEN),
            region=get(ENV_REGION) or get(ENV_DEFAULT_REGION),
            endpoint_url=get(ENV_ENDPOINT_URL),
            profile=get(ENV_PROFILE),
        )

    def merged(self, **overrides: Optional[str]) -> "S3Config":
        """Return a copy with every non-empty override applied."""
        known = {f.name for f in fields(self)}
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        for name, value in overrides.items():
            if name not in known:
                raise TypeError(f"Unknown config field: {name}")
            if value:
                values[name] = value
        return S3Config(**values)


def load_config(
    env_file: Optional[Union[str, Path]] = None, **overrides: Optional[str]
) -> S3Config:
    """Load configuration from ``.env``, the environment and explicit values.

    Variables already present in the process environment win over the
    ``.env`` file; explicit ``overrides`` win over both.

    Args:
        env_file: Path to a dotenv file (defaults to the nearest ``.env``
            in the working directory or its parents)
        **overrides: Explicit values for :class:`S3Config` fields

    Returns:
        Resolved S3Config
    """
    if env_file is None:
        env_file = find_dotenv(usecwd=True)
    if env_file and load_dotenv(dotenv_path=env_file, override=False):
        logger.debug(f"Loaded environment from {env_file}")

    config = S3Config.from_env().merged(**overrides)
    logger.debug(
        "Resolved config: bucket=%s region=%s endpoint=%s explicit_credentials=%s",
        config.bucket,
        config.region,
        config.endpoint_url,
        config.has_explicit_credentials,
    )
    return config
