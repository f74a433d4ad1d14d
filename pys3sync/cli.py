"""CLI interface for pys3sync."""

import logging
from typing import Any, Optional

import click

from .api import S3Client
from .config import load_config
from .exceptions import (
    S3SyncConfigError,
    S3SyncError,
    S3SyncIOError,
    S3SyncStoreError,
)
from .output import OutputFormatter
from .sync import SyncEngine, SyncPair

logger = logging.getLogger(__name__)


@click.group()
@click.option("--bucket", "-b", help="Bucket name (overrides AWS_BUCKET)")
@click.option("--region", help="AWS region (overrides AWS_REGION)")
@click.option(
    "--endpoint-url",
    help="Custom endpoint for S3-compatible stores (overrides AWS_ENDPOINT_URL)",
)
@click.option("--profile", help="Named AWS profile (overrides AWS_PROFILE)")
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Load environment variables from this file instead of ./.env",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="pys3sync")
@click.pass_context
def main(
    ctx: Any,
    bucket: Optional[str],
    region: Optional[str],
    endpoint_url: Optional[str],
    profile: Optional[str],
    env_file: Optional[str],
    quiet: bool,
    json: bool,
    verbose: bool,
) -> None:
    """pys3sync - Push a local directory to an S3 bucket prefix."""
    # Store settings in context for subcommands to access
    ctx.ensure_object(dict)
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["env_file"] = env_file
    ctx.obj["overrides"] = {
        "bucket": bucket,
        "region": region,
        "endpoint_url": endpoint_url,
        "profile": profile,
    }

    # Configure logging based on verbose flag
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("pys3sync").setLevel(logging.DEBUG)
        # botocore is very chatty at DEBUG
        logging.getLogger("botocore").setLevel(logging.INFO)
    else:
        # Set default logging level to WARNING to suppress debug/info messages
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.argument("local_dir", type=click.Path())
@click.argument("remote", type=str)
@click.option(
    "--dry-run", is_flag=True, help="Show what would be pushed without pushing"
)
@click.pass_context
def push(ctx: Any, local_dir: str, remote: str, dry_run: bool) -> None:
    """Push LOCAL_DIR to REMOTE, uploading changed files and deleting
    remote files that no longer exist locally.

    REMOTE is a key prefix when a bucket is configured (AWS_BUCKET or
    --bucket), otherwise 'bucket/prefix'. 's3://bucket/prefix' always
    names the bucket explicitly.

    Examples:
        # Bucket from the environment
        AWS_BUCKET=my-site pys3sync push ./public www

        # Bucket in the location
        pys3sync push ./public my-site/www
        pys3sync push ./public s3://my-site/www

        # Preview changes
        pys3sync push ./public www --dry-run
    """
    out: OutputFormatter = ctx.obj["out"]
    exit_code = 0

    try:
        config = load_config(ctx.obj["env_file"], **ctx.obj["overrides"])
        pair = SyncPair.from_location(local_dir, remote, default_bucket=config.bucket)

        out.info(f"Bucket: {pair.bucket}")
        out.info(f"Prefix: {pair.prefix or '(bucket root)'}")
        if config.endpoint_url:
            out.info(f"Endpoint: {config.endpoint_url}")

        client = S3Client(config)
        engine = SyncEngine(client, out)
        stats = engine.sync_pair(pair, dry_run=dry_run)

        if out.json_output:
            out.output_json(
                {
                    "bucket": pair.bucket,
                    "prefix": pair.prefix,
                    "dry_run": dry_run,
                    **stats,
                }
            )

    except KeyboardInterrupt:
        out.warning("\nPush cancelled by user")
        exit_code = 130
    except S3SyncConfigError as e:
        out.error(f"Configuration error: {e}")
        exit_code = 1
    except S3SyncIOError as e:
        out.error(f"Local file error: {e}")
        exit_code = 1
    except S3SyncStoreError as e:
        out.error(f"Storage error: {e}")
        exit_code = 1
    except S3SyncError as e:
        out.error(str(e))
        exit_code = 1
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        out.error(f"Unexpected error: {e}")
        exit_code = 1

    if exit_code:
        ctx.exit(exit_code)


if __name__ == "__main__":
    main()
