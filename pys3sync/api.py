"""API client for S3-compatible object stores."""

from __future__ import annotations

import logging
from typing import IO, Any, Callable, TypeVar

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionError as BotoConnectionError,
    HTTPClientError,
    NoCredentialsError,
    PartialCredentialsError,
)

from .config import S3Config
from .exceptions import (
    S3SyncAuthenticationError,
    S3SyncConfigError,
    S3SyncNetworkError,
    S3SyncNotFoundError,
    S3SyncPermissionError,
    S3SyncStoreError,
)
from .models import ListObjectsResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

AUTH_ERROR_CODES = frozenset(
    {
        "InvalidAccessKeyId",
        "SignatureDoesNotMatch",
        "ExpiredToken",
        "InvalidToken",
        "TokenRefreshRequired",
    }
)
PERMISSION_ERROR_CODES = frozenset({"AccessDenied", "AllAccessDisabled", "403"})
NOT_FOUND_ERROR_CODES = frozenset({"NoSuchBucket", "NoSuchKey", "404"})


class S3Client:
    """Client for listing, uploading and deleting objects in a bucket.

    Requests are sent exactly once: botocore's retry handler is configured
    for a single attempt, so every failure surfaces to the caller.
    """

    def __init__(self, config: S3Config | None = None, client: Any = None):
        """Initialize the S3 client.

        Args:
            config: Connection settings (defaults to an empty config, which
                leaves everything to boto3's discovery chain)
            client: Pre-built boto3 ``s3`` client, mainly for tests
        """
        self.config = config or S3Config()
        self._client = client if client is not None else self._create_client()

    def _create_client(self) -> Any:
        """Create the underlying boto3 client from the config."""
        session_kwargs: dict[str, Any] = {}
        if self.config.has_explicit_credentials:
            session_kwargs["aws_access_key_id"] = self.config.access_key_id
            session_kwargs["aws_secret_access_key"] = self.config.secret_access_key
            if self.config.session_token:
                session_kwargs["aws_session_token"] = self.config.session_token
            logger.debug("Using explicit credentials")
        elif self.config.profile:
            session_kwargs["profile_name"] = self.config.profile
            logger.debug("Using profile %s", self.config.profile)
        else:
            logger.debug("Using default credential chain")
        if self.config.region:
            session_kwargs["region_name"] = self.config.region

        try:
            session = boto3.Session(**session_kwargs)
            return session.client(
                "s3",
                endpoint_url=self.config.endpoint_url,
                config=BotoConfig(retries={"total_max_attempts": 1}),
            )
        except BotoCoreError as e:
            raise S3SyncConfigError(f"Could not create S3 client: {e}") from e

    def _translate_error(
        self, e: Exception, operation: str, key: str | None
    ) -> S3SyncStoreError:
        """Map a botocore exception to the matching store error.

        Args:
            e: Exception raised by botocore
            operation: Name of the failed operation (list, put, delete)
            key: Object key or prefix involved

        Returns:
            Store error to raise
        """
        target = f"{operation} {key}" if key else operation

        if isinstance(e, (NoCredentialsError, PartialCredentialsError)):
            return S3SyncAuthenticationError(
                f"{target} failed: no usable AWS credentials ({e})",
                operation=operation,
                key=key,
            )
        if isinstance(e, (BotoConnectionError, HTTPClientError)):
            return S3SyncNetworkError(
                f"{target} failed: network error ({e})",
                operation=operation,
                key=key,
            )
        if isinstance(e, ClientError):
            error = e.response.get("Error", {})
            code = str(error.get("Code", ""))
            message = error.get("Message") or str(e)
            if code:
                text = f"{target} failed: {code}: {message}"
            else:
                text = f"{target} failed: {message}"
            if code in AUTH_ERROR_CODES:
                return S3SyncAuthenticationError(text, operation=operation, key=key)
            if code in PERMISSION_ERROR_CODES:
                return S3SyncPermissionError(text, operation=operation, key=key)
            if code in NOT_FOUND_ERROR_CODES:
                return S3SyncNotFoundError(text, operation=operation, key=key)
            return S3SyncStoreError(text, operation=operation, key=key)
        return S3SyncStoreError(f"{target} failed: {e}", operation=operation, key=key)

    def _call(self, operation: str, key: str | None, func: Callable[[], T]) -> T:
        """Run a store request, translating botocore failures.

        Raises:
            S3SyncStoreError: If the request fails for any reason
        """
        try:
            return func()
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e, operation, key) from e

    def list_objects(
        self,
        bucket: str,
        prefix: str,
        continuation_token: str | None = None,
    ) -> ListObjectsResult:
        """List one page of objects under a prefix.

        Args:
            bucket: Bucket name
            prefix: Key prefix to list
            continuation_token: Token from the previous page, if any

        Returns:
            ListObjectsResult for this page

        Raises:
            S3SyncStoreError: If the listing request fails
        """
        params: dict[str, Any] = {"Bucket": bucket, "Prefix": prefix}
        if continuation_token:
            params["ContinuationToken"] = continuation_token

        response = self._call(
            "list", prefix, lambda: self._client.list_objects_v2(**params)
        )
        return ListObjectsResult.from_api_response(response)

    def put_object(
        self,
        bucket: str,
        key: str,
        body: IO[bytes] | bytes,
        content_type: str,
    ) -> dict[str, Any]:
        """Upload an object in a single request.

        Args:
            bucket: Bucket name
            key: Full object key
            body: Bytes or readable binary stream
            content_type: Content-Type stored with the object

        Returns:
            Raw put response (contains the new ETag)

        Raises:
            S3SyncStoreError: If the upload fails
        """
        return self._call(
            "put",
            key,
            lambda: self._client.put_object(
                Bucket=bucket, Key=key, Body=body, ContentType=content_type
            ),
        )

    def delete_object(self, bucket: str, key: str) -> dict[str, Any]:
        """Delete an object.

        Raises:
            S3SyncStoreError: If the delete fails
        """
        return self._call(
            "delete",
            key,
            lambda: self._client.delete_object(Bucket=bucket, Key=key),
        )
