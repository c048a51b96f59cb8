import logging
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import Any, TypeVar

import boto3
import botocore.session
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from obsctl.core.config import RuntimeConfig
from obsctl.core.errors import LocalIoError, RemoteApiError
from obsctl.core.models import BucketEntry, ListingPage, ObjectEntry

logger = logging.getLogger(__name__)

T = TypeVar("T")

DOWNLOAD_CHUNK_SIZE = 1024 * 1024

# Session variables with no env var, config key or default: AWS_PROFILE and the
# shared config files are never consulted.
ISOLATED_SESSION_VARS = {
    "profile": (None, None, None, None),
    "config_file": (None, None, None, None),
    "credentials_file": (None, None, None, None),
}


def translate_obs_errors(operation: str) -> Callable:
    """
    Decorator turning botocore failures into RemoteApiError.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return func(*args, **kwargs)
            except ClientError as e:
                error = e.response.get("Error", {})
                error_code = error.get("Code", "Unknown")
                status = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
                logger.warning("OBS Error in %s: %s - %s", operation, error_code, e)
                raise RemoteApiError(
                    operation,
                    error_code,
                    error.get("Message") or str(e),
                    status=status,
                ) from e
            except BotoCoreError as e:
                logger.warning("Transport error in %s: %s", operation, e)
                raise RemoteApiError(operation, type(e).__name__, str(e)) from e

        return wrapper

    return decorator


class ObsClient:
    """
    Wrapper for Boto3 interactions with the OBS S3-compatible API.
    """

    def __init__(
        self,
        session: boto3.Session | None = None,
        region: str | None = None,
        endpoint_url: str | None = None,
        client: Any = None,
    ):
        # One attempt per call, failed batch tasks are reported, never replayed.
        self.retry_config = Config(
            retries={"mode": "standard", "max_attempts": 1},
            s3={"addressing_style": "virtual"},
        )
        self.session = session or boto3.Session()
        self.region = region or self.session.region_name
        self._client = client or self.session.client(
            "s3",
            region_name=self.region,
            endpoint_url=endpoint_url,
            config=self.retry_config,
        )

    @classmethod
    @translate_obs_errors("CreateClient")
    def from_config(cls, config: RuntimeConfig) -> "ObsClient":
        session = boto3.Session(
            botocore_session=botocore.session.Session(
                session_vars=ISOLATED_SESSION_VARS
            ),
            aws_access_key_id=config.credentials.access_key,
            aws_secret_access_key=config.credentials.secret_key,
            region_name=config.region,
        )
        return cls(
            session=session, region=config.region, endpoint_url=config.endpoint_url
        )

    @translate_obs_errors("CreateBucket")
    def create_bucket(self, bucket_name: str) -> None:
        params: dict[str, Any] = {"Bucket": bucket_name}
        if self.region:
            params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
        self._client.create_bucket(**params)
        logger.info("Created bucket %s in %s", bucket_name, self.region)

    @translate_obs_errors("ListBuckets")
    def list_buckets(self) -> list[BucketEntry]:
        paginator = self._client.get_paginator("list_buckets")
        buckets = []
        for page in paginator.paginate():
            for bucket in page.get("Buckets", []):
                buckets.append(
                    BucketEntry(
                        name=bucket["Name"],
                        creation_date=bucket.get("CreationDate"),
                        location=bucket.get("BucketRegion"),
                    )
                )
        return buckets

    @translate_obs_errors("DeleteBucket")
    def delete_bucket(self, bucket_name: str) -> None:
        self._client.delete_bucket(Bucket=bucket_name)
        logger.info("Deleted bucket %s", bucket_name)

    @translate_obs_errors("ListObjects")
    def list_objects_page(
        self,
        bucket_name: str,
        prefix: str | None = None,
        marker: str | None = None,
        max_keys: int = 1000,
    ) -> ListingPage:
        params: dict[str, Any] = {"Bucket": bucket_name, "MaxKeys": max_keys}
        if prefix:
            params["Prefix"] = prefix
        if marker:
            params["Marker"] = marker

        response = self._client.list_objects(**params)
        entries = tuple(
            ObjectEntry(
                key=item["Key"],
                size=item.get("Size", 0),
                last_modified=item.get("LastModified"),
                storage_class=item.get("StorageClass"),
            )
            for item in response.get("Contents", [])
        )

        next_marker = None
        if response.get("IsTruncated"):
            # S3 only returns NextMarker with a delimiter, OBS always does.
            next_marker = response.get("NextMarker") or (
                entries[-1].key if entries else None
            )

        return ListingPage(entries=entries, next_marker=next_marker)

    @translate_obs_errors("PutObject")
    def upload_object(
        self, bucket_name: str, file_path: str, object_key: str | None = None
    ) -> str:
        key = object_key or Path(file_path).name
        if not key:
            raise LocalIoError(file_path, "Invalid or missing file name in path")

        try:
            handle = open(file_path, "rb")
        except OSError as e:
            raise LocalIoError(file_path, f"Failed to read file ({e.strerror})") from e

        with handle:
            try:
                self._client.put_object(Bucket=bucket_name, Key=key, Body=handle)
            except BotoCoreError:
                raise
            except OSError as e:
                raise LocalIoError(
                    file_path, f"Failed to read file ({e.strerror})"
                ) from e

        logger.info("Uploaded %s to %s/%s", file_path, bucket_name, key)
        return key

    @translate_obs_errors("GetObject")
    def download_object(
        self, bucket_name: str, object_key: str, output_dir: str | Path = "."
    ) -> Path:
        directory = Path(output_dir)
        if not directory.is_dir():
            raise LocalIoError(str(directory), "Output directory does not exist")

        file_name = Path(object_key).name
        if not file_name:
            raise LocalIoError(object_key, "Object key has no file name to write")
        destination = directory / file_name

        response = self._client.get_object(Bucket=bucket_name, Key=object_key)
        try:
            handle = open(destination, "wb")
        except OSError as e:
            raise LocalIoError(
                str(destination), f"Failed to write file ({e.strerror})"
            ) from e

        # Stream errors pass through untouched, only disk writes are local.
        try:
            with handle:
                for chunk in response["Body"].iter_chunks(DOWNLOAD_CHUNK_SIZE):
                    try:
                        handle.write(chunk)
                    except OSError as e:
                        raise LocalIoError(
                            str(destination), f"Failed to write file ({e.strerror})"
                        ) from e
        except BaseException:
            destination.unlink(missing_ok=True)
            raise

        logger.info("Downloaded %s/%s to %s", bucket_name, object_key, destination)
        return destination

    @translate_obs_errors("DeleteObject")
    def delete_object(self, bucket_name: str, object_key: str) -> None:
        # DELETE answers 204 for missing keys, HEAD surfaces the 404.
        self._client.head_object(Bucket=bucket_name, Key=object_key)
        self._client.delete_object(Bucket=bucket_name, Key=object_key)
        logger.info("Deleted %s/%s", bucket_name, object_key)
