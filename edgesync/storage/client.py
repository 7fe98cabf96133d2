"""
Object store client for edgesync.

Talks to Tencent COS through its S3-compatible endpoint with boto3. boto3 is
blocking, so every call runs in the event loop's thread-pool executor; the
async methods are what the sync pipeline awaits.
"""

import asyncio
import functools
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..core.constants import COS_ENDPOINT_TEMPLATE, DEFAULT_CONCURRENCY, DELETE_BATCH_SIZE

NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


class StoreError(Exception):
    """A store request failed (anything other than a head() miss)."""

    def __init__(self, operation: str, message: str, key: Optional[str] = None, code: str = ""):
        self.operation = operation
        self.key = key
        self.code = code
        target = f" {key}" if key else ""
        super().__init__(f"{operation}{target} failed: {message}")


@dataclass(frozen=True)
class RemoteObject:
    """An object in the bucket."""
    key: str
    etag: str  # opaque, normally a quoted MD5 hex digest


@dataclass
class ListPage:
    """One page of a bucket listing."""
    items: List[RemoteObject] = field(default_factory=list)
    next_token: Optional[str] = None


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def _is_not_found(error: ClientError) -> bool:
    status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return status == 404 or _error_code(error) in NOT_FOUND_CODES


def create_cos_client(secret_id: str, secret_key: str, region: str, max_pool_connections: int = DEFAULT_CONCURRENCY):
    """Create a boto3 S3 client pointed at the COS endpoint for region."""
    session = boto3.Session(
        aws_access_key_id=secret_id,
        aws_secret_access_key=secret_key,
        region_name=region,
    )
    return session.client(
        "s3",
        endpoint_url=COS_ENDPOINT_TEMPLATE.format(region=region),
        config=Config(
            s3={"addressing_style": "virtual"},
            max_pool_connections=max_pool_connections,
        ),
    )


class ObjectStoreClient:
    """
    Bucket operations used by a deploy.

    Args:
        bucket: Bucket name (COS format: name-appid)
        s3_client: boto3 S3 client (see create_cos_client)
    """

    def __init__(self, bucket: str, s3_client):
        self.bucket = bucket
        self._s3 = s3_client

    @classmethod
    def for_config(cls, config) -> "ObjectStoreClient":
        """Build a client from a DeployConfig."""
        s3 = create_cos_client(
            config.secret_id,
            config.secret_key,
            config.region,
            max_pool_connections=config.concurrency,
        )
        return cls(config.bucket, s3)

    async def _call(self, fn, *args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(fn, *args, **kwargs))

    # ── Operations ─────────────────────────────────────────────────────

    async def head(self, key: str) -> Optional[RemoteObject]:
        """Fetch object metadata. Returns None if the key doesn't exist."""
        try:
            response = await self._call(self._s3.head_object, Bucket=self.bucket, Key=key)
        except ClientError as e:
            if _is_not_found(e):
                return None
            raise StoreError("head", str(e), key=key, code=_error_code(e)) from e
        except BotoCoreError as e:
            raise StoreError("head", str(e), key=key) from e
        return RemoteObject(key=key, etag=response.get("ETag", ""))

    def _put_sync(self, key: str, path: Path, content_type: Optional[str]):
        extra = {"ContentType": content_type} if content_type else {}
        with open(path, "rb") as body:
            self._s3.put_object(Bucket=self.bucket, Key=key, Body=body, **extra)

    async def put(self, key: str, path: Path, content_type: Optional[str] = None) -> None:
        """Upload a local file, overwriting any existing object."""
        if content_type is None:
            content_type = mimetypes.guess_type(str(path))[0]
        try:
            await self._call(self._put_sync, key, Path(path), content_type)
        except ClientError as e:
            raise StoreError("put", str(e), key=key, code=_error_code(e)) from e
        except BotoCoreError as e:
            raise StoreError("put", str(e), key=key) from e

    async def list_page(self, continuation_token: Optional[str] = None) -> ListPage:
        """Fetch one page of the bucket listing."""
        params = {"Bucket": self.bucket}
        if continuation_token:
            params["ContinuationToken"] = continuation_token
        try:
            data = await self._call(self._s3.list_objects_v2, **params)
        except ClientError as e:
            raise StoreError("list", str(e), code=_error_code(e)) from e
        except BotoCoreError as e:
            raise StoreError("list", str(e)) from e

        items = [RemoteObject(key=obj["Key"], etag=obj.get("ETag", "")) for obj in data.get("Contents", [])]
        next_token = data.get("NextContinuationToken") if data.get("IsTruncated") else None
        return ListPage(items=items, next_token=next_token)

    async def delete_many(self, keys: Iterable[str]) -> None:
        """Delete up to DELETE_BATCH_SIZE keys in one request."""
        keys = list(keys)
        if not keys:
            return
        if len(keys) > DELETE_BATCH_SIZE:
            raise ValueError(f"delete_many takes at most {DELETE_BATCH_SIZE} keys, got {len(keys)}")
        try:
            response = await self._call(
                self._s3.delete_objects,
                Bucket=self.bucket,
                Delete={"Objects": [{"Key": k} for k in keys], "Quiet": True},
            )
        except ClientError as e:
            raise StoreError("delete", str(e), code=_error_code(e)) from e
        except BotoCoreError as e:
            raise StoreError("delete", str(e)) from e

        failed = response.get("Errors") or []
        if failed:
            first = failed[0]
            raise StoreError(
                "delete",
                f"{len(failed)} of {len(keys)} objects not deleted ({first.get('Code')}: {first.get('Message')})",
                key=first.get("Key"),
                code=str(first.get("Code", "")),
            )
