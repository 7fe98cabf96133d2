"""
Tencent Cloud API client for edgesync.

CDN and EdgeOne calls go through the Tencent Cloud SDK's CommonClient, which
handles request signing and error envelopes. The SDK is blocking, so each
call runs in the event loop's thread-pool executor, the same way the object
store client wraps boto3.
"""

import asyncio
import functools
from dataclasses import dataclass

from tencentcloud.common import credential
from tencentcloud.common.common_client import CommonClient
from tencentcloud.common.exception.tencent_cloud_sdk_exception import TencentCloudSDKException
from tencentcloud.common.profile.client_profile import ClientProfile
from tencentcloud.common.profile.http_profile import HttpProfile

from ..core.constants import CACHE_TYPE_CDN, CACHE_TYPE_EDGEONE, CDN_API, EDGEONE_API
from ..core.logging import debug_log
from ..core.paths import get_certifi_ssl_context


@dataclass(frozen=True)
class Credentials:
    secret_id: str
    secret_key: str


class CloudApiError(Exception):
    """The API answered with an error (or not with the expected envelope)."""

    def __init__(self, code: str, message: str, request_id: str = ""):
        self.code = code
        self.message = message
        self.request_id = request_id
        suffix = f" (request {request_id})" if request_id else ""
        super().__init__(f"{code}: {message}{suffix}")


def parse_response(data) -> dict:
    """Unwrap the {"Response": {...}} envelope, raising CloudApiError on API errors."""
    if not isinstance(data, dict) or not isinstance(data.get("Response"), dict):
        raise CloudApiError("InvalidResponse", f"unexpected response body: {str(data)[:200]}")
    body = data["Response"]
    error = body.get("Error")
    if error:
        raise CloudApiError(
            error.get("Code", "UnknownError"),
            error.get("Message", ""),
            body.get("RequestId", ""),
        )
    return body


def create_common_client(
    host: str,
    service: str,
    version: str,
    credentials: Credentials,
    region: str = "",
    timeout: int = 30,
) -> CommonClient:
    """SDK client for one service, verifying TLS against the certifi bundle."""
    http_profile = HttpProfile(endpoint=host, reqTimeout=timeout)
    http_profile.certification = get_certifi_ssl_context()
    cred = credential.Credential(credentials.secret_id, credentials.secret_key)
    return CommonClient(service, version, cred, region, profile=ClientProfile(httpProfile=http_profile))


class CloudApiClient:
    """
    JSON API client for one Tencent Cloud service.

        api = CloudApiClient(*CDN_API, credentials)
        await api.request("PurgeUrlsCache", {"Urls": urls})

    Args:
        host: API endpoint host
        service: Service name used in request signing ("cdn", "teo")
        version: API version
        credentials: Secret id and key
        region: Region, empty for global services
        timeout: Per-request timeout in seconds
        common_client: Prebuilt SDK client (tests pass a fake)
    """

    def __init__(
        self,
        host: str,
        service: str,
        version: str,
        credentials: Credentials,
        region: str = "",
        timeout: int = 30,
        common_client=None,
    ):
        self.host = host
        self.service = service
        self.version = version
        self.region = region
        self._client = common_client or create_common_client(host, service, version, credentials, region, timeout)
        self._api_calls = 0

    @classmethod
    def for_cache_type(cls, cache_type: str, credentials: Credentials) -> "CloudApiClient":
        """Client for the API behind a cache backend ("cdn" or "edgeone")."""
        if cache_type == CACHE_TYPE_CDN:
            return cls(*CDN_API, credentials)
        if cache_type == CACHE_TYPE_EDGEONE:
            return cls(*EDGEONE_API, credentials)
        raise ValueError(f"unknown cache type: {cache_type!r}")

    @property
    def api_calls(self) -> int:
        """Total API calls made by this client."""
        return self._api_calls

    async def request(self, action: str, params: dict) -> dict:
        """
        Call an API action.

        Returns:
            The contents of the "Response" object

        Raises:
            CloudApiError: API-level error, or a transport failure reported by the SDK
        """
        loop = asyncio.get_running_loop()
        self._api_calls += 1
        try:
            data = await loop.run_in_executor(None, functools.partial(self._client.call_json, action, params))
        except TencentCloudSDKException as e:
            raise CloudApiError(
                e.get_code() or "ClientError",
                e.get_message() or str(e),
                e.get_request_id() or "",
            ) from e

        body = parse_response(data)
        debug_log(f"{self.service}.{action}: ok (request {body.get('RequestId', '?')})")
        return body
