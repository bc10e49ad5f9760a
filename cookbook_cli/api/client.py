"""
Async client for the Chef server cookbook endpoints.
"""

import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Optional

import aiofiles
import aiohttp
from yarl import URL

from cookbook_cli import __version__
from cookbook_cli.models.config import DEFAULT_CHEF_VERSION, ClientConfig
from cookbook_cli.models.manifest import CookbookManifest

log = logging.getLogger(__name__)


@dataclass
class ChefRequest:
    """A request that has been built but not yet sent."""

    method: str
    url: URL
    body: Any = None
    timeout: Optional[aiohttp.ClientTimeout] = None


class ChefAPIClient:
    """
    Client for the Chef server REST API.

    Requests are built with `new_request` and sent with `execute`, which
    yields the response and releases it when the caller's block exits.
    HTTP and transport errors are raised as the aiohttp exceptions themselves.
    """

    CHUNK_SIZE = 65536  # 64 KB

    def __init__(
        self,
        server_url: str,
        client_name: str = "",
        chef_version: str = DEFAULT_CHEF_VERSION,
        max_workers: int = 1,
        request_timeout: float = 60.0,
    ):
        """
        Initializes the API client.

        Args:
            server_url: Base URL of the Chef server, including any
                '/organizations/<org>' prefix.
            client_name: Sent as X-Ops-UserId when set.
            chef_version: Sent as X-Chef-Version.
            max_workers: The number of concurrent transfers, used to size the
                connection pool.
            request_timeout: Total timeout for an API call, in seconds. File
                transfers use it as a connect and per-read timeout instead, so a
                slow body keeps streaming as long as data arrives.
        """
        self.server_url = URL(server_url.rstrip("/"))
        self.client_name = client_name
        self.chef_version = chef_version
        self.max_workers = max_workers
        self.request_timeout = request_timeout

        self._session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_config(cls, config: ClientConfig) -> "ChefAPIClient":
        return cls(
            config.server_url,
            client_name=config.client_name,
            chef_version=config.chef_version,
            max_workers=config.max_workers,
            request_timeout=config.request_timeout,
        )

    async def __aenter__(self) -> "ChefAPIClient":
        await self._initialize_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _default_headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": f"cookbook-cli/{__version__}",
            "X-Chef-Version": self.chef_version,
        }
        if self.client_name:
            headers["X-Ops-UserId"] = self.client_name
        return headers

    async def _initialize_session(self) -> None:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=self.max_workers * 2,
                limit_per_host=self.max_workers,
                ttl_dns_cache=300,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                headers=self._default_headers(),
                timeout=aiohttp.ClientTimeout(total=self.request_timeout),
            )

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    def new_request(
        self,
        method: str,
        url: str,
        body: Any = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
    ) -> ChefRequest:
        """
        Builds a request. Relative URLs are resolved against the server URL.
        `timeout` replaces the session timeout for this request only.

        Raises:
            aiohttp.InvalidURL: If the URL cannot be used for a request.
        """
        target = URL(url)
        if not target.scheme:
            target = self.server_url.with_path(
                f"{self.server_url.path.rstrip('/')}/{url.lstrip('/')}"
            )
        if target.scheme not in ("http", "https"):
            raise aiohttp.InvalidURL(url)
        return ChefRequest(
            method=method.upper(), url=target, body=body, timeout=timeout
        )

    @asynccontextmanager
    async def execute(self, request: ChefRequest) -> AsyncIterator[aiohttp.ClientResponse]:
        """
        Sends a request and yields the response once its status is known to be 2xx.

        The response is released when the `async with` block exits, whether
        it exits normally or with an error.
        """
        await self._initialize_session()
        options: Dict[str, Any] = {"json": request.body}
        if request.timeout is not None:
            options["timeout"] = request.timeout
        start_time = time.monotonic()
        async with self._session.request(
            request.method, request.url, **options
        ) as response:
            duration_ms = (time.monotonic() - start_time) * 1000
            log.debug(
                f"{request.method} {request.url} -> {response.status} "
                f"({duration_ms:.0f} ms)"
            )
            response.raise_for_status()
            yield response

    async def get_version(self, name: str, version: str) -> CookbookManifest:
        """Fetches the manifest of one cookbook version."""
        request = self.new_request("GET", f"cookbooks/{name}/{version}")
        async with self.execute(request) as response:
            data = await response.json(content_type=None)
        return CookbookManifest.model_validate(data)

    async def fetch_manifest(self, name: str, version: str) -> CookbookManifest:
        return await self.get_version(name, version)

    def _transfer_timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=None,
            sock_connect=self.request_timeout,
            sock_read=self.request_timeout,
        )

    async def fetch_file(self, url: str, destination_path: str) -> int:
        """
        Downloads `url` into `destination_path`, replacing any existing file.

        The destination is only opened once the server has answered with a
        2xx status.

        Returns:
            The number of bytes written.
        """
        request = self.new_request("GET", url, timeout=self._transfer_timeout())
        bytes_written = 0
        async with self.execute(request) as response:
            async with aiofiles.open(destination_path, "wb") as f:
                async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                    await f.write(chunk)
                    bytes_written += len(chunk)
        return bytes_written
