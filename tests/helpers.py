"""
Test doubles shared by the cookbook-cli test suite.
"""

import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable

from aiohttp import test_utils, web

from cookbook_cli.models.manifest import CookbookItem, CookbookManifest

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


class FakeChefServer:
    """
    A real HTTP server standing in for the Chef server.

    Routes are registered per exact path after the server has started, so a
    manifest can embed the server's own URL for its file entries.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Handler] = {}
        self.requests: list[web.Request] = []
        self._server: test_utils.TestServer | None = None

    async def start(self) -> None:
        app = web.Application()
        app.router.add_route("*", "/{tail:.*}", self._dispatch)
        self._server = test_utils.TestServer(app)
        await self._server.start_server()

    async def close(self) -> None:
        if self._server is not None:
            await self._server.close()

    async def _dispatch(self, request: web.Request) -> web.StreamResponse:
        self.requests.append(request)
        handler = self.routes.get(request.path)
        if handler is None:
            raise web.HTTPNotFound(text="Not Found")
        return await handler(request)

    @property
    def paths_requested(self) -> list[str]:
        return [r.path for r in self.requests]

    def url(self, path: str = "") -> str:
        return str(self._server.make_url(path)).rstrip("/")

    def add_json(self, path: str, data: Any) -> None:
        async def handler(request: web.Request) -> web.StreamResponse:
            return web.json_response(data)

        self.routes[path] = handler

    def add_body(self, path: str, body: bytes | str) -> None:
        payload = body.encode() if isinstance(body, str) else body

        async def handler(request: web.Request) -> web.StreamResponse:
            return web.Response(body=payload, content_type="application/octet-stream")

        self.routes[path] = handler

    def add_stream(self, path: str, chunks: list[bytes], delay: float) -> None:
        """Serves `chunks` one at a time, sleeping `delay` seconds before each."""

        async def handler(request: web.Request) -> web.StreamResponse:
            response = web.StreamResponse()
            response.content_type = "application/octet-stream"
            await response.prepare(request)
            for chunk in chunks:
                await asyncio.sleep(delay)
                await response.write(chunk)
            await response.write_eof()
            return response

        self.routes[path] = handler

    def add_status(self, path: str, status: int, text: str = "") -> None:
        async def handler(request: web.Request) -> web.StreamResponse:
            return web.Response(status=status, text=text)

        self.routes[path] = handler


def manifest_json(
    server_url: str,
    name: str = "foo",
    version: str = "0.2.1",
    **categories: list[str],
) -> dict[str, Any]:
    """
    Builds a manifest document in the server's wire format.

    Each category keyword maps to a list of file names; every file gets the URL
    '<server_url>/bookshelf/<name>/<file name>'.
    """
    document: dict[str, Any] = {
        "version": version,
        "name": f"{name}-{version}",
        "cookbook_name": name,
        "frozen?": False,
        "chef_type": "cookbook_version",
        "json_class": "Chef::CookbookVersion",
        "metadata": {},
        "access": {},
    }
    for category in (
        "root_files",
        "files",
        "templates",
        "attributes",
        "recipes",
        "definitions",
        "libraries",
        "providers",
        "resources",
    ):
        file_names = categories.get(category, [])
        prefix = "" if category == "root_files" else f"{category}/"
        document[category] = [
            {
                "name": file_name,
                "path": f"{prefix}{file_name}",
                "checksum": "14963c5b685f3a15ea90ae51bd5454b6",
                "specificity": "default",
                "url": f"{server_url}/bookshelf/{name}/{file_name}",
            }
            for file_name in file_names
        ]
    return document


class FakeCookbookSource:
    """
    In-memory CookbookSource.

    `bodies` maps a file URL to the bytes to write, or to an exception to raise.
    URLs in `slow_urls` yield to the event loop once before doing anything.
    """

    def __init__(
        self,
        manifest: CookbookManifest | Exception,
        bodies: dict[str, bytes | Exception] | None = None,
        slow_urls: set[str] | None = None,
    ) -> None:
        self.manifest = manifest
        self.bodies = bodies or {}
        self.slow_urls = slow_urls or set()
        self.manifest_requests: list[tuple[str, str]] = []
        self.started: list[str] = []

    async def __aenter__(self) -> "FakeCookbookSource":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None

    async def fetch_manifest(self, name: str, version: str) -> CookbookManifest:
        self.manifest_requests.append((name, version))
        if isinstance(self.manifest, Exception):
            raise self.manifest
        return self.manifest

    async def fetch_file(self, url: str, destination_path: str) -> int:
        self.started.append(url)
        if url in self.slow_urls:
            await asyncio.sleep(0)
        body = self.bodies.get(url, b"")
        if isinstance(body, Exception):
            raise body
        Path(destination_path).write_bytes(body)
        return len(body)


def build_manifest(
    name: str = "foo", version: str = "0.2.1", **categories: list[str]
) -> CookbookManifest:
    """Builds a manifest whose file URLs are 'mem://<category>/<file name>'."""
    fields = {
        category: [
            CookbookItem(name=file_name, url=f"mem://{category}/{file_name}")
            for file_name in file_names
        ]
        for category, file_names in categories.items()
    }
    return CookbookManifest(
        name=f"{name}-{version}", cookbook_name=name, version=version, **fields
    )
