# =============================================================================
# vanbox_core/offline/shell_cache.py
# Offline App-Shell Cache (install / fetch / activate)
# =============================================================================
"""
OfflineShellCache - cache-first serving of the app shell.

Lifecycle:
- install():   download every shell path into the current generation.
               One failed download fails the whole install; nothing is kept.
- handle_fetch(): cache first (any generation), then the live network.
               When the network is down a top-level document request gets
               the offline page; anything else raises ShellFetchError.
- activate():  delete every generation except the current one.

Directory Structure:
-------------------
local_data/shell_cache/
├── vanbox-v1/
│   ├── index.json          # url key -> file, status, headers
│   └── <sha1>.bin          # response bodies
└── vanbox-v0/              # stale generation, removed by activate()

Shares no state with the entry controller; it only sees HTTP requests.
"""

from __future__ import annotations
import hashlib
import json
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional
from urllib.parse import urljoin, urlsplit

import requests

from vanbox_core.config import ShellCacheSettings
from vanbox_core.errors import ShellFetchError, ShellInstallError
from vanbox_core.logging import get_logger

logger = get_logger(__name__)

OFFLINE_FALLBACK_HTML = b"""<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>Vanbox - Offline</title></head>
<body>
  <h1>You're offline</h1>
  <p>Vanbox can't reach the network right now. Your notes are safe; reconnect and reload to continue.</p>
</body>
</html>
"""


@dataclass(frozen=True)
class ShellRequest:
    """An intercepted request."""
    url: str
    destination: str = ""       # "document" for top-level navigations
    method: str = "GET"

    @property
    def is_navigation(self) -> bool:
        return self.destination == "document"


@dataclass(frozen=True)
class ShellResponse:
    """A response served from cache or network."""
    url: str
    status: int
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)
    from_cache: bool = False

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


Fetcher = Callable[[ShellRequest], ShellResponse]


def cache_key(url: str) -> str:
    """Path + query of a URL; absolute and relative forms share a key."""
    parts = urlsplit(url)
    key = parts.path or "/"
    if parts.query:
        key += f"?{parts.query}"
    return key


class RequestsFetcher:
    """
    Live network fetch through ``requests``.

    HTTP error statuses come back as responses; only transport failures
    (DNS, refused connection, timeout) raise ConnectionError.
    """

    def __init__(self, base_url: str, timeout: int = 10, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self.session = session or requests.Session()

    def resolve(self, url: str) -> str:
        return urljoin(self.base_url, url.lstrip("/")) if not urlsplit(url).scheme else url

    def __call__(self, request: ShellRequest) -> ShellResponse:
        url = self.resolve(request.url)
        try:
            response = self.session.request(method=request.method, url=url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ConnectionError(f"Network request failed for {url}: {e}") from e

        return ShellResponse(
            url=url,
            status=response.status_code,
            body=response.content,
            headers={k: v for k, v in response.headers.items()},
        )


class NamedShellCache:
    """One cache generation stored in its own directory."""

    INDEX_FILE = "index.json"

    def __init__(self, directory: Path):
        self.directory = directory
        self.name = directory.name
        self._index: Dict[str, Dict] = {}
        self._load_index()

    def _load_index(self) -> None:
        index_path = self.directory / self.INDEX_FILE
        if index_path.exists():
            try:
                with open(index_path, "r") as f:
                    self._index = json.load(f)
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Error loading shell cache index for {self.name}: {e}")
                self._index = {}

    def _save_index(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        with open(self.directory / self.INDEX_FILE, "w") as f:
            json.dump(self._index, f, indent=2)

    def keys(self) -> List[str]:
        return list(self._index.keys())

    def match(self, url: str) -> Optional[ShellResponse]:
        meta = self._index.get(cache_key(url))
        if meta is None:
            return None
        body_path = self.directory / meta["file"]
        if not body_path.exists():
            logger.warning(f"Shell cache entry missing on disk: {meta['file']}")
            return None
        return ShellResponse(
            url=meta["url"],
            status=meta["status"],
            body=body_path.read_bytes(),
            headers=meta.get("headers", {}),
            from_cache=True,
        )

    def put_all(self, responses: Dict[str, ShellResponse]) -> None:
        """Store responses keyed by request URL, then write the index once."""
        self.directory.mkdir(parents=True, exist_ok=True)
        for url, response in responses.items():
            key = cache_key(url)
            filename = hashlib.sha1(key.encode("utf-8")).hexdigest() + ".bin"
            (self.directory / filename).write_bytes(response.body)
            self._index[key] = {
                "url": response.url,
                "status": response.status,
                "headers": response.headers,
                "file": filename,
                "cached_at": datetime.now().isoformat(),
            }
        self._save_index()

    def put(self, url: str, response: ShellResponse) -> None:
        self.put_all({url: response})


class ShellCacheStorage:
    """All cache generations under one root directory."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def keys(self) -> List[str]:
        """Names of stored generations, oldest first."""
        dirs = [p for p in self.root.iterdir() if p.is_dir()]
        dirs.sort(key=lambda p: (p.stat().st_mtime, p.name))
        return [p.name for p in dirs]

    def has(self, name: str) -> bool:
        return (self.root / name).is_dir()

    def open(self, name: str) -> NamedShellCache:
        return NamedShellCache(self.root / name)

    def delete(self, name: str) -> bool:
        target = self.root / name
        if not target.is_dir():
            return False
        shutil.rmtree(target)
        return True

    def match(self, url: str) -> Optional[ShellResponse]:
        """First match across every generation, oldest first."""
        for name in self.keys():
            response = self.open(name).match(url)
            if response is not None:
                return response
        return None


class OfflineShellCache:
    """
    Versioned app-shell cache policy.

    Usage:
        shell = OfflineShellCache(settings.shell_cache)
        shell.install()
        shell.activate()
        response = shell.handle_fetch(ShellRequest("/", destination="document"))
    """

    def __init__(
        self,
        settings: ShellCacheSettings,
        storage: Optional[ShellCacheStorage] = None,
        fetcher: Optional[Fetcher] = None,
    ):
        self.settings = settings
        self.storage = storage or ShellCacheStorage(settings.cache_dir)
        self.fetcher = fetcher or RequestsFetcher(settings.base_url, timeout=settings.timeout)

    @property
    def cache_name(self) -> str:
        return self.settings.version

    def install(self) -> int:
        """
        Download every shell path into the current generation.

        Returns:
            Number of resources cached

        Raises:
            ShellInstallError: if any resource could not be fetched (nothing
                is written in that case)
        """
        fetched: Dict[str, ShellResponse] = {}
        failed: List[str] = []

        for path in self.settings.shell_paths:
            try:
                response = self.fetcher(ShellRequest(path))
            except ConnectionError as e:
                logger.warning(f"Shell install: {path} unreachable: {e}")
                failed.append(path)
                continue
            if not response.ok:
                logger.warning(f"Shell install: {path} returned HTTP {response.status}")
                failed.append(path)
                continue
            fetched[path] = response

        if failed:
            raise ShellInstallError(
                f"Shell install failed for {len(failed)} of {len(self.settings.shell_paths)} resources",
                failed_paths=failed,
                cache_name=self.cache_name,
            )

        self.storage.open(self.cache_name).put_all(fetched)
        logger.info(f"Shell cache '{self.cache_name}' installed ({len(fetched)} resources)")
        return len(fetched)

    def activate(self) -> List[str]:
        """
        Drop every generation other than the current one.

        Returns:
            Names of the deleted generations
        """
        deleted = [
            name for name in self.storage.keys()
            if name != self.cache_name and self.storage.delete(name)
        ]
        if deleted:
            logger.info(f"Shell cache activated; removed stale generations: {', '.join(deleted)}")
        return deleted

    def handle_fetch(self, request: ShellRequest) -> ShellResponse:
        """
        Serve a request cache-first.

        Raises:
            ShellFetchError: network down, not cached, and not a document request
        """
        if request.method == "GET":
            cached = self.storage.match(request.url)
            if cached is not None:
                return cached

        try:
            return self.fetcher(request)
        except ConnectionError as e:
            if request.is_navigation:
                logger.info(f"Offline; serving fallback page for {request.url}")
                return self.offline_fallback()
            raise ShellFetchError(f"Offline and not cached: {request.url}", url=request.url) from e

    def offline_fallback(self) -> ShellResponse:
        """The cached offline page, or the built-in one if it was never cached."""
        cached = self.storage.match(self.settings.offline_path)
        if cached is not None:
            return cached
        return ShellResponse(
            url=self.settings.offline_path,
            status=200,
            body=OFFLINE_FALLBACK_HTML,
            headers={"Content-Type": "text/html; charset=utf-8"},
        )
