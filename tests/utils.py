# tests/utils.py
from __future__ import annotations

import asyncio
import copy
from typing import Any, Dict, List, Mapping, Optional


def make_raw_record(**overrides: Any) -> Dict[str, Any]:
    """A REST API media record with embedded author, image by default."""
    record: Dict[str, Any] = {
        "id": 101,
        "date": "2023-05-04T10:20:30",
        "modified": "2023-05-05T08:00:00",
        "link": "https://example.com/?attachment_id=101",
        "title": {"rendered": "Sunset"},
        "caption": {"rendered": "<p>Over the bay</p>"},
        "alt_text": "Orange sky",
        "media_type": "image",
        "mime_type": "image/jpeg",
        "source_url": "https://example.com/wp-content/uploads/2023/05/sunset.jpg",
        "author": 3,
        "meta": [],
        "media_details": {
            "width": 1600,
            "height": 900,
            "file": "2023/05/sunset.jpg",
            "filesize": 345678,
            "sizes": {
                "thumbnail": {
                    "width": 150,
                    "height": 150,
                    "source_url": "https://example.com/wp-content/uploads/2023/05/sunset-150x150.jpg",
                },
                "medium": {
                    "width": 300,
                    "height": 169,
                    "source_url": "https://example.com/wp-content/uploads/2023/05/sunset-300x169.jpg",
                },
            },
            "image_meta": {"camera": "X100"},
        },
        "_embedded": {
            "author": [{"id": 3, "name": "Ada", "link": "https://example.com/author/ada/"}],
        },
    }
    record.update(copy.deepcopy(overrides))
    return record


def make_video_record(**overrides: Any) -> Dict[str, Any]:
    record = make_raw_record(
        id=42,
        mime_type="video/mp4",
        media_type="file",
        source_url="https://x/y.mp4",
        title={"rendered": "T"},
        caption={"rendered": ""},
        alt_text="",
        date="2023-01-01T00:00:00",
        media_details={"length_formatted": "1:05", "length": 65, "filesize": 1000},
        _embedded={"wp:featuredmedia": [{"source_url": "https://x/thumb.jpg"}]},
    )
    record.update(copy.deepcopy(overrides))
    return record


class FakeProbe:
    """Stands in for FileSizeProbe; sizes keyed by URL, 0 otherwise."""

    def __init__(self, sizes: Optional[Mapping[str, int]] = None):
        self.sizes = dict(sizes or {})
        self.calls: List[str] = []
        self.batches: List[List[str]] = []

    def probe(self, url: str) -> int:
        self.calls.append(url)
        return self.sizes.get(url, 0)

    async def probe_many(self, urls, *, session=None) -> List[int]:
        self.batches.append(list(urls))
        return [self.sizes.get(url, 0) for url in urls]


class FakeResponse:
    def __init__(self, status: int = 200, headers: Optional[Mapping[str, str]] = None, delay: float = 0.0):
        self.status = status
        self.headers = dict(headers or {})
        self.delay = delay


class _HeadContext:
    def __init__(self, session: "FakeAsyncSession", url: str):
        self._session = session
        self._url = url

    async def __aenter__(self):
        session = self._session
        session.calls.append(self._url)
        session.in_flight += 1
        session.max_in_flight = max(session.max_in_flight, session.in_flight)
        try:
            result = session.routes.get(self._url, FakeResponse(404))
            if isinstance(result, BaseException):
                raise result
            if result.delay:
                await asyncio.sleep(result.delay)
            return result
        finally:
            session.in_flight -= 1

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeAsyncSession:
    """Minimal aiohttp.ClientSession look-alike for HEAD requests."""

    def __init__(self, routes: Optional[Mapping[str, Any]] = None):
        self.routes = dict(routes or {})
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    def head(self, url: str, allow_redirects: bool = True):
        return _HeadContext(self, url)

    async def close(self):
        self.closed = True
