"""
Shared fixtures: a scripted stand-in for DriveClient and canned Drive pages.

Run with: pytest -v
"""

import html
from typing import Callable, Iterable, Optional

import pytest
from multidict import CIMultiDict
from yarl import URL

from gdrive_dl.api.client import DriveClient
from gdrive_dl.api.cookies import CookieStore
from gdrive_dl.cli.progress import ProgressReporter
from gdrive_dl.core.retriever import Retriever
from gdrive_dl.models.config import DownloadConfig
from gdrive_dl.models.session import Session


class FakeContent:
    """Mimics `aiohttp.StreamReader.iter_chunked`, optionally failing at the end."""

    def __init__(self, chunks: Iterable[bytes], error: Optional[BaseException] = None):
        self._chunks = list(chunks)
        self._error = error

    async def iter_chunked(self, size: int):
        for chunk in self._chunks:
            yield chunk
        if self._error is not None:
            raise self._error


class FakeResponse:
    """Just enough of `aiohttp.ClientResponse` for the retrieval engine."""

    def __init__(
        self,
        url: str,
        body: bytes = b"",
        headers: Optional[dict] = None,
        chunks: Optional[Iterable[bytes]] = None,
        error: Optional[BaseException] = None,
    ):
        self.url = URL(url)
        self.status = 200
        self.headers = CIMultiDict(headers or {})
        self._body = body
        self.content = FakeContent(chunks if chunks is not None else [body], error)
        self.released = False

    async def text(self, errors: str = "strict") -> str:
        return self._body.decode("utf-8", errors)

    def release(self) -> None:
        self.released = True

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()


class FakeClient(DriveClient):
    """A DriveClient whose responses come from a handler instead of the network."""

    def __init__(self, cookies: CookieStore, handler: Callable[[str], FakeResponse]):
        super().__init__(cookies)
        self.handler = handler
        self.requests: list[str] = []

    async def fetch(self, url: str) -> FakeResponse:
        self.requests.append(url)
        return self.handler(url)

    def requests_matching(self, fragment: str) -> list[str]:
        return [url for url in self.requests if fragment in url]


class RecordingProgress(ProgressReporter):
    """Collects progress updates instead of printing them."""

    def __init__(self):
        super().__init__(quiet=True)
        self.updates: list[int] = []
        self.finished = 0

    def update(self, path, downloaded: int) -> None:
        self.updates.append(downloaded)

    def finish(self) -> None:
        self.finished += 1


def folder_listing(*entries: tuple[str, str, str]) -> bytes:
    """Renders an embedded folder view with (url, title, modified) entries."""
    items = "".join(
        '<div class="flip-entry" tabindex="0" role="link">'
        '<div class="flip-entry-info">'
        f'<a href="{url}" target="_blank">'
        '<div class="flip-entry-visual"><div class="flip-entry-visual-card"></div></div>'
        f'<div class="flip-entry-title">{html.escape(name)}</div>'
        f'<div class="flip-entry-last-modified"><div>{modified}</div></div>'
        "</a></div></div>"
        for url, name, modified in entries
    )
    return (
        "<!DOCTYPE html><html><head><title>Shared folder</title></head><body>"
        f'<div class="flip-entries">{items}</div></body></html>'
    ).encode("utf-8")


def file_entry_url(file_id: str) -> str:
    return f"https://drive.google.com/file/d/{file_id}/view?usp=drive_web"


def folder_entry_url(folder_id: str) -> str:
    return f"https://drive.google.com/drive/folders/{folder_id}"


@pytest.fixture
def make_config(tmp_path):
    """Builds a DownloadConfig rooted in the test's temporary directory."""

    def _make(**overrides) -> DownloadConfig:
        options = {
            "directory_prefix": str(tmp_path),
            "continue_on_errors": True,
            "quiet": True,
        }
        options.update(overrides)
        return DownloadConfig(**options)

    return _make


@pytest.fixture
def make_retriever(make_config):
    """Builds a Retriever wired to a FakeClient driven by `handler`."""

    def _make(handler: Callable[[str], FakeResponse], **config_overrides):
        session = Session()
        client = FakeClient(session.cookies, handler)
        retriever = Retriever(
            make_config(**config_overrides),
            session=session,
            client=client,
            progress=RecordingProgress(),
        )
        return retriever, client

    return _make
