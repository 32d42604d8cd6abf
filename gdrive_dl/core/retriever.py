"""
The main orchestrator: resolves URLs, negotiates file downloads, and walks
folder trees.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Sequence

import aiohttp
from rich.markup import escape

from gdrive_dl.api.client import LOGIN_MARKER, DriveClient
from gdrive_dl.cli.progress import ProgressReporter
from gdrive_dl.exceptions import (
    ConfirmationError,
    DownloadError,
    GDriveDLError,
    QuotaExceededError,
    SharingDisabledError,
    TooManyRedirectsError,
    UnrecognizedUrlError,
    UnresolvableIdError,
)
from gdrive_dl.models.config import DownloadConfig
from gdrive_dl.models.session import ConfirmState, DownloadTarget, Session
from gdrive_dl.storage.files import set_modified_time
from gdrive_dl.transfer import Downloader
from gdrive_dl.utils.path import (
    ResourceKind,
    classify_entry_url,
    classify_url,
    create_dir,
    sanitize,
    url_to_id,
)
from gdrive_dl.utils.timestamps import parse_modified_time
from gdrive_dl.web.listing import (
    extract_confirm_token,
    extract_uuid,
    filename_from_disposition,
    is_quota_exceeded,
    parse_folder_listing,
)

log = logging.getLogger(__name__)

LAST_RESORT_CONFIRM = "t"
# Re-requests after the first one: a scraped token, then the last resort.
MAX_CONFIRM_RETRIES = 2

_NETWORK_ERRORS = (OSError, aiohttp.ClientError, asyncio.TimeoutError)


class Retriever:
    """
    Downloads Drive files and folder trees for one run.

    All requests go through a single DriveClient that shares the run's
    Session, so cookies and visited folders carry over between calls.
    """

    def __init__(
        self,
        config: DownloadConfig,
        session: Optional[Session] = None,
        client: Optional[DriveClient] = None,
        downloader: Optional[Downloader] = None,
        progress: Optional[ProgressReporter] = None,
    ):
        self.config = config
        self.session = session or Session()
        self.client = client or DriveClient(
            self.session.cookies,
            max_redirects=config.max_redirects,
            timeout=config.timeout,
            verbose=config.verbose,
        )
        self.downloader = downloader or Downloader()
        self.progress = progress or ProgressReporter(quiet=config.quiet)

    async def __aenter__(self) -> "Retriever":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.close()

    def _fail(self, error: GDriveDLError) -> None:
        """
        Records an error and, unless errors are tolerated, aborts the run by
        raising it.
        """
        message = str(error)
        log.error(f"[red]{escape(message)}[/red]")
        self.session.errors.append(message)
        if not self.config.continue_on_errors:
            raise error

    def _report_exists(self, path: Path) -> None:
        self.session.stats.files_skipped += 1
        log.info(f"{escape(str(path))} [Exists]")

    async def run(
        self,
        urls: Optional[Sequence[str]] = None,
        directory: Optional[Path] = None,
        filename: Optional[str] = None,
    ) -> Session:
        """
        Processes URLs one after another.

        Args:
            urls: URLs or bare IDs; defaults to the configured source URLs.
            directory: Destination root; defaults to the configured prefix.
            filename: Explicit output name for a single file target.

        Returns:
            The run's Session, holding recorded errors and statistics.
        """
        urls = list(urls if urls is not None else self.config.source_urls)
        directory = Path(directory or self.config.directory_prefix)
        if filename is None:
            filename = self.config.output_document

        if len(urls) > 1:
            log.info(f"Processing {len(urls)} urls")

        for url in urls:
            try:
                await self.process_url(url, directory, filename)
            except TooManyRedirectsError as e:
                self._fail(e)
            except _NETWORK_ERRORS as e:
                self._fail(DownloadError(f"{url}: {e}"))
        return self.session

    async def process_url(
        self, url: str, directory: Path, filename: Optional[str] = None
    ) -> None:
        """Resolves a URL or bare ID and routes it to the file or folder path."""
        item_id = url_to_id(url)
        if not item_id:
            self._fail(UnresolvableIdError(f"{url}: Unable to find ID from url"))
            return

        if "://" not in url:
            async with await self.client.fetch(self.client.item_url(item_id)) as response:
                url = str(response.url)
            log.debug(f"Resolved '{item_id}' to {escape(url)}")

        kind = classify_url(url)
        if kind is ResourceKind.FILE:
            await self.process_file(item_id, directory, filename=filename)
        elif kind is ResourceKind.FOLDER:
            if filename:
                log.warning(
                    "[yellow]Ignoring --output-document option for folder download[/yellow]"
                )
            await self.process_folder(item_id, directory)
        else:
            self._fail(UnrecognizedUrlError(f"{item_id}: returned an unknown url {url}"))

    async def process_file(
        self,
        file_id: str,
        directory: Path,
        filename: Optional[str] = None,
        modified: Optional[str] = None,
    ) -> None:
        """
        Downloads a single file, negotiating the confirmation page if Drive
        serves one instead of the file.
        """
        modified_ts = parse_modified_time(modified) if self.config.mtimes else None

        target = None
        if filename:
            path = Path(filename)
            if not path.is_absolute():
                path = directory / filename
            target = DownloadTarget(path, modified_ts, self.config.overwrite)
            if await asyncio.to_thread(target.is_fresh):
                self._report_exists(target.path)
                return

        state = ConfirmState()
        for _ in range(MAX_CONFIRM_RETRIES + 1):
            url = self.client.file_url(file_id, state.query_suffix())
            async with await self.client.fetch(url) as response:
                if LOGIN_MARKER in str(response.url):
                    self._fail(
                        SharingDisabledError(
                            f"{file_id}: does not have link sharing enabled"
                        )
                    )
                    return

                content_disposition = response.headers.get("Content-Disposition")
                if content_disposition:
                    await self._save(
                        response, file_id, directory, content_disposition, target, modified_ts
                    )
                    return

                page = await response.text(errors="replace")

            if self.config.verbose:
                log.debug(f"Confirmation page for {file_id}:\n\n{escape(page)}\n\n")

            if is_quota_exceeded(page):
                self._fail(QuotaExceededError(f"{file_id}: Quota exceeded for this file"))
                return

            if state.confirm == LAST_RESORT_CONFIRM:
                break

            token = extract_confirm_token(page)
            uuid = extract_uuid(page)
            if token and not state.confirm:
                log.debug(f"Found confirmation '{escape(token)}', trying it")
                state = ConfirmState(token, uuid)
            else:
                log.debug(
                    f"Trying confirmation '{LAST_RESORT_CONFIRM}' as a last resort"
                )
                state = ConfirmState(LAST_RESORT_CONFIRM, uuid)

        self._fail(ConfirmationError(f"{file_id}: Unable to confirm the download"))

    async def _save(
        self,
        response: aiohttp.ClientResponse,
        file_id: str,
        directory: Path,
        content_disposition: str,
        target: Optional[DownloadTarget],
        modified_ts: Optional[int],
    ) -> None:
        if target is None:
            name = filename_from_disposition(content_disposition) or file_id
            target = DownloadTarget(
                directory / sanitize(name), modified_ts, self.config.overwrite
            )
            if await asyncio.to_thread(target.is_fresh):
                self._report_exists(target.path)
                return

        try:
            await asyncio.to_thread(create_dir, target.path.parent)
            size = await self.downloader.stream_to_file(
                response, target.path, self.progress
            )
        except _NETWORK_ERRORS as e:
            self._fail(DownloadError(f"{file_id}: {target.path}: {e}"))
            return

        self.session.stats.record_download(size)
        if modified_ts is not None:
            await asyncio.to_thread(set_modified_time, target.path, modified_ts)
        log.debug(f"{escape(str(target.path))} [Downloaded {size} bytes]")

    async def process_folder(self, folder_id: str, directory: Path) -> None:
        """
        Mirrors a folder: downloads its files, recurses into its subfolders
        and creates the local directory even when it ends up empty.
        """
        if not self.session.mark_visited(folder_id):
            log.debug(f"Skipping already processed folder: {folder_id}")
            return

        async with await self.client.fetch(self.client.folder_url(folder_id)) as response:
            page_url = str(response.url)
            page = await response.text(errors="replace")

        if self.config.verbose:
            log.debug(f"HTML page contents:\n\n{escape(page)}\n\n")

        entries = parse_folder_listing(page)
        if not entries and (LOGIN_MARKER in page or LOGIN_MARKER in page_url):
            self._fail(SharingDisabledError(f"{folder_id}: does not have link sharing enabled"))
            return

        for entry in entries:
            item_id = url_to_id(entry.url)
            if not item_id:
                self._fail(UnresolvableIdError(f"{entry.url}: Unable to find ID from url"))
                continue

            kind = classify_entry_url(entry.url)
            if kind is ResourceKind.FILE:
                await self.process_file(
                    item_id, directory, sanitize(entry.name), entry.modified
                )
            elif kind is ResourceKind.FOLDER:
                await self.process_folder(item_id, directory / sanitize(entry.name))
            else:
                log.debug(f"Ignoring unsupported entry {escape(entry.url)}")

        await asyncio.to_thread(create_dir, directory)
        self.session.stats.folders_processed += 1
        log.info(f"Directory: {escape(str(directory))} [Created]")
