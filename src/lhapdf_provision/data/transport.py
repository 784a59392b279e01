# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""
HTTP transport for PDF set archives.

Responses are never buffered whole: the body is exposed as a read-only
file-like object that counts bytes as they arrive and stops the transfer as
soon as the configured cap is crossed.
"""

import logging
from typing import Iterator, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..core.constants import DownloadDefaults
from ..core.exceptions import FetchFailedError, ResponseTooLargeError

logger = logging.getLogger(__name__)

REQUEST_HEADERS = {
    "Accept": "*/*",
    # The body is already a .tar.gz; transparent transfer compression would
    # strip the gzip layer the extractor expects.
    "Accept-Encoding": "identity",
}


def create_session(max_retries: int = 0, backoff_factor: float = 1.0) -> requests.Session:
    """Create a requests session with optional retry logic."""
    session = requests.Session()
    if max_retries > 0:
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
    return session


def build_archive_url(base_url: str, name: str, suffix: str = DownloadDefaults.ARCHIVE_SUFFIX) -> str:
    """Deterministic archive URL: ``base_url + name + suffix``."""
    return f"{base_url}{name}{suffix}"


class CappedResponseReader:
    """
    File-like view over a streamed response body with a hard size cap.

    Network errors raised while reading are reported as FetchFailedError so
    that they are not mistaken for decompression problems further up.
    """

    def __init__(
        self,
        response: requests.Response,
        name: str,
        url: str,
        max_bytes: int,
        chunk_size: int = DownloadDefaults.CHUNK_SIZE,
        progress_interval: int = DownloadDefaults.PROGRESS_INTERVAL,
    ):
        self.name = name
        self.url = url
        self.max_bytes = max_bytes
        self.bytes_read = 0
        self._response = response
        self._chunks: Iterator[bytes] = response.iter_content(chunk_size=chunk_size)
        self._buffer = bytearray()
        self._exhausted = False
        self._total = _declared_length(response)
        self._progress_interval = progress_interval
        self._next_report = progress_interval

    def readable(self) -> bool:
        return True

    def _pull(self) -> bool:
        """Append the next network chunk to the buffer; False at end of body."""
        if self._exhausted:
            return False
        try:
            chunk = next(self._chunks)
        except StopIteration:
            self._exhausted = True
            return False
        except requests.RequestException as e:
            raise FetchFailedError(self.name, self.url, e) from e

        self.bytes_read += len(chunk)
        if self.bytes_read > self.max_bytes:
            self.close()
            raise ResponseTooLargeError(self.name, self.url, self.max_bytes, self.bytes_read)
        self._buffer.extend(chunk)
        self._report_progress()
        return True

    def _report_progress(self) -> None:
        if self.bytes_read < self._next_report:
            return
        while self._next_report <= self.bytes_read:
            self._next_report += self._progress_interval
        if self._total:
            pct = self.bytes_read / self._total * 100
            logger.info(f"  Download progress for {self.name}: {pct:.0f}%")
        else:
            logger.info(f"  Downloaded {self.bytes_read >> 20} MiB of {self.name}")

    def read(self, size: Optional[int] = -1) -> bytes:
        if size is None or size < 0:
            while self._pull():
                pass
            data = bytes(self._buffer)
            self._buffer.clear()
            return data

        while len(self._buffer) < size and self._pull():
            pass
        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data

    def close(self) -> None:
        self._exhausted = True
        self._response.close()

    def __enter__(self) -> 'CappedResponseReader':
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def _declared_length(response: requests.Response) -> Optional[int]:
    try:
        return int(response.headers.get("content-length", ""))
    except (TypeError, ValueError):
        return None


def open_archive_stream(
    session: requests.Session,
    name: str,
    url: str,
    max_bytes: int,
    timeout_sec: Optional[float] = DownloadDefaults.TIMEOUT_SEC,
) -> CappedResponseReader:
    """
    Issue the GET request and return a capped reader over the body.

    Raises:
        FetchFailedError: Connection problems or non-success status
        ResponseTooLargeError: Declared Content-Length above the cap
    """
    try:
        response = session.get(url, headers=REQUEST_HEADERS, stream=True, timeout=timeout_sec)
        response.raise_for_status()
    except requests.RequestException as e:
        raise FetchFailedError(name, url, e) from e

    declared = _declared_length(response)
    if declared is not None and declared > max_bytes:
        response.close()
        raise ResponseTooLargeError(name, url, max_bytes, declared)

    return CappedResponseReader(response, name, url, max_bytes)
