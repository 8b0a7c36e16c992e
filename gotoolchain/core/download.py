"""
Streamed HTTP download for toolchain archives.

The response body is never written to a temporary archive file: callers
consume it as a stream (see ``core.filesystem.extract_stream``). A transfer
that does not succeed fails immediately with the URL and status code; there
is no retry, resume or checksum step.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

import requests
from requests.exceptions import RequestException

from gotoolchain.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 8192


@contextmanager
def open_download(url: str, timeout: int = 30) -> Iterator[requests.Response]:
    """
    Open a streamed GET request and yield the successful response.

    The response is closed when the block exits, whether it completes,
    raises, or is left early.

    Args:
        url: URL to download from
        timeout: Connect/read timeout in seconds

    Yields:
        The streamed ``requests.Response``

    Raises:
        DownloadError: If the request fails or the status is not 2xx
        ValueError: If URL is empty

    Example:
        >>> with open_download("https://dl.google.com/go/go1.12.linux-amd64.tar.gz") as r:
        ...     for chunk in iter_chunks(r):
        ...         ...
    """
    if not url:
        raise ValueError("URL cannot be empty")

    logger.info(f"Downloading from {url}")

    try:
        response = requests.get(url, stream=True, timeout=timeout, allow_redirects=True)
    except RequestException as e:
        logger.error(f"Request to {url} failed: {e}")
        raise DownloadError(url, reason=str(e)) from e

    try:
        if not response.ok:
            logger.error(f"Download failed: {url} ({response.status_code})")
            raise DownloadError(url, response.status_code)
        yield response
    finally:
        response.close()


def iter_chunks(
    response: requests.Response, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Iterator[bytes]:
    """
    Iterate over the body of a streamed response.

    Empty keep-alive chunks are dropped. Transport failures part-way
    through the body are raised as DownloadError.

    Args:
        response: Streamed response from open_download()
        chunk_size: Size of chunks to read

    Yields:
        Non-empty chunks of response content
    """
    try:
        for chunk in response.iter_content(chunk_size=chunk_size):
            if chunk:
                yield chunk
    except RequestException as e:
        logger.error(f"Error during download: {e}")
        raise DownloadError(response.url, response.status_code, str(e)) from e


class ChunkReader:
    """
    Read-only file-like adapter over a chunk iterator.

    ``tarfile`` stream mode and ``shutil.copyfileobj`` only need ``read()``.
    """

    def __init__(self, chunks: Iterator[bytes]):
        self._chunks = chunks
        self._buffer = b""
        self.bytes_read = 0

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            data = self._buffer + b"".join(self._chunks)
            self._buffer = b""
        else:
            while len(self._buffer) < size:
                chunk = next(self._chunks, None)
                if chunk is None:
                    break
                self._buffer += chunk
            data, self._buffer = self._buffer[:size], self._buffer[size:]
        self.bytes_read += len(data)
        return data

    def readable(self) -> bool:
        return True


__all__ = ["open_download", "iter_chunks", "ChunkReader", "DEFAULT_CHUNK_SIZE"]
