"""
HTTP adapter — download of the authroot archive via httpx.

Adapter layer — implements the ArchiveSource port using httpx for a sync
GET against Microsoft's CDN.

Retry/backoff via tenacity on transient errors (network, timeout), bounded
both by a number of attempts and by an overall deadline. The deadline bounds
the whole fetch: no attempt is given more than the time left, and a body
still streaming when it passes is abandoned. Any status other
than 200 is a failure naming the URL and the status line. All HTTP errors
are captured into Result failures — no exceptions leak to the pipeline.
"""

from __future__ import annotations

import dataclasses
import time

import httpx
import structlog
from railway import ErrorCode, FailureDescription
from railway.result import Result
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)

log = structlog.get_logger()

DEFAULT_AUTHROOT_URL = (
    "http://ctldl.windowsupdate.com/msdownload/update/v3/static/trustedr/en/authrootstl.cab"
)


def _classify_timeout(error: FailureDescription) -> FailureDescription:
    """Report deadline overruns as TIMEOUT_ERROR rather than a generic service error."""
    if isinstance(error.exception, httpx.TimeoutException):
        return dataclasses.replace(error, code=ErrorCode.TIMEOUT_ERROR)
    return error


class HttpArchiveFetcher:
    """
    Download the authroot archive via HTTP GET.

    Implements the ArchiveSource port.
    Uses tenacity retry on transient network errors only.
    """

    def __init__(
        self,
        url: str = DEFAULT_AUTHROOT_URL,
        timeout: float = 30.0,
        deadline: float = 120.0,
        max_attempts: int = 3,
        retry_wait: float = 1.0,
    ) -> None:
        self._url = url
        self._timeout = min(timeout, deadline)
        self._deadline = deadline
        self._max_attempts = max_attempts
        self._retry_wait = retry_wait

    def fetch(self) -> Result[bytes]:
        """
        Download the archive.

        Returns Result[bytes] with the raw body on success,
        Result.failure(TIMEOUT_ERROR, ...) when the deadline is exceeded,
        or Result.failure(EXTERNAL_SERVICE_ERROR, ...) on any other failure.
        """
        return Result.from_computation(
            lambda: self._download_with_retry(),
            ErrorCode.EXTERNAL_SERVICE_ERROR,
            f"download of {self._url} failed",
        ).map_failure(_classify_timeout)

    def _download_with_retry(self) -> bytes:
        deadline_at = time.monotonic() + self._deadline
        backoff = wait_exponential(multiplier=self._retry_wait, max=30)
        retrying = Retrying(
            stop=stop_after_attempt(self._max_attempts) | stop_after_delay(self._deadline),
            wait=lambda state: min(backoff(state), max(deadline_at - time.monotonic(), 0.0)),
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
            reraise=True,
        )
        return retrying(self._download, deadline_at)

    def _download(self, deadline_at: float) -> bytes:
        """
        HTTP GET bounded by the time left before ``deadline_at``.

        The request timeout never exceeds the remaining time, and the body is
        streamed so a server that trickles bytes is cut off at the deadline.
        Exceptions are caught by from_computation.
        """
        remaining = deadline_at - time.monotonic()
        if remaining <= 0:
            raise httpx.TimeoutException(f"deadline of {self._deadline}s exceeded before {self._url}")

        timeout = httpx.Timeout(min(self._timeout, remaining))
        with httpx.Client(timeout=timeout, follow_redirects=True) as client:
            with client.stream("GET", self._url) as response:
                if response.status_code != httpx.codes.OK:
                    raise httpx.HTTPStatusError(
                        f"{self._url}: {response.status_code} {response.reason_phrase}",
                        request=response.request,
                        response=response,
                    )
                chunks: list[bytes] = []
                for chunk in response.iter_bytes():
                    if time.monotonic() > deadline_at:
                        raise httpx.ReadTimeout(
                            f"deadline of {self._deadline}s exceeded while reading {self._url}",
                            request=response.request,
                        )
                    chunks.append(chunk)
        data = b"".join(chunks)
        log.info("download.complete", url=self._url, size_bytes=len(data))
        return data
