"""
Unit tests for the HTTP adapter — download of authrootstl.cab.

Uses respx to mock httpx HTTP calls (never makes real HTTP requests).

Test categories:
  - Success: 200 → Result.success(body)
  - Status errors: anything but 200 → Result.failure naming URL and status
  - Timeout/network: → Result.failure (never raises), retried up to max_attempts
  - Deadline: one overall deadline covers every attempt and the streamed body
"""

from __future__ import annotations

import time

import httpx
import pytest
import respx
from railway import ErrorCode, ResultAssertions

from authroot_parser.adapters.http_client import DEFAULT_AUTHROOT_URL, HttpArchiveFetcher

# ─────────────────────── Fixtures ───────────────────────

CAB_URL = "https://cdn.example.com/trustedr/en/authrootstl.cab"
CAB_BODY = b"MSCF\x00\x00\x00\x00" + b"\x42" * 64


@pytest.fixture()
def fetcher() -> HttpArchiveFetcher:
    """A fetcher with fast retries so failure tests don't sleep."""
    return HttpArchiveFetcher(url=CAB_URL, timeout=5, deadline=10, max_attempts=3, retry_wait=0)


# ─────────────────────── Success ───────────────────────


class TestDownloadSuccess:
    """
    GIVEN the CDN serves the cabinet
    WHEN fetch is called
    THEN it returns Result.success with the raw body.
    """

    @respx.mock
    def test_returns_body(self, fetcher: HttpArchiveFetcher) -> None:
        respx.get(CAB_URL).mock(return_value=httpx.Response(200, content=CAB_BODY))
        body = ResultAssertions.assert_success(fetcher.fetch())
        assert body == CAB_BODY

    @respx.mock
    def test_follows_redirects(self, fetcher: HttpArchiveFetcher) -> None:
        mirror = "https://mirror.example.com/authrootstl.cab"
        respx.get(CAB_URL).mock(return_value=httpx.Response(302, headers={"Location": mirror}))
        respx.get(mirror).mock(return_value=httpx.Response(200, content=CAB_BODY))
        assert ResultAssertions.assert_success(fetcher.fetch()) == CAB_BODY

    @respx.mock
    def test_default_url_is_windows_update(self) -> None:
        route = respx.get(DEFAULT_AUTHROOT_URL).mock(return_value=httpx.Response(200, content=b"x"))
        ResultAssertions.assert_success(HttpArchiveFetcher(retry_wait=0).fetch())
        assert route.called


# ─────────────────────── Status errors ───────────────────────


class TestDownloadStatusErrors:
    """
    GIVEN the CDN answers with a non-200 status
    WHEN fetch is called
    THEN it fails once (no retry) with a message naming URL and status.
    """

    @respx.mock
    def test_404_names_url_and_status(self, fetcher: HttpArchiveFetcher) -> None:
        route = respx.get(CAB_URL).mock(return_value=httpx.Response(404))
        result = fetcher.fetch()
        ResultAssertions.assert_failure(result, ErrorCode.EXTERNAL_SERVICE_ERROR)
        ResultAssertions.assert_failure_message_contains(result, f"{CAB_URL}: 404 Not Found")
        assert route.call_count == 1

    @respx.mock
    def test_500_is_not_retried(self, fetcher: HttpArchiveFetcher) -> None:
        route = respx.get(CAB_URL).mock(return_value=httpx.Response(500))
        result = fetcher.fetch()
        error = ResultAssertions.assert_failure(result, ErrorCode.EXTERNAL_SERVICE_ERROR)
        assert error.message == f"download of {CAB_URL} failed"
        assert isinstance(error.exception, httpx.HTTPStatusError)
        assert route.call_count == 1


# ─────────────────────── Transient errors ───────────────────────


class TestDownloadTransientErrors:
    """
    GIVEN the network misbehaves
    WHEN fetch is called
    THEN transient errors are retried and finally reported, never raised.
    """

    @respx.mock
    def test_timeout_returns_timeout_error(self, fetcher: HttpArchiveFetcher) -> None:
        route = respx.get(CAB_URL).mock(side_effect=httpx.ReadTimeout("timed out"))
        result = fetcher.fetch()
        ResultAssertions.assert_failure(result, ErrorCode.TIMEOUT_ERROR)
        assert route.call_count == 3

    @respx.mock
    def test_connection_error_returns_failure(self, fetcher: HttpArchiveFetcher) -> None:
        route = respx.get(CAB_URL).mock(side_effect=httpx.ConnectError("refused"))
        result = fetcher.fetch()
        ResultAssertions.assert_failure(result, ErrorCode.EXTERNAL_SERVICE_ERROR)
        ResultAssertions.assert_failure_message_contains(result, "refused")
        assert route.call_count == 3

    @respx.mock
    def test_recovers_after_transient_error(self, fetcher: HttpArchiveFetcher) -> None:
        route = respx.get(CAB_URL).mock(
            side_effect=[httpx.ConnectError("reset"), httpx.Response(200, content=CAB_BODY)]
        )
        assert ResultAssertions.assert_success(fetcher.fetch()) == CAB_BODY
        assert route.call_count == 2

    @respx.mock
    def test_single_attempt(self) -> None:
        fetcher = HttpArchiveFetcher(url=CAB_URL, max_attempts=1, retry_wait=0)
        route = respx.get(CAB_URL).mock(side_effect=httpx.ConnectTimeout("slow"))
        ResultAssertions.assert_failure(fetcher.fetch(), ErrorCode.TIMEOUT_ERROR)
        assert route.call_count == 1


# ─────────────────────── Overall deadline ───────────────────────


class _TrickleStream(httpx.SyncByteStream):
    """A body that arrives 16 bytes every 100 ms, never stalling long enough to time out a read."""

    def __iter__(self):
        for _ in range(30):
            time.sleep(0.1)
            yield b"\x42" * 16


def _slow_timeout(request: httpx.Request) -> httpx.Response:
    """Behave like a stalled server: hang for the request's read timeout (at most 0.9 s), then time out."""
    time.sleep(min(0.9, request.extensions["timeout"]["read"]))
    raise httpx.ReadTimeout("timed out", request=request)


class TestDownloadDeadline:
    """
    GIVEN an overall deadline
    WHEN the server is slow
    THEN the whole fetch, retries included, ends at the deadline.
    """

    @respx.mock
    def test_retries_never_outlive_deadline(self) -> None:
        fetcher = HttpArchiveFetcher(url=CAB_URL, timeout=1.0, deadline=1.0, max_attempts=5, retry_wait=0)
        route = respx.get(CAB_URL).mock(side_effect=_slow_timeout)

        start = time.monotonic()
        result = fetcher.fetch()
        elapsed = time.monotonic() - start

        ResultAssertions.assert_failure(result, ErrorCode.TIMEOUT_ERROR)
        assert elapsed <= 1.2
        assert route.call_count >= 2
        assert route.calls[1].request.extensions["timeout"]["read"] <= 0.15

    @respx.mock
    def test_request_timeout_clipped_to_deadline(self) -> None:
        fetcher = HttpArchiveFetcher(url=CAB_URL, timeout=30, deadline=2, retry_wait=0)
        route = respx.get(CAB_URL).mock(return_value=httpx.Response(200, content=CAB_BODY))
        ResultAssertions.assert_success(fetcher.fetch())
        assert route.calls.last.request.extensions["timeout"]["read"] <= 2

    @respx.mock
    def test_trickling_body_is_cut_off(self) -> None:
        fetcher = HttpArchiveFetcher(url=CAB_URL, timeout=5, deadline=1.0, max_attempts=3, retry_wait=0)
        respx.get(CAB_URL).mock(return_value=httpx.Response(200, stream=_TrickleStream()))

        start = time.monotonic()
        result = fetcher.fetch()
        elapsed = time.monotonic() - start

        ResultAssertions.assert_failure(result, ErrorCode.TIMEOUT_ERROR)
        ResultAssertions.assert_failure_message_contains(result, "deadline of 1.0s exceeded")
        assert elapsed < 1.5
