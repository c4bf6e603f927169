"""Tests for all-or-nothing batch execution."""

import asyncio
import threading

import pytest

from gtoolkit_installer.errors import DownloadError
from gtoolkit_installer.fetch.batch import BatchCancelledError, run_batch


class TestRunBatch:
    """Tests for run_batch function."""

    def test_results_in_submission_order(self) -> None:
        """Results should follow the order of the jobs."""
        jobs = [lambda cancel, i=i: i * 10 for i in range(5)]

        assert asyncio.run(run_batch(jobs, max_concurrency=3)) == [0, 10, 20, 30, 40]

    def test_empty_batch(self) -> None:
        """An empty batch should return no results."""
        assert asyncio.run(run_batch([])) == []

    def test_concurrency_is_bounded(self) -> None:
        """No more than max_concurrency jobs should run at once."""
        lock = threading.Lock()
        running = 0
        peak = 0

        def job(cancel: threading.Event) -> None:
            nonlocal running, peak
            with lock:
                running += 1
                peak = max(peak, running)
            threading.Event().wait(0.02)
            with lock:
                running -= 1

        asyncio.run(run_batch([job] * 6, max_concurrency=2))

        assert peak <= 2

    def test_first_failure_is_raised(self) -> None:
        """The failing job's error should be raised unchanged."""

        def ok(cancel: threading.Event) -> str:
            return "ok"

        def fail(cancel: threading.Event) -> str:
            raise DownloadError("boom", code="http_error")

        with pytest.raises(DownloadError) as exc_info:
            asyncio.run(run_batch([ok, fail, ok]))

        assert exc_info.value.code == "http_error"

    def test_failure_signals_running_siblings(self) -> None:
        """Running jobs should see the cancel event after a sibling fails."""
        observed = threading.Event()

        def slow(cancel: threading.Event) -> None:
            if cancel.wait(timeout=5):
                observed.set()
                raise BatchCancelledError()

        def fail(cancel: threading.Event) -> None:
            raise DownloadError("boom")

        with pytest.raises(DownloadError):
            asyncio.run(run_batch([slow, fail], max_concurrency=2))

        assert observed.is_set()

    def test_pending_jobs_do_not_start_after_failure(self) -> None:
        """Jobs waiting for a slot should not start once the batch failed."""
        started: list[str] = []

        def fail(cancel: threading.Event) -> None:
            started.append("fail")
            raise DownloadError("boom")

        def later(cancel: threading.Event) -> None:
            started.append("later")

        with pytest.raises(DownloadError):
            asyncio.run(run_batch([fail, later], max_concurrency=1))

        assert started == ["fail"]
