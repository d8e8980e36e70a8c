"""
Attempt Submission Client
- Posts completed lessons to the attempt service
- Submissions run on a background worker so the frame loop never waits
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Dict, List, Optional

import requests

import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttemptRecord:
    """Summary of one completed lesson."""

    shape: str
    attention_score: int
    precision_score: int
    assistance_count: int
    duration_ms: int

    def to_payload(self) -> Dict:
        """JSON body expected by POST /attempts."""
        return {
            "shape": self.shape,
            "attentionScore": self.attention_score,
            "precisionScore": self.precision_score,
            "assistanceCount": self.assistance_count,
            "durationMs": self.duration_ms,
        }


class AttemptClient:
    """HTTP client for the attempt service."""

    def __init__(
        self,
        base_url: str = config.API_BASE_URL,
        timeout: float = config.SUBMIT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="attempt-submit")

    def create_attempt(self, record: AttemptRecord) -> Dict:
        """POST one attempt and return the stored record. Blocks; raises on failure."""
        resp = self._session.post(
            f"{self.base_url}/attempts",
            json=record.to_payload(),
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def get_attempts(self) -> List[Dict]:
        """All stored attempts, oldest first."""
        resp = self._session.get(f"{self.base_url}/attempts", timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def submit(self, record: AttemptRecord) -> Future:
        """
        Fire-and-forget submission.
        The returned future holds the stored record or the request error;
        either outcome is also logged.
        """
        future = self._executor.submit(self.create_attempt, record)
        future.add_done_callback(partial(self._log_result, record))
        return future

    @staticmethod
    def _log_result(record: AttemptRecord, future: Future):
        exc = future.exception()
        if exc is not None:
            logger.warning("Failed to submit attempt for %s: %s", record.shape, exc)
            return
        saved = future.result()
        logger.info("Attempt saved for %s (id=%s)", record.shape, saved.get("id"))

    def close(self):
        """Wait for pending submissions, then release the connection pool."""
        self._executor.shutdown(wait=True)
        self._session.close()
