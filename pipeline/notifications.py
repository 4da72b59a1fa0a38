"""
pipeline/notifications.py — Best-effort webhook/callback delivery.

Each target URL gets its own background send. Failures are logged and
never reach the submitter; one failing URL does not affect the other.
"""
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional

import requests

from errors import NotificationFailure
from models.analysis_result import AnalysisResult

logger = logging.getLogger(__name__)


class WebhookSender:
    """POSTs the result JSON to a URL."""

    def __init__(self, timeout: int = 10, session: requests.Session = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, url: str, result: AnalysisResult) -> None:
        resp = self.session.post(url, json=result.to_dict(), timeout=self.timeout)
        resp.raise_for_status()


class NullSender:
    """Used when notifications are disabled (testing)."""

    def send(self, url: str, result: AnalysisResult) -> None:
        logger.info("Notifications disabled; skipping %s for result %s", url, result.id)


class NotificationDispatcher:

    def __init__(self, sender, max_workers: int = 4):
        self.sender = sender
        self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                            thread_name_prefix="notify")

    def fanout(
        self,
        result: AnalysisResult,
        webhook_url: Optional[str] = None,
        callback_url: Optional[str] = None,
    ) -> List[Future]:
        """Schedule one independent send per present URL; returns the futures."""
        futures = []
        for kind, url in (("webhook", webhook_url), ("callback", callback_url)):
            if url:
                futures.append(self._executor.submit(self._deliver, kind, url, result))
        return futures

    def _deliver(self, kind: str, url: str, result: AnalysisResult) -> bool:
        try:
            self.sender.send(url, result)
        except Exception as exc:
            failure = NotificationFailure(f"{kind} delivery to {url} failed: {exc}")
            logger.warning("%s [result=%s]", failure.message, result.id)
            return False
        logger.info("Sent %s notification to %s [result=%s]", kind, url, result.id)
        return True

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
