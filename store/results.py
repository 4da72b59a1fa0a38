"""
store/results.py — Per-integration log of AnalysisResult records.

Sequences are keyed by integration id; the Integration record itself never
holds its results. Writers replace a result by its own id, so concurrent
submissions against one integration cannot overwrite each other's record.
"""
import logging
import threading
from typing import Dict, List, Optional

from errors import NotFound
from models.analysis_result import AnalysisResult

logger = logging.getLogger(__name__)


class ResultLog:

    def __init__(self):
        self._lock = threading.Lock()
        self._sequences: Dict[str, List[AnalysisResult]] = {}

    def init_sequence(self, integration_id: str) -> None:
        with self._lock:
            self._sequences.setdefault(integration_id, [])

    def discard_sequence(self, integration_id: str) -> None:
        with self._lock:
            self._sequences.pop(integration_id, None)

    def append(self, integration_id: str, result: AnalysisResult) -> bool:
        with self._lock:
            sequence = self._sequences.get(integration_id)
            if sequence is None:
                logger.warning("Append dropped: no result sequence for integration %s", integration_id)
                return False
            sequence.append(result)
        return True

    def replace(self, integration_id: str, result: AnalysisResult) -> bool:
        """
        Swap the stored record having ``result.id`` for ``result``.

        Returns False (and logs) when the sequence or record is gone, e.g.
        the integration was deleted while inference was in flight. A record
        that already reached a terminal state is never overwritten.
        """
        with self._lock:
            sequence = self._sequences.get(integration_id)
            if sequence is None:
                logger.warning("Replace dropped: no result sequence for integration %s", integration_id)
                return False
            for index in range(len(sequence) - 1, -1, -1):
                if sequence[index].id == result.id:
                    if sequence[index].is_terminal:
                        logger.warning("Replace refused: result %s is already %s",
                                       result.id, sequence[index].status.value)
                        return False
                    sequence[index] = result
                    return True
        logger.warning("Replace dropped: result %s not in integration %s", result.id, integration_id)
        return False

    def query(self, integration_id: str, limit: Optional[int] = None) -> List[AnalysisResult]:
        """Results for one integration, newest first, truncated to ``limit``."""
        with self._lock:
            results = list(self._sequences.get(integration_id, ()))
        results.sort(key=lambda r: r.created_at, reverse=True)
        if limit is not None:
            results = results[:max(limit, 0)]
        return results

    def get(self, integration_id: str, result_id: str) -> AnalysisResult:
        with self._lock:
            for result in self._sequences.get(integration_id, ()):
                if result.id == result_id:
                    return result
        raise NotFound(f"Analysis result {result_id} not found")

    def snapshot(self) -> Dict[str, List[AnalysisResult]]:
        """Point-in-time copy of every sequence."""
        with self._lock:
            return {key: list(seq) for key, seq in self._sequences.items()}
