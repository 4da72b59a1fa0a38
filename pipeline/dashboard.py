"""pipeline/dashboard.py — Point-in-time statistics over integrations and results."""
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from models.analysis_result import AnalysisStatus
from store import IntegrationStore, ResultLog


@dataclass(frozen=True)
class DashboardSnapshot:
    total_integrations: int
    active_integrations: int
    total_analyses: int
    successful_analyses: int
    recent_analyses_24h: int
    success_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class DashboardAggregator:

    def __init__(self, integrations: IntegrationStore, results: ResultLog,
                 recent_window: timedelta = timedelta(hours=24),
                 clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self.integrations = integrations
        self.results = results
        self.recent_window = recent_window
        self._clock = clock

    def snapshot(self, owner_id: Optional[str] = None) -> DashboardSnapshot:
        integrations, sequences = self.integrations.list_with_results(owner_id)
        results = [r for seq in sequences.values() for r in seq]

        cutoff = self._clock() - self.recent_window
        total = len(results)
        successful = sum(1 for r in results if r.status is AnalysisStatus.COMPLETED)

        return DashboardSnapshot(
            total_integrations=len(integrations),
            active_integrations=sum(1 for i in integrations if i.is_active),
            total_analyses=total,
            successful_analyses=successful,
            recent_analyses_24h=sum(1 for r in results if r.created_at > cutoff),
            success_rate=successful / total if total else 0.0,
        )
