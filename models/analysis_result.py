"""models/analysis_result.py — One analysis attempt under an integration."""
import enum
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional


class AnalysisStatus(enum.Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    FAILED = "Failed"

    @property
    def is_terminal(self) -> bool:
        return self in (AnalysisStatus.COMPLETED, AnalysisStatus.FAILED)


@dataclass(frozen=True)
class AnalysisResult:
    id: str
    integration_id: str               # back-reference only; the ResultLog owns the index
    system_name: str
    status: AnalysisStatus
    created_at: datetime
    data_source: str = "external_system"
    payload: Optional[Any] = None     # normalized output when Completed, {"error": ...} when Failed
    processing_time: float = 0.0      # seconds
    insights_count: int = 0
    recommendations_count: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def transition(self, status: AnalysisStatus, **changes) -> "AnalysisResult":
        """Return a copy in ``status``. Terminal results cannot move."""
        if self.is_terminal:
            raise ValueError(f"Result {self.id} is already {self.status.value}")
        return replace(self, status=status, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "integration_id": self.integration_id,
            "system_name": self.system_name,
            "data_source": self.data_source,
            "analysis_result": self.payload,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "processing_time": self.processing_time,
            "insights_count": self.insights_count,
            "recommendations_count": self.recommendations_count,
        }

    def __repr__(self):
        return f"<AnalysisResult {self.id} [{self.status.value}] integration={self.integration_id}>"
