"""
pipeline/interpreter.py — Turns raw model output into a normalized payload.

Model text that is already structured JSON is adopted as-is. Anything else
is wrapped in a synthesized payload whose insights and recommendations come
from a keyword classifier (literal substring checks, no NLP).
"""
import json
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

ANALYSIS_CONFIDENCE = 0.85

# (keywords, insight): any keyword present yields the insight once.
INSIGHT_RULES = [
    (("pattern", "trend"), {
        "type": "pattern",
        "title": "Pattern Detected",
        "description": "Data patterns identified in the analysis",
        "confidence": 0.85,
    }),
    (("anomaly", "outlier"), {
        "type": "anomaly",
        "title": "Anomaly Found",
        "description": "Unusual data points detected",
        "confidence": 0.75,
    }),
]

RECOMMENDATION_RULES = [
    (("optimize",), "Consider optimizing data processing"),
    (("monitor",), "Implement continuous monitoring"),
]

FALLBACK_RECOMMENDATION = "Review analysis results for actionable insights"

SEQUENCE_SAMPLE_SIZE = 3
MAPPING_SAMPLE_SIZE = 5


class KeywordClassifier:
    """Default insight/recommendation extractor. Swap for anything with the same two methods."""

    def __init__(self, insight_rules=None, recommendation_rules=None):
        self.insight_rules = insight_rules if insight_rules is not None else INSIGHT_RULES
        self.recommendation_rules = (
            recommendation_rules if recommendation_rules is not None else RECOMMENDATION_RULES
        )

    def insights(self, text: str) -> List[Dict[str, Any]]:
        return [
            dict(insight)
            for keywords, insight in self.insight_rules
            if any(keyword in text for keyword in keywords)
        ]

    def recommendations(self, text: str) -> List[str]:
        found = [
            recommendation
            for keywords, recommendation in self.recommendation_rules
            if any(keyword in text for keyword in keywords)
        ]
        if not text:
            found.append(FALLBACK_RECOMMENDATION)
        return found


class ResponseInterpreter:

    def __init__(self, classifier: Optional[KeywordClassifier] = None,
                 clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self.classifier = classifier or KeywordClassifier()
        self._clock = clock

    def parse(self, raw_text: str, original_data: Any) -> Any:
        """
        Build the result payload for ``raw_text``.

        Returns the decoded JSON object/array when the model answered with
        one; otherwise a dict with ``summary``, ``insights``,
        ``recommendations``, ``metrics`` and ``original_data_sample``.
        """
        structured = _decode_structured(raw_text)
        if structured is not None:
            return structured

        return {
            "summary": raw_text,
            "insights": self.classifier.insights(raw_text),
            "recommendations": self.classifier.recommendations(raw_text),
            "metrics": {
                "data_points": count_data_points(original_data),
                "analysis_confidence": ANALYSIS_CONFIDENCE,
                "processing_timestamp": self._clock().isoformat(),
            },
            "original_data_sample": sample_data(original_data),
        }


def _decode_structured(raw_text: str) -> Optional[Any]:
    try:
        value = json.loads(raw_text)
    except (TypeError, ValueError, RecursionError):
        return None
    if isinstance(value, (dict, list)):
        return value
    return None


def count_insights(payload: Any) -> int:
    return _list_length(payload, "insights")


def count_recommendations(payload: Any) -> int:
    return _list_length(payload, "recommendations")


def _list_length(payload: Any, key: str) -> int:
    if isinstance(payload, dict) and isinstance(payload.get(key), list):
        return len(payload[key])
    return 0


def count_data_points(data: Any) -> int:
    if isinstance(data, (list, tuple, dict)):
        return len(data)
    return 1


def sample_data(data: Any) -> Any:
    """Bounded, representative slice of the submitted data."""
    if isinstance(data, (list, tuple)) and len(data) > SEQUENCE_SAMPLE_SIZE:
        return {
            "type": "array",
            "length": len(data),
            "sample": list(data[:SEQUENCE_SAMPLE_SIZE]),
        }
    if isinstance(data, dict) and len(data) > MAPPING_SAMPLE_SIZE:
        return {
            "type": "object",
            "total_keys": len(data),
            "sample": dict(list(data.items())[:MAPPING_SAMPLE_SIZE]),
        }
    return data
