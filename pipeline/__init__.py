"""
pipeline/__init__.py — AnalysisPipeline orchestrator.

Drives one submission through Pending → Processing → Completed | Failed:
authenticates the API key, records the result, calls the model once,
interprets its answer, finalizes the record and fans out notifications.
"""
import json
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from errors import (
    InferenceFailure, IntegrationInactive, InvalidCredential, NotFound,
)
from models.analysis_result import AnalysisResult, AnalysisStatus
from pipeline.interpreter import (
    ResponseInterpreter, count_insights, count_recommendations,
)
from pipeline.notifications import NotificationDispatcher
from store import IntegrationStore, ResultLog

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "Analyze this {domain} data from external system '{system_name}' "
    "and provide comprehensive insights:"
)


def build_prompt(domain: str, system_name: str, data: Any) -> str:
    instruction = PROMPT_TEMPLATE.format(domain=domain, system_name=system_name)
    return f"{instruction}\n\nData: {json.dumps(data, default=str, ensure_ascii=False)}"


class AnalysisPipeline:
    """Runs analysis submissions against registered integrations."""

    def __init__(
        self,
        integrations: IntegrationStore,
        results: ResultLog,
        inference,
        dispatcher: NotificationDispatcher,
        interpreter: Optional[ResponseInterpreter] = None,
        default_domain: str = "generic",
        default_model: str = "llama2",
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.integrations = integrations
        self.results = results
        self.inference = inference
        self.dispatcher = dispatcher
        self.interpreter = interpreter or ResponseInterpreter()
        self.default_domain = default_domain
        self.default_model = default_model
        self._clock = clock

    def submit(
        self,
        api_key: str,
        data: Any,
        domain: Optional[str] = None,
        model: Optional[str] = None,
        callback_url: Optional[str] = None,
    ) -> AnalysisResult:
        """
        Analyze ``data`` under the integration owning ``api_key``.

        Returns the Completed result. Raises InvalidCredential or
        IntegrationInactive before any record exists, and InferenceFailure
        (carrying the Failed record) when the model call fails or its
        answer cannot be interpreted.
        """
        try:
            integration = self.integrations.get_by_api_key(api_key)
        except NotFound:
            logger.warning("Submission rejected: unknown API key")
            raise InvalidCredential()

        if not integration.is_active:
            logger.warning("Submission rejected: integration %s is %s",
                           integration.id, integration.status.value)
            raise IntegrationInactive(f"Integration is {integration.status.value.lower()}")

        try:
            self.integrations.touch(integration.id)
        except NotFound:
            raise InvalidCredential()

        started = time.monotonic()
        result = AnalysisResult(
            id=_generate_id(),
            integration_id=integration.id,
            system_name=integration.name,
            status=AnalysisStatus.PENDING,
            created_at=self._clock(),
        )
        self.results.append(integration.id, result)
        result = result.transition(AnalysisStatus.PROCESSING)
        self.results.replace(integration.id, result)

        domain = domain or self.default_domain
        model = model or self.default_model
        prompt = build_prompt(domain, integration.name, data)
        logger.info("Analysis %s started [integration=%s, domain=%s, model=%s]",
                    result.id, integration.id, domain, model)

        try:
            raw = self.inference.generate(model, prompt)
            payload = self.interpreter.parse(raw, data)
            completed = result.transition(
                AnalysisStatus.COMPLETED,
                payload=payload,
                processing_time=time.monotonic() - started,
                insights_count=count_insights(payload),
                recommendations_count=count_recommendations(payload),
            )
        except Exception as exc:
            message = f"Analysis failed: {exc}"
            logger.error("Analysis %s failed: %s", result.id, exc, exc_info=True)
            failed = result.transition(
                AnalysisStatus.FAILED,
                payload={"error": message},
                processing_time=time.monotonic() - started,
            )
            self.results.replace(integration.id, failed)
            raise InferenceFailure(message, result=failed) from exc

        self.results.replace(integration.id, completed)
        logger.info("Analysis %s completed in %.3fs [insights=%d, recommendations=%d]",
                    completed.id, completed.processing_time,
                    completed.insights_count, completed.recommendations_count)

        self.dispatcher.fanout(completed, integration.notification_webhook(), callback_url)
        return completed


def _generate_id() -> str:
    return str(uuid.uuid4())
