"""
store/integrations.py — In-memory registry of Integration records.

Records are indexed twice: by integration id and by API key. Both indices
are mutated together under one lock; reads copy out immutable records.
"""
import logging
import secrets
import threading
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from errors import NotFound
from models.integration import (
    Integration, IntegrationConfig, IntegrationStatus, SystemType,
)
from store.results import ResultLog

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IntegrationStore:
    """Concurrent registry of integrations, keyed by id and by API key."""

    def __init__(
        self,
        result_log: ResultLog,
        api_key_prefix: str = "json_oracle_",
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._results = result_log
        self._key_prefix = api_key_prefix
        self._clock = clock
        self._lock = threading.Lock()
        self._by_id: Dict[str, Integration] = {}
        self._id_by_key: Dict[str, str] = {}

    def create(
        self,
        name: str,
        system_type: SystemType,
        webhook_url: Optional[str] = None,
        configuration: Optional[IntegrationConfig] = None,
        owner_id: Optional[str] = None,
    ) -> Integration:
        with self._lock:
            integration_id = str(uuid.uuid4())
            while integration_id in self._by_id:
                integration_id = str(uuid.uuid4())
            api_key = self._new_api_key()
            while api_key in self._id_by_key:
                api_key = self._new_api_key()

            integration = Integration(
                id=integration_id,
                name=name,
                system_type=system_type,
                api_key=api_key,
                status=IntegrationStatus.ACTIVE,
                created_at=self._clock(),
                configuration=configuration or IntegrationConfig(),
                webhook_url=webhook_url,
                owner_id=owner_id,
            )
            # The sequence exists before the integration becomes visible.
            self._results.init_sequence(integration_id)
            self._by_id[integration_id] = integration
            self._id_by_key[api_key] = integration_id

        logger.info("Integration created: %s (%s, owner=%s)",
                    integration_id, system_type.value, owner_id)
        return integration

    def get_by_id(self, integration_id: str) -> Integration:
        with self._lock:
            integration = self._by_id.get(integration_id)
        if integration is None:
            raise NotFound(f"Integration {integration_id} not found")
        return integration

    def get_by_api_key(self, api_key: str) -> Integration:
        with self._lock:
            integration_id = self._id_by_key.get(api_key)
            integration = self._by_id.get(integration_id) if integration_id else None
        if integration is None:
            raise NotFound("No integration for API key")
        return integration

    def list(self, owner_id: Optional[str] = None) -> List[Integration]:
        with self._lock:
            integrations = list(self._by_id.values())
        if owner_id is not None:
            integrations = [i for i in integrations if i.owner_id == owner_id]
        return sorted(integrations, key=lambda i: i.created_at)

    def list_with_results(self, owner_id: Optional[str] = None):
        """
        Integrations and a copy of their result sequences, read together.

        Held under the registry lock, so no create or delete lands between
        the two reads and every listed integration has its sequence.
        """
        with self._lock:
            integrations = list(self._by_id.values())
            sequences = self._results.snapshot()
        if owner_id is not None:
            integrations = [i for i in integrations if i.owner_id == owner_id]
        wanted = {i.id for i in integrations}
        sequences = {key: seq for key, seq in sequences.items() if key in wanted}
        return sorted(integrations, key=lambda i: i.created_at), sequences

    def delete(self, integration_id: str) -> bool:
        """Remove an integration and its result sequence. False if absent."""
        with self._lock:
            integration = self._by_id.pop(integration_id, None)
            if integration is None:
                return False
            self._id_by_key.pop(integration.api_key, None)
            self._results.discard_sequence(integration_id)

        logger.info("Integration deleted: %s", integration_id)
        return True

    def set_status(self, integration_id: str, status: IntegrationStatus) -> Integration:
        return self._update(integration_id, status=status)

    def touch(self, integration_id: str) -> Integration:
        """Record activity on an accepted submission."""
        return self._update(integration_id, last_activity_at=self._clock())

    def _update(self, integration_id: str, **changes) -> Integration:
        with self._lock:
            current = self._by_id.get(integration_id)
            if current is None:
                raise NotFound(f"Integration {integration_id} not found")
            updated = current.with_changes(**changes)
            self._by_id[integration_id] = updated
        return updated

    def _new_api_key(self) -> str:
        return f"{self._key_prefix}{secrets.token_hex(16)}"

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)
