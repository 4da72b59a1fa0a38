"""store — in-memory registries for integrations and their analysis results."""
from store.results import ResultLog
from store.integrations import IntegrationStore

__all__ = ["IntegrationStore", "ResultLog"]
