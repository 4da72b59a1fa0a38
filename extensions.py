"""
extensions.py — Per-application service container.

Stores, dispatcher and pipeline are built once in ``init_app`` and shared by
every request of that app; separate apps (e.g. one per test) never share state.
"""
from dataclasses import dataclass
from datetime import timedelta

from flask import Flask, current_app

from pipeline import AnalysisPipeline
from pipeline.dashboard import DashboardAggregator
from pipeline.inference import OllamaClient
from pipeline.notifications import NotificationDispatcher, NullSender, WebhookSender
from store import IntegrationStore, ResultLog

EXTENSION_KEY = "json_oracle"


@dataclass
class Services:
    integrations: IntegrationStore
    results: ResultLog
    dispatcher: NotificationDispatcher
    pipeline: AnalysisPipeline
    dashboard: DashboardAggregator


def build_services(config) -> Services:
    results = ResultLog()
    integrations = IntegrationStore(results, api_key_prefix=config["API_KEY_PREFIX"])

    if config.get("NOTIFICATIONS_ENABLED", True):
        sender = WebhookSender(timeout=config["NOTIFICATION_TIMEOUT"])
    else:
        sender = NullSender()
    dispatcher = NotificationDispatcher(sender, max_workers=config["NOTIFICATION_WORKERS"])

    inference = OllamaClient(config["OLLAMA_BASE_URL"], timeout=config["OLLAMA_TIMEOUT"])
    pipeline = AnalysisPipeline(
        integrations, results, inference, dispatcher,
        default_domain=config["DEFAULT_DOMAIN"],
        default_model=config["DEFAULT_MODEL"],
    )
    dashboard = DashboardAggregator(
        integrations, results,
        recent_window=timedelta(hours=config["RECENT_WINDOW_HOURS"]),
    )
    return Services(integrations, results, dispatcher, pipeline, dashboard)


def init_app(app: Flask) -> Services:
    services = build_services(app.config)
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
