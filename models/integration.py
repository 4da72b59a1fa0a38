"""models/integration.py — Registered external system and its settings."""
import enum
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional


class SystemType(enum.Enum):
    WEBHOOK = "Webhook"
    REST_API = "RestApi"
    DATABASE = "Database"
    FILE_SYSTEM = "FileSystem"
    MESSAGE_QUEUE = "MessageQueue"
    CUSTOM = "Custom"


class IntegrationStatus(enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    ERROR = "Error"
    PENDING = "Pending"


@dataclass(frozen=True)
class NotificationSettings:
    email_notifications: bool = False
    webhook_notifications: bool = True
    dashboard_alerts: bool = False
    real_time_updates: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "NotificationSettings":
        data = data or {}
        return cls(
            email_notifications=bool(data.get("email_notifications", False)),
            webhook_notifications=bool(data.get("webhook_notifications", True)),
            dashboard_alerts=bool(data.get("dashboard_alerts", False)),
            real_time_updates=bool(data.get("real_time_updates", False)),
        )

    def to_dict(self) -> Dict[str, bool]:
        return {
            "email_notifications": self.email_notifications,
            "webhook_notifications": self.webhook_notifications,
            "dashboard_alerts": self.dashboard_alerts,
            "real_time_updates": self.real_time_updates,
        }


@dataclass(frozen=True)
class IntegrationConfig:
    auto_analyze: bool = False
    analysis_domain: Optional[str] = None
    ai_model: Optional[str] = None
    notification_settings: NotificationSettings = field(default_factory=NotificationSettings)
    data_filters: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "IntegrationConfig":
        data = data or {}
        return cls(
            auto_analyze=bool(data.get("auto_analyze", False)),
            analysis_domain=data.get("analysis_domain"),
            ai_model=data.get("ai_model"),
            notification_settings=NotificationSettings.from_dict(data.get("notification_settings")),
            data_filters=list(data.get("data_filters") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "auto_analyze": self.auto_analyze,
            "analysis_domain": self.analysis_domain,
            "ai_model": self.ai_model,
            "notification_settings": self.notification_settings.to_dict(),
            "data_filters": list(self.data_filters),
        }


@dataclass(frozen=True)
class Integration:
    """
    Immutable snapshot of a registered integration.

    The store swaps whole records on change (status, last activity), so a
    value handed to a caller never mutates underneath it.
    """
    id: str
    name: str
    system_type: SystemType
    api_key: str
    status: IntegrationStatus
    created_at: datetime
    configuration: IntegrationConfig = field(default_factory=IntegrationConfig)
    webhook_url: Optional[str] = None
    owner_id: Optional[str] = None
    last_activity_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status is IntegrationStatus.ACTIVE

    def notification_webhook(self) -> Optional[str]:
        """Webhook URL to notify, or None when absent or disabled in settings."""
        if self.webhook_url and self.configuration.notification_settings.webhook_notifications:
            return self.webhook_url
        return None

    def with_changes(self, **changes) -> "Integration":
        return replace(self, **changes)

    def to_dict(self, include_key: bool = True) -> Dict[str, Any]:
        body = {
            "id": self.id,
            "name": self.name,
            "system_type": self.system_type.value,
            "webhook_url": self.webhook_url,
            "status": self.status.value,
            "owner_id": self.owner_id,
            "created_at": self.created_at.isoformat(),
            "last_activity": self.last_activity_at.isoformat() if self.last_activity_at else None,
            "configuration": self.configuration.to_dict(),
        }
        if include_key:
            body["api_key"] = self.api_key
        return body

    def __repr__(self):
        return f"<Integration {self.id} name={self.name!r} status={self.status.value}>"
