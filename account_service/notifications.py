"""
Fallback Alert Module

Sends a side-channel alert to the support team when account creation fails
for a reason other than a business rule. Alerts are fire-and-forget: a
failing channel is logged and never reaches the caller.
"""

from datetime import datetime, timezone
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional, Set
from abc import ABC, abstractmethod
import asyncio
import smtplib

import requests

from .logging_config import get_logger

logger = get_logger("account_service.notifications")


@dataclass
class FallbackAlert:
    """Alert describing an unexpected failure"""
    source: str
    operation: str
    exception_type: str
    message: str
    occurred_at: datetime

    @property
    def subject(self) -> str:
        return f"Fallback triggered in {self.source}"

    @property
    def body(self) -> str:
        return (
            "Fallback triggered in the account service\n\n"
            f"Operation: {self.operation}\n"
            f"Source: {self.source}\n"
            f"Exception: {self.exception_type}\n"
            f"Message: {self.message}\n"
            f"Date: {self.occurred_at.isoformat()}\n\n"
            "This message was generated automatically."
        )


class AlertChannel(ABC):
    """Abstract base class for alert delivery channels"""

    @abstractmethod
    async def send(self, alert: FallbackAlert) -> None:
        """Deliver the alert; raise on failure"""
        pass


class LogAlertChannel(AlertChannel):
    """Writes alerts to the application log"""

    async def send(self, alert: FallbackAlert) -> None:
        logger.warning(f"{alert.subject}: {alert.exception_type}: {alert.message}")


class EmailAlertChannel(AlertChannel):
    """Sends alerts by email over SMTP"""

    def __init__(self, recipient: str, sender: str,
                 smtp_host: str = "localhost", smtp_port: int = 25, timeout: float = 10.0):
        self.recipient = recipient
        self.sender = sender
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.timeout = timeout

    def _build_message(self, alert: FallbackAlert) -> EmailMessage:
        message = EmailMessage()
        message["To"] = self.recipient
        message["From"] = self.sender
        message["Subject"] = alert.subject
        message.set_content(alert.body)
        return message

    def _send_sync(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as smtp:
            smtp.send_message(message)

    async def send(self, alert: FallbackAlert) -> None:
        await asyncio.to_thread(self._send_sync, self._build_message(alert))


class WebhookAlertChannel(AlertChannel):
    """Posts alerts to a webhook for external integrations"""

    def __init__(self, url: str, timeout: int = 30):
        self.url = url
        self.timeout = timeout

    def _post(self, payload: dict) -> None:
        response = requests.post(
            self.url,
            json=payload,
            timeout=self.timeout,
            headers={"Content-Type": "application/json"}
        )
        response.raise_for_status()

    async def send(self, alert: FallbackAlert) -> None:
        payload = {
            "source": alert.source,
            "operation": alert.operation,
            "exception": alert.exception_type,
            "message": alert.message,
            "timestamp": alert.occurred_at.isoformat(),
        }
        await asyncio.to_thread(self._post, payload)


class FallbackNotifier:
    """Dispatches fallback alerts in the background"""

    def __init__(self, channel: Optional[AlertChannel] = None):
        self.channel = channel or LogAlertChannel()
        self._pending: Set[asyncio.Task] = set()

    def notify(self, source: str, operation: str, error: BaseException) -> Optional[asyncio.Task]:
        """Schedule an alert without waiting for delivery"""
        alert = FallbackAlert(
            source=source,
            operation=operation,
            exception_type=type(error).__name__,
            message=str(error),
            occurred_at=datetime.now(timezone.utc)
        )
        try:
            task = asyncio.get_running_loop().create_task(self._deliver(alert))
        except RuntimeError:
            logger.error(f"No event loop to deliver fallback alert from {source}")
            return None
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _deliver(self, alert: FallbackAlert) -> None:
        try:
            await self.channel.send(alert)
            logger.info(f"Fallback alert sent from {alert.source}")
        except Exception as e:
            logger.error(f"Error sending fallback alert: {e}")

    async def drain(self) -> None:
        """Wait for alerts still in flight"""
        if self._pending:
            await asyncio.gather(*list(self._pending))
