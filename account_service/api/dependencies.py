"""
Service wiring and FastAPI dependencies
"""

from typing import Optional

from ..async_storage import AsyncStorageInterface, create_async_storage
from ..circuit_breaker import CircuitBreaker, CircuitBreakerConfig
from ..config import AccountServiceConfig, get_config
from ..credit_card_client import CreditCardClient
from ..models import ClientType
from ..notifications import (
    AlertChannel, EmailAlertChannel, FallbackNotifier, LogAlertChannel, WebhookAlertChannel
)
from ..repositories import AccountStore, CommissionStore, TransactionLedger
from ..validation import AccountRuleValidator
from ..accounts import AccountService
from ..commissions import CommissionService
from ..transactions import AccountTransactionEngine
from ..reporting import ReportEngine


class AccountSystem:
    """Account service with all components initialized"""

    def __init__(
        self,
        config: Optional[AccountServiceConfig] = None,
        storage: Optional[AsyncStorageInterface] = None,
        card_client: Optional[CreditCardClient] = None,
        notifier: Optional[FallbackNotifier] = None
    ):
        self.config = config or get_config()

        # Initialize storage
        self.storage = storage or create_async_storage(
            self.config.storage_backend, self.config.database_path
        )
        self.account_store = AccountStore(self.storage)
        self.commission_store = CommissionStore(self.storage)
        self.ledger = TransactionLedger(self.storage)

        # Initialize collaborators
        self.card_client = card_client or self._create_card_client()
        self.notifier = notifier or FallbackNotifier(self._create_alert_channel())

        # Initialize core components
        self.validator = AccountRuleValidator({
            ClientType.VIP: self.config.vip_minimum_balance,
            ClientType.PYME: self.config.pyme_minimum_balance,
        })
        self.commission_service = CommissionService(self.commission_store)
        self.account_service = AccountService(
            self.account_store, self.validator, self.card_client, self.notifier
        )
        self.transaction_engine = AccountTransactionEngine(
            self.account_store, self.ledger, self.commission_service,
            free_transaction_limit=self.config.free_transaction_limit
        )
        self.report_engine = ReportEngine(self.account_store, self.ledger)

    def _create_card_client(self) -> CreditCardClient:
        """Create credit card client based on configuration"""
        breaker = CircuitBreaker(
            "credit_card_service",
            CircuitBreakerConfig(
                failure_threshold=self.config.circuit_breaker_failure_threshold,
                reset_timeout=self.config.circuit_breaker_reset_timeout
            )
        )
        return CreditCardClient(
            url=self.config.credit_card_url,
            timeout=self.config.credit_card_timeout,
            circuit_breaker=breaker
        )

    def _create_alert_channel(self) -> AlertChannel:
        """Create fallback alert channel based on configuration"""
        channel = self.config.alert_channel.lower()
        if channel == "email":
            return EmailAlertChannel(
                recipient=self.config.alert_recipient,
                sender=self.config.alert_sender,
                smtp_host=self.config.smtp_host,
                smtp_port=self.config.smtp_port
            )
        if channel == "webhook" and self.config.alert_webhook_url:
            return WebhookAlertChannel(self.config.alert_webhook_url)
        return LogAlertChannel()

    async def close(self) -> None:
        await self.notifier.drain()
        await self.card_client.close()
        await self.storage.close()


# Global account system instance, created on first use
_account_system: Optional[AccountSystem] = None


def get_account_system() -> AccountSystem:
    global _account_system
    if _account_system is None:
        _account_system = AccountSystem()
    return _account_system


async def shutdown_account_system() -> None:
    global _account_system
    if _account_system is not None:
        await _account_system.close()
        _account_system = None
