"""
Account Management Module

Manages the account lifecycle: opening accounts under the business rule
table, VIP/PYME gating (minimum opening balance and credit card check),
updates, and hard deletion.
"""

from decimal import Decimal
from datetime import date
from typing import List, Optional

from .credit_card_client import CreditCardClient
from .errors import AccountServiceError, BusinessRuleViolation, InternalError, NotFoundError
from .logging_config import get_logger, log_action
from .models import Account, AccountType, ClientType, CustomerType, new_id, utc_now
from .notifications import FallbackNotifier
from .repositories import AccountStore
from .validation import AccountRuleValidator

logger = get_logger("account_service.accounts")


class AccountService:
    """
    Account lifecycle workflows.

    Unexpected failures while opening an account (the card service being
    down, storage errors) send a fallback alert before propagating; business
    rule rejections do not.
    """

    def __init__(
        self,
        accounts: AccountStore,
        validator: AccountRuleValidator,
        card_client: CreditCardClient,
        notifier: Optional[FallbackNotifier] = None
    ):
        self.accounts = accounts
        self.validator = validator
        self.card_client = card_client
        self.notifier = notifier or FallbackNotifier()

    async def get_account(self, account_id: str) -> Account:
        try:
            account = await self.accounts.get(account_id)
        except Exception as e:
            logger.error(f"Error retrieving account with ID {account_id}: {e}")
            raise InternalError("Unexpected error occurred while retrieving account") from e
        if account is None:
            logger.warning(f"Account not found with ID: {account_id}")
            raise NotFoundError(f"Failed to retrieve the account with ID: {account_id}")
        return account

    async def list_accounts(self) -> List[Account]:
        try:
            return await self.accounts.list_all()
        except Exception as e:
            logger.error(f"Error retrieving accounts: {e}")
            raise InternalError("An error occurred while retrieving accounts") from e

    async def create_account(
        self,
        customer_id: str,
        national_id: str,
        customer_type: CustomerType,
        account_type: AccountType,
        balance: Decimal,
        client_type: Optional[ClientType] = None,
        monthly_limit: Optional[int] = None,
        last_deposit_date: Optional[date] = None,
        holders: Optional[List[str]] = None
    ) -> Account:
        """
        Open a new account.

        Raises:
            BusinessRuleViolation: Rule table, minimum balance or credit card rejection
            ServiceUnavailableError: Credit card service unreachable
            InternalError: Unexpected storage failure
        """
        now = utc_now()
        proposed = Account(
            id=new_id(),
            created_at=now,
            updated_at=now,
            customer_id=customer_id,
            national_id=national_id,
            customer_type=customer_type,
            account_type=account_type,
            balance=balance,
            client_type=client_type,
            monthly_limit=monthly_limit,
            last_deposit_date=last_deposit_date,
            holders=list(holders or []),
            limit_transaction=0
        )

        try:
            # Fails before any I/O when the tier minimum is not met
            self.validator.check_minimum_balance(proposed)

            existing = await self.accounts.find_by_customer_id(customer_id)
            if not self.validator.validate_creation(proposed, existing):
                raise BusinessRuleViolation("Account creation does not meet business rules")

            if proposed.is_premium:
                await self._verify_credit_card(national_id)

            await self.accounts.save(proposed)
        except (BusinessRuleViolation, NotFoundError):
            raise
        except AccountServiceError as e:
            self._fallback("create_account", e)
            raise
        except Exception as e:
            logger.error(f"DB error: {e}")
            self._fallback("create_account", e)
            raise InternalError("Error saving account") from e

        log_action(logger, "info", "Account created", action="account_created",
                   resource=proposed.id,
                   extra={"customer_id": customer_id, "account_type": account_type.value})
        return proposed

    async def update_account(
        self,
        account_id: str,
        account_type: AccountType,
        customer_type: CustomerType,
        balance: Decimal,
        monthly_limit: Optional[int] = None,
        last_deposit_date: Optional[date] = None,
        holders: Optional[List[str]] = None
    ) -> Account:
        """
        Replace the mutable fields of an account.

        customer_id, national_id, client_type and limit_transaction cannot be
        changed through an update.
        """
        try:
            existing = await self.accounts.get(account_id)
            if existing is None:
                raise NotFoundError("Account not found")

            proposed = Account(
                id=existing.id,
                created_at=existing.created_at,
                updated_at=existing.updated_at,
                customer_id=existing.customer_id,
                national_id=existing.national_id,
                customer_type=customer_type,
                account_type=account_type,
                balance=balance,
                client_type=existing.client_type,
                monthly_limit=monthly_limit,
                last_deposit_date=last_deposit_date,
                holders=list(holders or []),
                limit_transaction=existing.limit_transaction
            )

            others = await self.accounts.find_by_customer_id(existing.customer_id)
            if not self.validator.validate_update(existing, proposed, others):
                raise BusinessRuleViolation("Account update does not meet business rules")

            await self.accounts.save(proposed)
        except AccountServiceError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error updating account {account_id}: {e}")
            raise InternalError("Unexpected error updating account") from e

        log_action(logger, "info", "Account updated", action="account_updated",
                   resource=account_id)
        return proposed

    async def delete_account(self, account_id: str) -> None:
        try:
            account = await self.accounts.get(account_id)
            if account is None:
                logger.warning(f"Account with ID {account_id} not found")
                raise NotFoundError(f"Account {account_id} not found")
            await self.accounts.delete(account)
        except AccountServiceError:
            raise
        except Exception as e:
            logger.error(f"Error deleting account with ID {account_id}: {e}")
            raise InternalError("Error deleting account") from e
        logger.info(f"Account with ID {account_id} successfully deleted")

    async def _verify_credit_card(self, national_id: str) -> None:
        on_record = await self.accounts.find_by_national_id(national_id)
        customer_ids = list(dict.fromkeys(account.customer_id for account in on_record))
        if not await self.card_client.has_credit_card(customer_ids):
            raise BusinessRuleViolation("Customer has no credit card")

    def _fallback(self, operation: str, error: BaseException) -> None:
        logger.warning(f"Fallback enabled for {operation} - type: {type(error).__name__}")
        self.notifier.notify("AccountService", operation, error)
