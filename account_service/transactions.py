"""
Account Transaction Engine Module

Applies deposits and withdrawals under the "first N transactions free, then
taxed" policy. A deposit is a transfer: the origin account is debited and
the destination account credited. Every successful operation appends one
entry to the transaction ledger.

Account records carry no version, so two operations racing on the same
account can both read the same balance and the last write wins. The writes
of one operation are independent as well: if a later write fails, the
earlier ones stay applied and the failure is logged with the steps that
completed.
"""

from decimal import Decimal
from datetime import date
from typing import Awaitable, Callable, List, Optional, Tuple

from .commissions import CommissionService
from .errors import (
    AccountServiceError, BusinessRuleViolation, InsufficientFundsError,
    InternalError, NotFoundError
)
from .logging_config import get_logger, log_action
from .models import Account, TransactionRecord, TransactionType, new_id, utc_now
from .repositories import AccountStore, TransactionLedger

logger = get_logger("account_service.transactions")

WriteStep = Tuple[str, Callable[[], Awaitable[object]]]


class AccountTransactionEngine:
    """
    Deposits and withdrawals with commission-tiered fees.

    An operation is charged the commission of the account type once the
    debited account's transaction count, before the operation, exceeds
    ``free_transaction_limit``.
    """

    def __init__(
        self,
        accounts: AccountStore,
        ledger: TransactionLedger,
        commissions: CommissionService,
        free_transaction_limit: int = 10,
        today: Callable[[], date] = date.today
    ):
        self.accounts = accounts
        self.ledger = ledger
        self.commissions = commissions
        self.free_transaction_limit = free_transaction_limit
        self._today = today

    async def deposit(
        self,
        destination_account_id: str,
        amount: Decimal,
        origin_customer_id: Optional[str] = None,
        origin_account_id: Optional[str] = None
    ) -> Account:
        """
        Move money from an origin account into the destination account.

        The origin is the customer's first account unless an explicit
        origin_account_id is given. When both are given the account must
        belong to that customer.

        Returns:
            The updated destination account
        """
        self._check_amount(amount)
        if origin_customer_id is None and origin_account_id is None:
            raise BusinessRuleViolation("Deposit requires an origin customer or account")

        try:
            destination = await self._load_account(destination_account_id)
            origin = await self._load_origin(origin_customer_id, origin_account_id)
            if origin.id == destination.id:
                raise BusinessRuleViolation("Origin and destination accounts must differ")

            if origin.balance < amount:
                raise InsufficientFundsError("insufficient balance")

            commission = await self._commission_for(destination)
            if self._allowance_exhausted(origin):
                net_amount = amount - commission
                if net_amount < 0:
                    raise BusinessRuleViolation("Net deposit amount cannot be negative")
                taxes = commission
            else:
                net_amount = amount
                taxes = Decimal("0")

            origin.balance -= net_amount
            destination.balance += net_amount
            destination.last_deposit_date = self._today()
            origin.limit_transaction += 1

            record = self._ledger_entry(
                TransactionType.DEPOSITO, origin, amount, taxes, destination=destination
            )
            await self._persist("deposit", [
                ("save destination", lambda: self.accounts.save(destination)),
                ("append ledger entry", lambda: self.ledger.save(record)),
                ("save origin", lambda: self.accounts.save(origin)),
            ])
        except AccountServiceError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error during deposit: {e}", exc_info=True)
            raise InternalError("Error processing deposit") from e

        log_action(logger, "info", f"Successful deposit into account {destination.id}",
                   action="deposit", resource=destination.id,
                   extra={"origin_account_id": origin.id, "amount": str(amount),
                          "commission": str(taxes)})
        return destination

    async def withdraw(self, customer_id: str, amount: Decimal) -> Account:
        """
        Withdraw from the customer's first account.

        Customers with several accounts get whichever was opened first; use
        withdraw_from_account to target a specific one.
        """
        self._check_amount(amount)
        try:
            account = await self.accounts.find_first_by_customer_id(customer_id)
        except Exception as e:
            logger.error(f"Unexpected error during withdrawal: {e}", exc_info=True)
            raise InternalError("Error processing withdrawal") from e
        if account is None:
            raise NotFoundError(f"Account not found with customer id: {customer_id}")
        logger.debug(f"Account {account.id} selected for customer {customer_id}")
        return await self._withdraw(account, amount)

    async def withdraw_from_account(self, account_id: str, amount: Decimal) -> Account:
        """Withdraw from a specific account"""
        self._check_amount(amount)
        try:
            account = await self._load_account(account_id)
        except AccountServiceError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error during withdrawal: {e}", exc_info=True)
            raise InternalError("Error processing withdrawal") from e
        return await self._withdraw(account, amount)

    async def _withdraw(self, account: Account, amount: Decimal) -> Account:
        try:
            if account.balance < amount:
                raise InsufficientFundsError("insufficient balance")

            commission = await self._commission_for(account)
            if self._allowance_exhausted(account):
                if amount - commission < 0:
                    raise BusinessRuleViolation("Net withdrawal amount cannot be negative")
                debit = amount + commission
                if account.balance < debit:
                    raise InsufficientFundsError("insufficient balance to cover commission")
                taxes = commission
            else:
                debit = amount
                taxes = Decimal("0")

            account.balance -= debit
            account.limit_transaction += 1

            record = self._ledger_entry(TransactionType.RETIRO, account, amount, taxes)
            await self._persist("withdrawal", [
                ("save account", lambda: self.accounts.save(account)),
                ("append ledger entry", lambda: self.ledger.save(record)),
            ])
        except AccountServiceError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error during withdrawal: {e}", exc_info=True)
            raise InternalError("Error processing withdrawal") from e

        log_action(logger, "info", f"Successful withdrawal from account {account.id}",
                   action="withdrawal", resource=account.id,
                   extra={"amount": str(amount), "commission": str(taxes)})
        return account

    def _allowance_exhausted(self, account: Account) -> bool:
        return account.limit_transaction > self.free_transaction_limit

    async def _commission_for(self, account: Account) -> Decimal:
        rule = await self.commissions.get_for_account_type(account.account_type)
        if rule is None:
            return Decimal("0")
        return rule.monto

    async def _load_account(self, account_id: str) -> Account:
        account = await self.accounts.get(account_id)
        if account is None:
            raise NotFoundError(f"Account not found with id: {account_id}")
        return account

    async def _load_origin(self, customer_id: Optional[str], account_id: Optional[str]) -> Account:
        if account_id is not None:
            origin = await self._load_account(account_id)
            if customer_id is not None and origin.customer_id != customer_id:
                raise BusinessRuleViolation(
                    f"Account {account_id} does not belong to customer {customer_id}"
                )
            return origin
        origin = await self.accounts.find_first_by_customer_id(customer_id)
        if origin is None:
            raise NotFoundError(f"Account not found with customer id: {customer_id}")
        return origin

    def _ledger_entry(self, transaction_type: TransactionType, origin: Account,
                      amount: Decimal, commission: Decimal,
                      destination: Optional[Account] = None) -> TransactionRecord:
        now = utc_now()
        return TransactionRecord(
            id=new_id(),
            created_at=now,
            updated_at=now,
            customer_id_origin=origin.customer_id,
            amount=amount,
            commission_amount=commission,
            transaction_date=self._today(),
            transaction_type=transaction_type,
            national_id=origin.national_id,
            customer_id_destination=destination.customer_id if destination else None,
            account_id_origin=origin.id,
            account_id_destination=destination.id if destination else None
        )

    async def _persist(self, operation: str, steps: List[WriteStep]) -> None:
        """Run the write steps in order; a failure leaves earlier steps applied"""
        completed = []
        for name, write in steps:
            try:
                await write()
            except Exception:
                if completed:
                    logger.error(
                        f"{operation} partially applied: completed {completed}, failed at '{name}'"
                    )
                raise
            completed.append(name)

    @staticmethod
    def _check_amount(amount: Decimal) -> None:
        if amount <= 0:
            raise BusinessRuleViolation("Amount must be greater than zero")
