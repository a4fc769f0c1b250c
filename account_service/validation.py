"""
Account Rule Validation Module

Pure decision logic for account creation and updates. No I/O: callers load
the customer's existing accounts and pass them in.

Rule table, first matching branch decides:

1. EMPRESARIAL customers need at least one holder and may only open
   CORRIENTE accounts.
2. AHORRO and CORRIENTE accounts are limited to one of each per customer.
3. PLAZO_FIJO accounts are reserved for PERSONAL customers.
4. Anything else is rejected.
"""

from decimal import Decimal
from typing import Dict, Iterable, Optional

from .errors import BusinessRuleViolation
from .models import Account, AccountType, ClientType, CustomerType


class AccountRuleValidator:
    """Business rules for opening and changing accounts"""

    def __init__(self, minimum_balances: Optional[Dict[ClientType, Decimal]] = None):
        self.minimum_balances = minimum_balances or {}

    def validate_creation(self, proposed: Account, existing_accounts: Iterable[Account]) -> bool:
        """Check whether a new account may be opened next to the customer's existing ones"""
        return self._allowed(proposed, existing_accounts, exclude_id=None)

    def validate_update(self, existing: Account, proposed: Account,
                        other_accounts: Iterable[Account]) -> bool:
        """Check whether an existing account may take the proposed shape"""
        return self._allowed(proposed, other_accounts, exclude_id=existing.id)

    def check_minimum_balance(self, proposed: Account) -> None:
        """
        Enforce the opening balance required for VIP and PYME clients.

        Raises:
            BusinessRuleViolation: If the opening balance is below the tier minimum
        """
        if proposed.client_type is None:
            return
        minimum = self.minimum_balances.get(proposed.client_type)
        if minimum is not None and proposed.balance < minimum:
            raise BusinessRuleViolation(
                f"Minimum balance for {proposed.client_type.value} not met"
            )

    def _allowed(self, proposed: Account, accounts: Iterable[Account],
                 exclude_id: Optional[str]) -> bool:
        account_type = proposed.account_type

        if proposed.customer_type == CustomerType.EMPRESARIAL:
            return bool(proposed.holders) and account_type not in (
                AccountType.AHORRO, AccountType.PLAZO_FIJO
            )

        if account_type in (AccountType.AHORRO, AccountType.CORRIENTE):
            return not any(
                account.account_type == account_type and account.id != exclude_id
                for account in accounts
            )

        if account_type == AccountType.PLAZO_FIJO:
            return proposed.customer_type == CustomerType.PERSONAL

        return False
