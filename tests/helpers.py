"""Builders and fakes shared by the test modules."""

from decimal import Decimal
from datetime import date

from account_service.models import Account, AccountType, CustomerType, new_id, utc_now

FIXED_TODAY = date(2024, 3, 15)


def build_account(customer_id="cust-1", account_type=AccountType.AHORRO,
                  customer_type=CustomerType.PERSONAL, balance="1000.00",
                  national_id="dni-1", **kwargs) -> Account:
    """Build an unsaved account with sensible defaults"""
    now = utc_now()
    return Account(
        id=kwargs.pop("id", new_id()),
        created_at=now,
        updated_at=now,
        customer_id=customer_id,
        national_id=national_id,
        customer_type=customer_type,
        account_type=account_type,
        balance=Decimal(balance),
        **kwargs
    )


class FakeCardClient:
    """Records eligibility checks and answers from a script"""

    def __init__(self, has_card=True, error=None):
        self.has_card = has_card
        self.error = error
        self.calls = []

    async def has_credit_card(self, customer_ids):
        self.calls.append(list(customer_ids))
        if self.error is not None:
            raise self.error
        return self.has_card

    async def close(self):
        pass
