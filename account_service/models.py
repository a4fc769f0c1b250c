"""
Domain Model Module

Accounts, commission rules and ledger entries, with their storage
round-trip. All monetary values are Decimal.
"""

from decimal import Decimal
from datetime import date, datetime, timezone
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum
import uuid

from .storage import StorageRecord


class AccountType(Enum):
    """Banking products"""
    AHORRO = "AHORRO"          # Savings
    CORRIENTE = "CORRIENTE"    # Checking
    PLAZO_FIJO = "PLAZO_FIJO"  # Term deposit


class CustomerType(Enum):
    """Customer classification"""
    PERSONAL = "PERSONAL"
    EMPRESARIAL = "EMPRESARIAL"  # Business


class ClientType(Enum):
    """Premium client tiers; standard clients carry no tier"""
    VIP = "VIP"
    PYME = "PYME"  # Small business


class TransactionType(Enum):
    """Ledger entry types"""
    DEPOSITO = "DEPOSITO"
    RETIRO = "RETIRO"


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_date(value: Any) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(value)


@dataclass
class Account(StorageRecord):
    """
    Customer account.

    limit_transaction counts the deposits and withdrawals charged to this
    account; once it exceeds the free allowance every further operation is
    charged the commission configured for the account type.
    """
    customer_id: str
    national_id: str
    customer_type: CustomerType
    account_type: AccountType
    balance: Decimal
    client_type: Optional[ClientType] = None
    monthly_limit: Optional[int] = None
    last_deposit_date: Optional[date] = None
    holders: List[str] = field(default_factory=list)
    limit_transaction: int = 0

    @property
    def is_premium(self) -> bool:
        """Check if the account belongs to a VIP or PYME client"""
        return self.client_type in (ClientType.VIP, ClientType.PYME)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        data = dict(data)
        data['customer_type'] = CustomerType(data['customer_type'])
        data['account_type'] = AccountType(data['account_type'])
        data['balance'] = Decimal(data['balance'])
        if data.get('client_type'):
            data['client_type'] = ClientType(data['client_type'])
        data['last_deposit_date'] = _parse_date(data.get('last_deposit_date'))
        return super().from_dict(data)


@dataclass
class CommissionRule(StorageRecord):
    """Commission charged per transaction once the free allowance is used up"""
    account_type: AccountType
    monto: Decimal
    customer_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CommissionRule':
        data = dict(data)
        data['account_type'] = AccountType(data['account_type'])
        data['monto'] = Decimal(data['monto'])
        return super().from_dict(data)


@dataclass
class TransactionRecord(StorageRecord):
    """Immutable ledger entry written once per deposit or withdrawal"""
    customer_id_origin: str
    amount: Decimal
    commission_amount: Decimal
    transaction_date: date
    transaction_type: TransactionType
    national_id: str
    customer_id_destination: Optional[str] = None
    account_id_origin: Optional[str] = None
    account_id_destination: Optional[str] = None

    @property
    def is_commissioned(self) -> bool:
        return self.commission_amount > 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TransactionRecord':
        data = dict(data)
        data['amount'] = Decimal(data['amount'])
        data['commission_amount'] = Decimal(data['commission_amount'])
        data['transaction_date'] = _parse_date(data['transaction_date'])
        data['transaction_type'] = TransactionType(data['transaction_type'])
        return super().from_dict(data)
