"""
Pydantic schemas for API requests and responses
"""

from decimal import Decimal
from datetime import date
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from ..models import Account, AccountType, ClientType, CommissionRule, CustomerType
from ..reporting import OperationsReport, ProductReportRow


# Account schemas
class CreateAccountRequest(BaseModel):
    customer_id: str
    national_id: str = Field(..., description="National identity document (dni)")
    customer_type: CustomerType
    account_type: AccountType
    balance: Decimal = Field(..., ge=0)
    client_type: Optional[ClientType] = Field(None, description="VIP, PYME or omitted for standard clients")
    monthly_limit: Optional[int] = None
    last_deposit_date: Optional[date] = None
    holders: List[str] = Field(default_factory=list)


class UpdateAccountRequest(BaseModel):
    customer_type: CustomerType
    account_type: AccountType
    balance: Decimal = Field(..., ge=0)
    monthly_limit: Optional[int] = None
    last_deposit_date: Optional[date] = None
    holders: List[str] = Field(default_factory=list)


# Transaction schemas
class DepositRequest(BaseModel):
    amount: Decimal
    customer_id: Optional[str] = Field(None, description="Origin customer; their first account is debited")
    origin_account_id: Optional[str] = Field(None, description="Explicit origin account, overrides customer_id")


class WithdrawRequest(BaseModel):
    amount: Decimal


# Commission schemas
class CreateCommissionRequest(BaseModel):
    account_type: AccountType
    monto: Decimal
    customer_id: Optional[str] = None


class UpdateCommissionRequest(BaseModel):
    monto: Decimal


# Report schemas
class ReportOperationsRequest(BaseModel):
    national_id: str


class ReportProductRequest(BaseModel):
    start_date: date
    end_date: date


def account_to_dict(account: Account) -> Dict[str, Any]:
    return {
        "id": account.id,
        "customer_id": account.customer_id,
        "national_id": account.national_id,
        "customer_type": account.customer_type.value,
        "client_type": account.client_type.value if account.client_type else None,
        "account_type": account.account_type.value,
        "balance": str(account.balance),
        "monthly_limit": account.monthly_limit,
        "last_deposit_date": account.last_deposit_date.isoformat() if account.last_deposit_date else None,
        "holders": list(account.holders),
        "limit_transaction": account.limit_transaction,
        "created_at": account.created_at.isoformat(),
    }


def commission_to_dict(rule: CommissionRule) -> Dict[str, Any]:
    return {
        "id": rule.id,
        "account_type": rule.account_type.value,
        "monto": str(rule.monto),
        "customer_id": rule.customer_id,
    }


def operations_report_to_dict(report: OperationsReport) -> Dict[str, Any]:
    return {
        "national_id": report.national_id,
        "amount": str(report.amount),
        "report_date": report.report_date.isoformat(),
    }


def product_row_to_dict(row: ProductReportRow) -> Dict[str, Any]:
    return {
        "account_type": row.account_type.value,
        "customer_id": row.customer_id,
        "commission_amount": str(row.commission_amount),
    }
