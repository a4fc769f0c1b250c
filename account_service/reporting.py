"""
Reporting Engine Module

Aggregates the transaction ledger into operational reports:

- operations report: average daily amount moved by a national id during
  the current calendar month
- product report: every commissioned transaction in a date range, tagged
  with the account type that originated it
"""

from decimal import Decimal, ROUND_HALF_UP
from datetime import date
from dataclasses import dataclass
from typing import Callable, List
import calendar

from .errors import AccountServiceError, BusinessRuleViolation, InternalError
from .logging_config import get_logger
from .models import AccountType
from .repositories import AccountStore, TransactionLedger

logger = get_logger("account_service.reporting")

CENTS = Decimal("0.01")


@dataclass
class OperationsReport:
    """Average daily transaction amount for one national id"""
    national_id: str
    amount: Decimal
    report_date: date


@dataclass
class ProductReportRow:
    """One commissioned transaction"""
    account_type: AccountType
    customer_id: str
    commission_amount: Decimal


class ReportEngine:
    """Ledger-backed reports"""

    def __init__(self, accounts: AccountStore, ledger: TransactionLedger,
                 today: Callable[[], date] = date.today):
        self.accounts = accounts
        self.ledger = ledger
        self._today = today

    async def report_account(self, national_id: str) -> OperationsReport:
        """
        Average daily amount for the current month.

        Sums every ledger amount recorded under the national id between the
        first and last day of the month and divides by the month length.

        Raises:
            BusinessRuleViolation: If there are no transactions this month
        """
        today = self._today()
        days_in_month = calendar.monthrange(today.year, today.month)[1]
        start = today.replace(day=1)
        end = today.replace(day=days_in_month)

        try:
            records = await self.ledger.find_by_national_id(national_id)
        except Exception as e:
            logger.error(f"Internal error generating the report: {e}", exc_info=True)
            raise InternalError("Error generating operations report") from e

        amounts = [r.amount for r in records if start <= r.transaction_date <= end]
        if not amounts:
            logger.warning(f"No transactions found for current month for {national_id}")
            raise BusinessRuleViolation("No transactions found for current month")

        average = (sum(amounts, Decimal("0")) / days_in_month).quantize(CENTS, rounding=ROUND_HALF_UP)
        return OperationsReport(national_id=national_id, amount=average, report_date=today)

    async def report_product(self, start_date: date, end_date: date) -> List[ProductReportRow]:
        """
        Commissioned transactions per account between two dates, inclusive.

        An empty list is a valid report.
        """
        if start_date > end_date:
            raise BusinessRuleViolation("Start date must not be after end date")

        rows = []
        seen_customers = set()
        try:
            for account in await self.accounts.list_all():
                # Accounts come oldest first; entries without an origin account
                # are attributed to the customer's first account only
                first_of_customer = account.customer_id not in seen_customers
                seen_customers.add(account.customer_id)

                entries = await self.ledger.find_by_customer_id_origin(account.customer_id)
                for entry in entries:
                    if entry.account_id_origin is None:
                        if not first_of_customer:
                            continue
                    elif entry.account_id_origin != account.id:
                        continue
                    if not start_date <= entry.transaction_date <= end_date:
                        continue
                    if not entry.is_commissioned:
                        continue
                    rows.append(ProductReportRow(
                        account_type=account.account_type,
                        customer_id=entry.customer_id_origin,
                        commission_amount=entry.commission_amount
                    ))
        except AccountServiceError:
            raise
        except Exception as e:
            logger.error(f"Internal error generating the report: {e}", exc_info=True)
            raise InternalError("Error generating product report") from e

        if not rows:
            logger.info("No commissionable transactions were found in the specified period")
        return rows
