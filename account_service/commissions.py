"""
Commission Management Module

Manages the commission charged per account type once a customer has used up
the free transaction allowance. There is at most one rule per account type.
"""

from decimal import Decimal
from typing import List, Optional

from .errors import AccountServiceError, BusinessRuleViolation, InternalError, NotFoundError
from .logging_config import get_logger, log_action
from .models import AccountType, CommissionRule, new_id, utc_now
from .repositories import CommissionStore

logger = get_logger("account_service.commissions")


class CommissionService:
    """Create, update, delete and look up commission rules"""

    def __init__(self, store: CommissionStore):
        self.store = store

    async def create_commission(self, account_type: AccountType, monto: Decimal,
                                customer_id: Optional[str] = None) -> CommissionRule:
        """
        Create the commission rule for an account type.

        Raises:
            BusinessRuleViolation: If a rule already exists for the type or monto is negative
        """
        self._check_monto(monto)
        try:
            if await self.store.find_by_account_type(account_type) is not None:
                logger.warning(f"Commission already exists for account type: {account_type.value}")
                raise BusinessRuleViolation(
                    f"Commission already exists for account type {account_type.value}"
                )

            now = utc_now()
            rule = CommissionRule(
                id=new_id(),
                created_at=now,
                updated_at=now,
                account_type=account_type,
                monto=monto,
                customer_id=customer_id
            )
            await self.store.save(rule)
        except AccountServiceError:
            raise
        except Exception as e:
            logger.error(f"Error creating commission: {e}", exc_info=True)
            raise InternalError("Error creating commission") from e

        log_action(logger, "info", "Commission created", action="commission_created",
                   resource=rule.id, extra={"account_type": account_type.value, "monto": str(monto)})
        return rule

    async def update_commission(self, account_type: AccountType, monto: Decimal) -> CommissionRule:
        """Change the commission amount of the rule for an account type"""
        self._check_monto(monto)
        try:
            rule = await self.store.find_by_account_type(account_type)
            if rule is None:
                raise NotFoundError(f"No commission configured for account type {account_type.value}")
            rule.monto = monto
            await self.store.save(rule)
        except AccountServiceError:
            raise
        except Exception as e:
            logger.error(f"Error updating commission for account type {account_type.value}: {e}")
            raise InternalError("Error updating commission") from e

        log_action(logger, "info", "Commission updated", action="commission_updated",
                   resource=rule.id, extra={"account_type": account_type.value, "monto": str(monto)})
        return rule

    async def delete_commission(self, rule_id: str) -> None:
        try:
            rule = await self.store.get(rule_id)
            if rule is None:
                logger.warning(f"Commission with ID {rule_id} not found")
                raise NotFoundError(f"Commission {rule_id} not found")
            await self.store.delete(rule)
        except AccountServiceError:
            raise
        except Exception as e:
            logger.error(f"Error deleting commission with ID {rule_id}: {e}")
            raise InternalError("Error deleting commission") from e
        logger.info(f"Commission with ID {rule_id} successfully deleted")

    async def list_commissions(self) -> List[CommissionRule]:
        try:
            return await self.store.list_all()
        except Exception as e:
            logger.error(f"Error retrieving commissions: {e}")
            raise InternalError("An error occurred while retrieving commissions") from e

    async def get_for_account_type(self, account_type: AccountType) -> Optional[CommissionRule]:
        """Return the rule for an account type, or None when none is configured"""
        return await self.store.find_by_account_type(account_type)

    @staticmethod
    def _check_monto(monto: Decimal) -> None:
        if monto < 0:
            raise BusinessRuleViolation("Commission amount cannot be negative")
