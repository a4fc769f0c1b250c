"""
Repository Module

Typed async access to accounts, commission rules and the transaction
ledger on top of an AsyncStorageInterface. Repositories map records to
domain objects and nothing else; business rules live in the services.
"""

from typing import List, Optional

from .async_storage import AsyncStorageInterface
from .models import Account, AccountType, CommissionRule, TransactionRecord


class AccountStore:
    """CRUD and query access to account records"""

    def __init__(self, storage: AsyncStorageInterface, table: str = "accounts"):
        self.storage = storage
        self.table = table

    async def get(self, account_id: str) -> Optional[Account]:
        data = await self.storage.load(self.table, account_id)
        if data:
            return Account.from_dict(data)
        return None

    async def save(self, account: Account) -> Account:
        account.touch()
        await self.storage.save(self.table, account.id, account.to_dict())
        return account

    async def delete(self, account: Account) -> bool:
        return await self.storage.delete(self.table, account.id)

    async def list_all(self) -> List[Account]:
        return [Account.from_dict(data) for data in await self.storage.load_all(self.table)]

    async def find_by_customer_id(self, customer_id: str) -> List[Account]:
        records = await self.storage.find(self.table, {"customer_id": customer_id})
        return [Account.from_dict(data) for data in records]

    async def find_by_national_id(self, national_id: str) -> List[Account]:
        records = await self.storage.find(self.table, {"national_id": national_id})
        return [Account.from_dict(data) for data in records]

    async def find_by_account_type(self, account_type: AccountType) -> List[Account]:
        records = await self.storage.find(self.table, {"account_type": account_type.value})
        return [Account.from_dict(data) for data in records]

    async def find_first_by_customer_id(self, customer_id: str) -> Optional[Account]:
        """
        Return the oldest account of a customer.

        Customers holding several accounts get whichever was opened first;
        callers that need a specific account should load it by id.
        """
        accounts = await self.find_by_customer_id(customer_id)
        return accounts[0] if accounts else None


class CommissionStore:
    """CRUD access to commission rules"""

    def __init__(self, storage: AsyncStorageInterface, table: str = "commissions"):
        self.storage = storage
        self.table = table

    async def get(self, rule_id: str) -> Optional[CommissionRule]:
        data = await self.storage.load(self.table, rule_id)
        if data:
            return CommissionRule.from_dict(data)
        return None

    async def save(self, rule: CommissionRule) -> CommissionRule:
        rule.touch()
        await self.storage.save(self.table, rule.id, rule.to_dict())
        return rule

    async def delete(self, rule: CommissionRule) -> bool:
        return await self.storage.delete(self.table, rule.id)

    async def list_all(self) -> List[CommissionRule]:
        return [CommissionRule.from_dict(data) for data in await self.storage.load_all(self.table)]

    async def find_by_account_type(self, account_type: AccountType) -> Optional[CommissionRule]:
        records = await self.storage.find(self.table, {"account_type": account_type.value})
        return CommissionRule.from_dict(records[0]) if records else None


class TransactionLedger:
    """Append-only log of deposits and withdrawals"""

    def __init__(self, storage: AsyncStorageInterface, table: str = "transactions"):
        self.storage = storage
        self.table = table

    async def save(self, record: TransactionRecord) -> TransactionRecord:
        if await self.storage.load(self.table, record.id) is not None:
            raise ValueError(f"Ledger entry {record.id} already written")
        await self.storage.save(self.table, record.id, record.to_dict())
        return record

    async def find_by_national_id(self, national_id: str) -> List[TransactionRecord]:
        records = await self.storage.find(self.table, {"national_id": national_id})
        return [TransactionRecord.from_dict(data) for data in records]

    async def find_by_customer_id_origin(self, customer_id: str) -> List[TransactionRecord]:
        records = await self.storage.find(self.table, {"customer_id_origin": customer_id})
        return [TransactionRecord.from_dict(data) for data in records]

    async def list_all(self) -> List[TransactionRecord]:
        return [TransactionRecord.from_dict(data) for data in await self.storage.load_all(self.table)]
