"""Pytest configuration and shared fixtures."""

import pytest

from account_service.async_storage import AsyncInMemoryStorage
from account_service.commissions import CommissionService
from account_service.repositories import AccountStore, CommissionStore, TransactionLedger


@pytest.fixture
def storage():
    return AsyncInMemoryStorage()


@pytest.fixture
def account_store(storage):
    return AccountStore(storage)


@pytest.fixture
def commission_store(storage):
    return CommissionStore(storage)


@pytest.fixture
def ledger(storage):
    return TransactionLedger(storage)


@pytest.fixture
def commission_service(commission_store):
    return CommissionService(commission_store)
