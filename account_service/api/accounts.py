"""
Account management and transaction endpoints
"""

from fastapi import APIRouter, Depends, Response, status

from .dependencies import AccountSystem, get_account_system
from .schemas import (
    CreateAccountRequest, UpdateAccountRequest, DepositRequest, WithdrawRequest,
    account_to_dict
)
from ..logging_config import get_logger

logger = get_logger("account_service.api")

router = APIRouter()


@router.get("")
async def list_accounts(system: AccountSystem = Depends(get_account_system)):
    """List all accounts"""
    logger.info("Starting list accounts")
    accounts = await system.account_service.list_accounts()
    return {"accounts": [account_to_dict(account) for account in accounts]}


@router.get("/{account_id}")
async def get_account(
    account_id: str,
    system: AccountSystem = Depends(get_account_system)
):
    """Get account details"""
    logger.info(f"Starting get for account ID: {account_id}")
    account = await system.account_service.get_account(account_id)
    return account_to_dict(account)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_account(
    request: CreateAccountRequest,
    system: AccountSystem = Depends(get_account_system)
):
    """Open a new account"""
    logger.info("Starting create account")
    account = await system.account_service.create_account(
        customer_id=request.customer_id,
        national_id=request.national_id,
        customer_type=request.customer_type,
        account_type=request.account_type,
        balance=request.balance,
        client_type=request.client_type,
        monthly_limit=request.monthly_limit,
        last_deposit_date=request.last_deposit_date,
        holders=request.holders
    )
    return account_to_dict(account)


@router.put("/{account_id}")
async def update_account(
    account_id: str,
    request: UpdateAccountRequest,
    system: AccountSystem = Depends(get_account_system)
):
    """Update an account"""
    logger.info(f"Starting update account ID: {account_id}")
    account = await system.account_service.update_account(
        account_id,
        account_type=request.account_type,
        customer_type=request.customer_type,
        balance=request.balance,
        monthly_limit=request.monthly_limit,
        last_deposit_date=request.last_deposit_date,
        holders=request.holders
    )
    return account_to_dict(account)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    account_id: str,
    system: AccountSystem = Depends(get_account_system)
):
    """Delete an account"""
    logger.info(f"Starting delete account ID: {account_id}")
    await system.account_service.delete_account(account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{account_id}/deposit")
async def deposit(
    account_id: str,
    request: DepositRequest,
    system: AccountSystem = Depends(get_account_system)
):
    """Transfer money from the origin into this account"""
    logger.info(f"Starting deposit into account ID: {account_id}")
    account = await system.transaction_engine.deposit(
        account_id,
        request.amount,
        origin_customer_id=request.customer_id,
        origin_account_id=request.origin_account_id
    )
    return account_to_dict(account)


@router.post("/{account_id}/withdraw")
async def withdraw_from_account(
    account_id: str,
    request: WithdrawRequest,
    system: AccountSystem = Depends(get_account_system)
):
    """Withdraw from a specific account"""
    logger.info(f"Starting withdraw from account ID: {account_id}")
    account = await system.transaction_engine.withdraw_from_account(account_id, request.amount)
    return account_to_dict(account)


@router.post("/customers/{customer_id}/withdraw")
async def withdraw(
    customer_id: str,
    request: WithdrawRequest,
    system: AccountSystem = Depends(get_account_system)
):
    """Withdraw from the customer's first account"""
    logger.info(f"Starting withdraw for customer ID: {customer_id}")
    account = await system.transaction_engine.withdraw(customer_id, request.amount)
    return account_to_dict(account)
