"""
Commission rule endpoints
"""

from fastapi import APIRouter, Depends, Response, status

from .dependencies import AccountSystem, get_account_system
from .schemas import CreateCommissionRequest, UpdateCommissionRequest, commission_to_dict
from ..models import AccountType


router = APIRouter()


@router.get("")
async def list_commissions(system: AccountSystem = Depends(get_account_system)):
    """List all commission rules"""
    rules = await system.commission_service.list_commissions()
    return {"commissions": [commission_to_dict(rule) for rule in rules]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_commission(
    request: CreateCommissionRequest,
    system: AccountSystem = Depends(get_account_system)
):
    """Create the commission rule for an account type"""
    rule = await system.commission_service.create_commission(
        request.account_type, request.monto, customer_id=request.customer_id
    )
    return commission_to_dict(rule)


@router.put("/{account_type}")
async def update_commission(
    account_type: AccountType,
    request: UpdateCommissionRequest,
    system: AccountSystem = Depends(get_account_system)
):
    """Change the commission for an account type"""
    rule = await system.commission_service.update_commission(account_type, request.monto)
    return commission_to_dict(rule)


@router.delete("/{commission_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_commission(
    commission_id: str,
    system: AccountSystem = Depends(get_account_system)
):
    """Delete a commission rule"""
    await system.commission_service.delete_commission(commission_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
