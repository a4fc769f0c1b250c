"""
Reporting endpoints
"""

from fastapi import APIRouter, Depends

from .dependencies import AccountSystem, get_account_system
from .schemas import (
    ReportOperationsRequest, ReportProductRequest,
    operations_report_to_dict, product_row_to_dict
)


router = APIRouter()


@router.post("/operations")
async def report_operations(
    request: ReportOperationsRequest,
    system: AccountSystem = Depends(get_account_system)
):
    """Average daily amount moved this month by a national id"""
    report = await system.report_engine.report_account(request.national_id)
    return operations_report_to_dict(report)


@router.post("/products")
async def report_products(
    request: ReportProductRequest,
    system: AccountSystem = Depends(get_account_system)
):
    """Commissioned transactions per account type within a period"""
    rows = await system.report_engine.report_product(request.start_date, request.end_date)
    return {"transactions": [product_row_to_dict(row) for row in rows]}
