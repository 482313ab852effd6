from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from pms.api.deps import get_container
from pms.api.schemas import SaleCreate, SaleOut, SaleWithItemsOut
from pms.application.container import AppContainer

router = APIRouter(prefix="/sales", tags=["sales"])


@router.get("", response_model=list[SaleOut])
def list_sales(container: AppContainer = Depends(get_container)):
    return [SaleOut.from_record(s) for s in container.sales.list_sales()]


@router.get("/recent", response_model=list[SaleOut])
def recent_sales(limit: Optional[str] = None, container: AppContainer = Depends(get_container)):
    return [SaleOut.from_record(s) for s in container.sales.recent_sales(limit)]


@router.get("/{sale_id}", response_model=SaleWithItemsOut)
def get_sale(sale_id: int, container: AppContainer = Depends(get_container)):
    return SaleWithItemsOut.from_record(container.sales.get_sale(sale_id))


@router.post("", response_model=SaleWithItemsOut, status_code=201)
def create_sale(payload: SaleCreate, container: AppContainer = Depends(get_container)):
    sale = container.sales.create_sale(
        items=[it.model_dump() for it in payload.items],
        payment_method=payload.payment_method,
        customer_id=payload.customer_id,
        customer_name=payload.customer_name,
        discount_type=payload.discount_type,
        discount_value=payload.discount_value,
        submitted_totals=payload.submitted_totals(),
    )
    return SaleWithItemsOut.from_record(sale)
