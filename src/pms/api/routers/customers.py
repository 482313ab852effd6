from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Response

from pms.api.deps import get_container
from pms.api.schemas import CustomerCreate, CustomerOut, CustomerUpdate
from pms.application.container import AppContainer

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=list[CustomerOut])
def list_customers(container: AppContainer = Depends(get_container)):
    return [CustomerOut.from_record(c) for c in container.customers.list_customers()]


@router.get("/search", response_model=list[CustomerOut])
def search_customers(q: Optional[str] = None, container: AppContainer = Depends(get_container)):
    return [CustomerOut.from_record(c) for c in container.customers.search_customers(q)]


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: int, container: AppContainer = Depends(get_container)):
    return CustomerOut.from_record(container.customers.get_customer(customer_id))


@router.post("", response_model=CustomerOut, status_code=201)
def create_customer(payload: CustomerCreate, container: AppContainer = Depends(get_container)):
    return CustomerOut.from_record(container.customers.add_customer(payload.model_dump()))


@router.patch("/{customer_id}", response_model=CustomerOut)
def update_customer(customer_id: int, payload: CustomerUpdate, container: AppContainer = Depends(get_container)):
    customer = container.customers.update_customer(customer_id, payload.model_dump(exclude_unset=True))
    return CustomerOut.from_record(customer)


@router.delete("/{customer_id}", status_code=204)
def delete_customer(customer_id: int, container: AppContainer = Depends(get_container)):
    container.customers.delete_customer(customer_id)
    return Response(status_code=204)
