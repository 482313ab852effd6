from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from pms.api.deps import get_container
from pms.api.schemas import SupplierCreate, SupplierOut, SupplierUpdate
from pms.application.container import AppContainer

router = APIRouter(prefix="/suppliers", tags=["suppliers"])


@router.get("", response_model=list[SupplierOut])
def list_suppliers(container: AppContainer = Depends(get_container)):
    return [SupplierOut.from_record(s) for s in container.suppliers.list_suppliers()]


@router.get("/{supplier_id}", response_model=SupplierOut)
def get_supplier(supplier_id: int, container: AppContainer = Depends(get_container)):
    return SupplierOut.from_record(container.suppliers.get_supplier(supplier_id))


@router.post("", response_model=SupplierOut, status_code=201)
def create_supplier(payload: SupplierCreate, container: AppContainer = Depends(get_container)):
    return SupplierOut.from_record(container.suppliers.add_supplier(payload.model_dump()))


@router.patch("/{supplier_id}", response_model=SupplierOut)
def update_supplier(supplier_id: int, payload: SupplierUpdate, container: AppContainer = Depends(get_container)):
    supplier = container.suppliers.update_supplier(supplier_id, payload.model_dump(exclude_unset=True))
    return SupplierOut.from_record(supplier)


@router.delete("/{supplier_id}", status_code=204)
def delete_supplier(supplier_id: int, container: AppContainer = Depends(get_container)):
    container.suppliers.delete_supplier(supplier_id)
    return Response(status_code=204)
