from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Response

from pms.api.deps import get_container
from pms.api.schemas import MedicineCreate, MedicineOut, MedicineUpdate
from pms.application.container import AppContainer

router = APIRouter(prefix="/medicines", tags=["medicines"])


@router.get("", response_model=list[MedicineOut])
def list_medicines(container: AppContainer = Depends(get_container)):
    return [MedicineOut.from_record(m) for m in container.inventory.list_medicines()]


@router.get("/search", response_model=list[MedicineOut])
def search_medicines(q: Optional[str] = None, container: AppContainer = Depends(get_container)):
    return [MedicineOut.from_record(m) for m in container.inventory.search_medicines(q)]


@router.get("/low-stock", response_model=list[MedicineOut])
def low_stock_medicines(container: AppContainer = Depends(get_container)):
    return [MedicineOut.from_record(m) for m in container.inventory.low_stock_medicines()]


@router.get("/{medicine_id}", response_model=MedicineOut)
def get_medicine(medicine_id: int, container: AppContainer = Depends(get_container)):
    return MedicineOut.from_record(container.inventory.get_medicine(medicine_id))


@router.post("", response_model=MedicineOut, status_code=201)
def create_medicine(payload: MedicineCreate, container: AppContainer = Depends(get_container)):
    return MedicineOut.from_record(container.inventory.add_medicine(payload.model_dump()))


@router.patch("/{medicine_id}", response_model=MedicineOut)
def update_medicine(medicine_id: int, payload: MedicineUpdate, container: AppContainer = Depends(get_container)):
    medicine = container.inventory.update_medicine(medicine_id, payload.model_dump(exclude_unset=True))
    return MedicineOut.from_record(medicine)


@router.delete("/{medicine_id}", status_code=204)
def delete_medicine(medicine_id: int, container: AppContainer = Depends(get_container)):
    container.inventory.delete_medicine(medicine_id)
    return Response(status_code=204)
