from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from studio_api.core.database import get_db
from studio_api.core.deps import get_slot_generator
from studio_api.core.errors import NotFound
from studio_api.models.employee import Employee
from studio_api.schemas.availability import SlotOut
from studio_api.services.slots import SlotGenerator

router = APIRouter()


@router.get("/{employee_id}", response_model=list[SlotOut])
def get_availability(
    employee_id: UUID,
    date: str = Query(..., description="Business-local day, YYYY-MM-DD"),
    db: Session = Depends(get_db),
    slots: SlotGenerator = Depends(get_slot_generator),
):
    if not db.get(Employee, employee_id):
        raise NotFound("Employee not found")
    return [SlotOut(start=s.start, end=s.end) for s in slots.get_availability(employee_id, date)]
