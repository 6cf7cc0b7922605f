import logging
import time
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Query, status, Request
from pydantic import BaseModel

from fleet_admin.utils.errors import DuplicateRecord, RecordNotFound, StoreUnavailable

logger = logging.getLogger(__name__)

router = APIRouter()

BusType = Literal["teacher", "student", "staff"]
VehicleStatus = Literal["active", "maintenance", "inactive"]


class BusBase(BaseModel):
    name: str
    type: BusType
    capacity: int
    status: VehicleStatus
    registrationNumber: str
    currentRoute: Optional[str] = None


class BusCreate(BusBase):
    id: Optional[str] = None


class BusUpdate(BusBase):
    id: str


@router.get("", tags=["Buses"])
def get_all_buses(
    request: Request,
    bus_status: Optional[VehicleStatus] = Query(None, alias="status"),
    bus_type: Optional[BusType] = Query(None, alias="type"),
):
    try:
        buses = request.app.state.db.buses_db.get_all()
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to read buses data")
    if bus_status:
        buses = [b for b in buses if b.get("status") == bus_status]
    if bus_type:
        buses = [b for b in buses if b.get("type") == bus_type]
    return buses


@router.post("", status_code=status.HTTP_201_CREATED, tags=["Buses"])
def add_bus(bus: BusCreate, request: Request):
    new_bus = bus.model_dump(exclude_none=True)
    new_bus.setdefault("id", f"bus-{int(time.time() * 1000)}")
    try:
        request.app.state.db.buses_db.append(new_bus)
    except DuplicateRecord:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Bus with ID {new_bus['id']} already exists")
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create bus")
    logger.info(f"Bus {new_bus['id']} created")
    return new_bus


@router.put("", tags=["Buses"])
def update_bus(bus: BusUpdate, request: Request):
    updated_bus = bus.model_dump(exclude_none=True)
    try:
        request.app.state.db.buses_db.replace_by_key(bus.id, updated_bus)
    except RecordNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bus not found")
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update bus")
    logger.info(f"Bus {bus.id} updated")
    return updated_bus


@router.delete("", tags=["Buses"])
def delete_bus(request: Request, bus_id: Optional[str] = Query(None, alias="id")):
    if not bus_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Bus ID required")
    try:
        request.app.state.db.buses_db.delete_by_key(bus_id)
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete bus")
    logger.info(f"Bus {bus_id} deleted")
    return {"success": True}
