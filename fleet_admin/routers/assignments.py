import logging
import time
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Query, status, Request
from pydantic import BaseModel, Field

from fleet_admin.utils.data_manager import lookup_name
from fleet_admin.utils.dates import assignment_end_date, parse_date
from fleet_admin.utils.errors import DuplicateRecord, StoreUnavailable

logger = logging.getLogger(__name__)

router = APIRouter()


class AssignmentCreate(BaseModel):
    id: Optional[str] = None
    busId: str
    busName: str = ""
    passengerType: Literal["student", "teacher", "staff"]
    passengerCount: int = Field(..., ge=0)
    startDate: str
    # Always recomputed from startDate and isMonthly
    endDate: Optional[str] = None
    isMonthly: bool
    routeId: str


@router.get("", tags=["Assignments"])
def get_all_assignments(request: Request):
    try:
        return request.app.state.db.assignments_db.get_all()
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to read assignments data")


@router.post("", status_code=status.HTTP_201_CREATED, tags=["Assignments"])
def add_assignment(assignment: AssignmentCreate, request: Request):
    try:
        start_date = parse_date(assignment.startDate).isoformat()
        end_date = assignment_end_date(start_date, assignment.isMonthly)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid startDate '{assignment.startDate}'")

    bus_name = assignment.busName
    if not bus_name:
        try:
            bus_name = lookup_name(request.app.state.db.buses_db, assignment.busId)
        except StoreUnavailable:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create assignment")

    new_assignment = {
        "id": assignment.id or f"assign-{int(time.time() * 1000)}",
        "busId": assignment.busId,
        "busName": bus_name,
        "passengerType": assignment.passengerType,
        "passengerCount": assignment.passengerCount,
        "startDate": start_date,
        "endDate": end_date,
        "isMonthly": assignment.isMonthly,
        "routeId": assignment.routeId,
    }
    try:
        request.app.state.db.assignments_db.append(new_assignment)
    except DuplicateRecord:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Assignment with ID {new_assignment['id']} already exists")
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create assignment")
    logger.info(f"Assignment {new_assignment['id']} created for bus {assignment.busId} until {end_date}")
    return new_assignment


@router.delete("", tags=["Assignments"])
def delete_assignment(request: Request, assignment_id: Optional[str] = Query(None, alias="id")):
    if not assignment_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Assignment ID required")
    try:
        request.app.state.db.assignments_db.delete_by_key(assignment_id)
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete assignment")
    logger.info(f"Assignment {assignment_id} deleted")
    return {"success": True}
