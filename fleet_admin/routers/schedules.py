import logging
import time
from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, HTTPException, Query, status, Request
from pydantic import BaseModel, Field

from fleet_admin.utils.data_manager import lookup_name
from fleet_admin.utils.errors import DuplicateRecord, RecordNotFound, StoreUnavailable

logger = logging.getLogger(__name__)

router = APIRouter()

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
Weekday = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


class ScheduleBase(BaseModel):
    busId: str
    busName: str = ""
    routeId: str
    routeName: str = ""
    departureTime: str
    arrivalTime: str
    days: List[Weekday] = Field(..., min_length=1)
    isActive: bool = True


class ScheduleCreate(ScheduleBase):
    id: Optional[str] = None


class ScheduleUpdate(ScheduleBase):
    id: str


def fill_names(schedule: dict, db) -> dict:
    # busName and routeName are copied at write time and never refreshed afterwards
    if not schedule.get("busName"):
        schedule["busName"] = lookup_name(db.buses_db, schedule["busId"])
    if not schedule.get("routeName"):
        schedule["routeName"] = lookup_name(db.routes_db, schedule["routeId"])
    return schedule


@router.get("", tags=["Schedules"])
def get_all_schedules(request: Request):
    try:
        return request.app.state.db.schedules_db.get_all()
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to read schedules data")


@router.get("/today", tags=["Schedules"])
def get_todays_schedules(request: Request, day: Optional[Weekday] = None):
    """Active schedules running on ``day`` (defaults to today's weekday)."""
    day = day or weekday_name(date.today())
    try:
        schedules = request.app.state.db.schedules_db.get_all()
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to read schedules data")
    return [s for s in schedules if s.get("isActive") and day in s.get("days", [])]


@router.post("", status_code=status.HTTP_201_CREATED, tags=["Schedules"])
def add_schedule(schedule: ScheduleCreate, request: Request):
    new_schedule = schedule.model_dump(exclude_none=True)
    new_schedule.setdefault("id", f"sched-{int(time.time() * 1000)}")
    try:
        fill_names(new_schedule, request.app.state.db)
        request.app.state.db.schedules_db.append(new_schedule)
    except DuplicateRecord:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Schedule with ID {new_schedule['id']} already exists")
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create schedule")
    logger.info(f"Schedule {new_schedule['id']} created")
    return new_schedule


@router.put("", tags=["Schedules"])
def update_schedule(schedule: ScheduleUpdate, request: Request):
    updated_schedule = schedule.model_dump()
    try:
        fill_names(updated_schedule, request.app.state.db)
        request.app.state.db.schedules_db.replace_by_key(schedule.id, updated_schedule)
    except RecordNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Schedule not found")
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update schedule")
    logger.info(f"Schedule {schedule.id} updated")
    return updated_schedule


@router.delete("", tags=["Schedules"])
def delete_schedule(request: Request, schedule_id: Optional[str] = Query(None, alias="id")):
    if not schedule_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Schedule ID required")
    try:
        request.app.state.db.schedules_db.delete_by_key(schedule_id)
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete schedule")
    logger.info(f"Schedule {schedule_id} deleted")
    return {"success": True}
