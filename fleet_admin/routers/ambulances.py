import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, status, Request
from pydantic import BaseModel

from fleet_admin.utils.errors import RecordNotFound, StoreUnavailable

logger = logging.getLogger(__name__)

router = APIRouter()


# Ambulances are seeded into data/ambulances.json; the API only reads and edits them.
class Ambulance(BaseModel):
    id: str
    name: str
    status: Literal["active", "maintenance", "inactive"]
    emergencyContact: str


@router.get("", tags=["Ambulances"])
def get_all_ambulances(request: Request):
    try:
        return request.app.state.db.ambulances_db.get_all()
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to read ambulances data")


@router.put("", tags=["Ambulances"])
def update_ambulance(ambulance: Ambulance, request: Request):
    updated_ambulance = ambulance.model_dump()
    try:
        request.app.state.db.ambulances_db.replace_by_key(ambulance.id, updated_ambulance)
    except RecordNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ambulance not found")
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update ambulance")
    logger.info(f"Ambulance {ambulance.id} updated")
    return updated_ambulance
