import logging
import time
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status, Request
from pydantic import BaseModel, field_validator

from fleet_admin.utils.errors import DuplicateRecord, RecordNotFound, StoreUnavailable

logger = logging.getLogger(__name__)

router = APIRouter()


class RouteBase(BaseModel):
    name: str
    startPoint: str
    endPoint: str
    stops: List[str] = []
    distance: str
    estimatedTime: str
    assignedBuses: List[str] = []

    @field_validator("stops")
    @classmethod
    def drop_blank_stops(cls, stops: List[str]) -> List[str]:
        return [s.strip() for s in stops if s.strip()]


class RouteCreate(RouteBase):
    id: Optional[str] = None


class RouteUpdate(RouteBase):
    id: str


@router.get("", tags=["Routes"])
def get_all_routes(request: Request):
    try:
        return request.app.state.db.routes_db.get_all()
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to read routes data")


@router.post("", status_code=status.HTTP_201_CREATED, tags=["Routes"])
def add_route(route: RouteCreate, request: Request):
    new_route = route.model_dump(exclude_none=True)
    new_route.setdefault("id", f"route-{int(time.time() * 1000)}")
    try:
        request.app.state.db.routes_db.append(new_route)
    except DuplicateRecord:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Route with ID {new_route['id']} already exists")
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create route")
    logger.info(f"Route {new_route['id']} created")
    return new_route


@router.put("", tags=["Routes"])
def update_route(route: RouteUpdate, request: Request):
    updated_route = route.model_dump()
    routes_db = request.app.state.db.routes_db
    try:
        # assignedBuses is write-once; a body without it keeps the stored list
        if "assignedBuses" not in route.model_fields_set:
            updated_route["assignedBuses"] = routes_db.get_by_key(route.id).get("assignedBuses", [])
        routes_db.replace_by_key(route.id, updated_route)
    except RecordNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Route not found")
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update route")
    logger.info(f"Route {route.id} updated")
    return updated_route


@router.delete("", tags=["Routes"])
def delete_route(request: Request, route_id: Optional[str] = Query(None, alias="id")):
    if not route_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Route ID required")
    try:
        request.app.state.db.routes_db.delete_by_key(route_id)
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete route")
    logger.info(f"Route {route_id} deleted")
    return {"success": True}
