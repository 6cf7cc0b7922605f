from datetime import date

from fastapi import APIRouter, HTTPException, status, Request

from fleet_admin.routers.schedules import weekday_name
from fleet_admin.utils.errors import StoreUnavailable

router = APIRouter()

TODAY_SCHEDULES_LIMIT = 5


def count_where(records, key, value):
    return sum(1 for r in records if r.get(key) == value)


def build_stats(buses, ambulances, routes, assignments, schedules, today: date):
    """Aggregate the counters shown on the admin dashboard."""
    today_name = weekday_name(today)
    todays_schedules = [s for s in schedules if s.get("isActive") and today_name in s.get("days", [])]
    total_stops = sum(len(r.get("stops", [])) for r in routes)

    return {
        "buses": {
            "total": len(buses),
            "active": count_where(buses, "status", "active"),
            "maintenance": count_where(buses, "status", "maintenance"),
            "byType": {t: count_where(buses, "type", t) for t in ("teacher", "student", "staff")},
        },
        "ambulances": {
            "total": len(ambulances),
            "active": count_where(ambulances, "status", "active"),
            "maintenance": count_where(ambulances, "status", "maintenance"),
        },
        "routes": {
            "total": len(routes),
            "assignedBuses": sum(len(r.get("assignedBuses", [])) for r in routes),
            # round half up, as the dashboard displays it
            "averageStops": int(total_stops / len(routes) + 0.5) if routes else 0,
        },
        "assignments": {
            "total": len(assignments),
            "monthly": sum(1 for a in assignments if a.get("isMonthly")),
            "totalPassengers": sum(a.get("passengerCount", 0) for a in assignments),
        },
        "schedules": {
            "total": len(schedules),
            "active": sum(1 for s in schedules if s.get("isActive")),
            "monday": sum(1 for s in schedules if "Monday" in s.get("days", [])),
            "weekend": sum(1 for s in schedules if {"Saturday", "Sunday"} & set(s.get("days", []))),
            "today": today_name,
            "todaySchedules": todays_schedules[:TODAY_SCHEDULES_LIMIT],
        },
    }


@router.get("/stats", tags=["Dashboard"])
def get_dashboard_stats(request: Request):
    db = request.app.state.db
    try:
        return build_stats(
            db.buses_db.get_all(),
            db.ambulances_db.get_all(),
            db.routes_db.get_all(),
            db.assignments_db.get_all(),
            db.schedules_db.get_all(),
            date.today(),
        )
    except StoreUnavailable:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to read dashboard data")
