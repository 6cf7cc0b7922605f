import tempfile
import unittest
from datetime import date
from pathlib import Path

from fastapi.testclient import TestClient

from fleet_admin.config import Settings
from fleet_admin.main import create_app
from fleet_admin.routers.dashboard import build_stats

MONDAY = date(2025, 1, 13)

BUSES = [
    {"id": "b1", "type": "student", "status": "active"},
    {"id": "b2", "type": "teacher", "status": "maintenance"},
    {"id": "b3", "type": "student", "status": "inactive"},
]
AMBULANCES = [
    {"id": "a1", "status": "active"},
    {"id": "a2", "status": "maintenance"},
]
ROUTES = [
    {"id": "r1", "stops": ["A", "B", "C"], "assignedBuses": ["b1", "b2"]},
    {"id": "r2", "stops": ["A", "B"], "assignedBuses": []},
]
ASSIGNMENTS = [
    {"id": "x1", "passengerCount": 30, "isMonthly": True},
    {"id": "x2", "passengerCount": 12, "isMonthly": False},
]
SCHEDULES = [
    {"id": "s1", "days": ["Monday", "Tuesday"], "isActive": True},
    {"id": "s2", "days": ["Saturday"], "isActive": True},
    {"id": "s3", "days": ["Monday"], "isActive": False},
]


class TestBuildStats(unittest.TestCase):

    def setUp(self):
        self.stats = build_stats(BUSES, AMBULANCES, ROUTES, ASSIGNMENTS, SCHEDULES, MONDAY)

    def test_bus_counts(self):
        self.assertEqual(self.stats["buses"]["total"], 3)
        self.assertEqual(self.stats["buses"]["active"], 1)
        self.assertEqual(self.stats["buses"]["maintenance"], 1)
        self.assertEqual(self.stats["buses"]["byType"], {"teacher": 1, "student": 2, "staff": 0})

    def test_route_counts(self):
        self.assertEqual(self.stats["routes"]["assignedBuses"], 2)
        # 2.5 rounds up
        self.assertEqual(self.stats["routes"]["averageStops"], 3)

    def test_assignment_counts(self):
        self.assertEqual(self.stats["assignments"]["totalPassengers"], 42)
        self.assertEqual(self.stats["assignments"]["monthly"], 1)

    def test_schedule_counts(self):
        schedules = self.stats["schedules"]
        self.assertEqual(schedules["active"], 2)
        self.assertEqual(schedules["monday"], 2)
        self.assertEqual(schedules["weekend"], 1)
        self.assertEqual(schedules["today"], "Monday")
        self.assertEqual([s["id"] for s in schedules["todaySchedules"]], ["s1"])

    def test_empty_collections(self):
        stats = build_stats([], [], [], [], [], MONDAY)
        self.assertEqual(stats["routes"]["averageStops"], 0)
        self.assertEqual(stats["assignments"]["totalPassengers"], 0)


class TestStatsEndpoint(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        settings = Settings(data_dir=Path(self.tmp.name), auth_disabled=True)
        self.client = TestClient(create_app(settings))

    def tearDown(self):
        self.tmp.cleanup()

    def test_stats_on_empty_store(self):
        response = self.client.get("/api/dashboard/stats")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["buses"]["total"], 0)


if __name__ == "__main__":
    unittest.main()
