"""
Shared fixtures: an in-memory backend that speaks the {success, data, message}
envelope, and a factory for screen controllers wired to it.
"""
from __future__ import annotations

import copy
import threading
from typing import Any, Dict, List, Optional

import pytest

from core.errors import ApiError
from core.http_client import ApiEnvelope
from core.notify import Notifier
from core.resource_registry import get_resource
from core.screen import ScreenController

# register the resources
import schemas.students_schema  # noqa: F401
import schemas.library_history_schema  # noqa: F401
import schemas.staff_schema  # noqa: F401
import schemas.fees_schema  # noqa: F401


class Hold:
    """Blocks one GET until released; started is set once the request is in flight."""

    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()


class FakeBackend:
    """
    Stands in for ApiClient. Paths follow the backend's /<collection>/<op>[/<id>]
    layout; responses are computed when the request arrives.
    """

    def __init__(self, collections: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.collections = copy.deepcopy(collections or {})
        self.calls: List[tuple] = []
        self.fail: Dict[tuple, Any] = {}
        self._holds: List[Hold] = []
        self._lock = threading.Lock()
        self._next_id = 0

    def hold_next_get(self) -> Hold:
        hold = Hold()
        with self._lock:
            self._holds.append(hold)
        return hold

    def calls_for(self, method: str) -> List[tuple]:
        with self._lock:
            return [c for c in self.calls if c[0] == method]

    def request(self, method, path, body=None, multipart=False, params=None) -> ApiEnvelope:
        with self._lock:
            self.calls.append((method, path, copy.deepcopy(body), multipart))
            hold = self._holds.pop(0) if method == "GET" and self._holds else None
        try:
            failure = self.fail.get((method, path))
            if isinstance(failure, Exception):
                raise failure
            if failure is not None:
                return ApiEnvelope.model_validate(failure)
            return self._handle(method, path, body)
        finally:
            if hold is not None:
                hold.started.set()
                hold.release.wait(5)

    def _handle(self, method, path, body) -> ApiEnvelope:
        parts = path.strip("/").split("/")
        coll, op = parts[0], parts[1]
        rid = parts[2] if len(parts) > 2 else None
        with self._lock:
            items = self.collections.setdefault(coll, [])
            if method == "GET" and op == "all":
                return ApiEnvelope(success=True, data=copy.deepcopy(items))
            if method == "GET" and op == "profile":
                for r in items:
                    if r["_id"] == rid:
                        return ApiEnvelope(success=True, data=copy.deepcopy(r))
                raise ApiError("Record not found", status=404)
            if method == "POST" and op == "create":
                self._next_id += 1
                new = dict(copy.deepcopy(body), _id=f"{coll}-{self._next_id}")
                items.append(new)
                return ApiEnvelope(success=True, data=copy.deepcopy(new))
            if method == "PUT" and op == "update":
                for r in items:
                    if r["_id"] == rid:
                        r.update(copy.deepcopy(body))
                        return ApiEnvelope(success=True, data=copy.deepcopy(r))
                raise ApiError("Record not found", status=404)
            if method == "DELETE" and op == "delete":
                self.collections[coll] = [r for r in items if r["_id"] != rid]
                return ApiEnvelope(success=True, message="Deleted successfully")
        raise ApiError("Request failed with status code 404", status=404)

    def get(self, path, **kwargs):
        return self.request("GET", path, **kwargs)

    def post(self, path, body=None, **kwargs):
        return self.request("POST", path, body=body, **kwargs)

    def put(self, path, body=None, **kwargs):
        return self.request("PUT", path, body=body, **kwargs)

    def delete(self, path, **kwargs):
        return self.request("DELETE", path, **kwargs)


STUDENTS = [
    {
        "_id": "s1",
        "name": "Asha Rao",
        "dateOfBirth": "2010-04-12T00:00:00.000Z",
        "gender": "Female",
        "class": "8th Grade",
        "contactInfo": {
            "phone": "9876543210",
            "email": "asha@example.com",
            "address": {"street": "12 Lake Rd", "city": "Pune", "state": "MH", "postalCode": "411001"},
        },
        "guardian": {"name": "Ravi Rao", "relationship": "Father", "phone": "9876500000", "email": "ravi@example.com"},
        "photo": {"url": "https://cdn.example.com/s1.png"},
    },
    {
        "_id": "s2",
        "name": "Kabir Shah",
        "dateOfBirth": "2011-01-30",
        "gender": "Male",
        "class": "7th Grade",
        "contactInfo": {"phone": "9123456780", "email": "kabir@example.com", "address": {}},
        "guardian": {"name": "Meera Shah"},
    },
]

LIBRARY = [
    {
        "_id": "l1",
        "student": {"_id": "s1", "name": "Asha Rao", "photo": {"url": "https://cdn.example.com/s1.png"}},
        "bookName": "Dune",
        "borrowDate": "2024-03-05T00:00:00.000Z",
        "returnDate": None,
        "status": "Borrowed",
    },
    {
        "_id": "l2",
        "student": "s2",
        "bookName": "Matilda",
        "borrowDate": "2024-02-01",
        "returnDate": "2024-02-20",
        "status": "Returned",
    },
]

STAFF = [
    {"_id": "t1", "name": "Nisha Iyer", "email": "nisha@example.com", "phone": "9000000001",
     "gender": "Female", "designation": "Teacher", "department": "Science", "joiningDate": "2019-06-01"},
    {"_id": "t2", "name": "Arjun Das", "email": "arjun@example.com", "phone": "9000000002",
     "gender": "Male", "designation": "Clerk", "joiningDate": "2021-08-15"},
]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend({"student": STUDENTS, "library": LIBRARY, "staff": STAFF, "fees": []})


@pytest.fixture
def notifier() -> Notifier:
    return Notifier(ttl_seconds=1.5)


@pytest.fixture
def make_controller(backend, notifier):
    made: List[ScreenController] = []
    pauses: List[float] = []

    def _make(resource_name: str, role: str = "admin", close_delay: float = 1.5) -> ScreenController:
        ctl = ScreenController(
            get_resource(resource_name),
            backend,
            notifier,
            role,
            close_delay=close_delay,
            pause=pauses.append,
        )
        ctl.pauses = pauses
        made.append(ctl)
        return ctl

    yield _make
    for ctl in made:
        ctl.unmount()
