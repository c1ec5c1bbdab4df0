import os
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi import FastAPI, File, Form, Header, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse, PlainTextResponse
from httpx import ASGITransport, AsyncClient

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ["PACT_API_BASE_URL"] = "http://backend"
os.environ["DISPLAY_TIMEZONE"] = "UTC"

from pactweb.core.deps import get_backend  # noqa: E402
from pactweb.main import app  # noqa: E402
from pactweb.services.backend_client import PactBackendClient  # noqa: E402


class BackendState:
    """In-memory stand-in for the pacts backend."""

    def __init__(self) -> None:
        self.users: dict[str, dict] = {}
        self.pacts: dict[str, dict] = {}
        self.activities: list[dict] = []
        self.user_logs: dict[tuple[str, str], list[dict]] = {}
        self.log_details: dict[str, dict] = {}
        self.progress: dict[str, list[dict]] = {}
        self.uploads: list[dict] = []
        self.joins: list[dict] = []
        self.requests: list[tuple[str, str, str | None]] = []
        self.failures: dict[tuple[str, str], tuple[int, dict | str]] = {}

    def add_pact(self, **overrides) -> dict:
        pact_id = overrides.pop("_id", None) or uuid.uuid4().hex[:24]
        pact = {
            "_id": pact_id,
            "title": "Daily Exercise Challenge",
            "description": "Move every day",
            "participants": [],
            "status": "active",
            "minDaysPerWeek": 3,
            "maxActivitiesPerUser": 2,
            "skipFine": 100,
            "leaveFine": 1000,
            "createdAt": "2024-05-01T00:00:00.000Z",
            "updatedAt": "2024-05-01T00:00:00.000Z",
        }
        pact.update(overrides)
        self.pacts[pact_id] = pact
        return pact

    def add_activity(self, pact_id: str, user_id: str, name: str = "Morning Run") -> dict:
        activity = {
            "_id": uuid.uuid4().hex[:24],
            "pactId": pact_id,
            "userId": user_id,
            "name": name,
            "numberOfDays": 3,
            "isPrimary": False,
            "createdAt": "2024-05-01T00:00:00.000Z",
            "updatedAt": "2024-05-01T00:00:00.000Z",
        }
        self.activities.append(activity)
        return activity

    def fail(self, method: str, path: str, status_code: int, body: dict | str) -> None:
        self.failures[(method, path)] = (status_code, body)

    def calls(self, method: str, path: str) -> list[tuple[str, str, str | None]]:
        return [r for r in self.requests if r[0] == method and r[1] == path]


def build_fake_backend(state: BackendState) -> FastAPI:
    fake = FastAPI()

    @fake.middleware("http")
    async def record(request: Request, call_next):
        key = (request.method, request.url.path)
        state.requests.append((request.method, request.url.path, request.headers.get("x-user-id")))
        if key in state.failures:
            status_code, body = state.failures[key]
            if isinstance(body, str):
                return PlainTextResponse(body, status_code=status_code)
            return JSONResponse(status_code=status_code, content=body)
        return await call_next(request)

    @fake.post("/user", status_code=201)
    async def create_user(body: dict) -> dict:
        if any(u["email"] == body["email"] for u in state.users.values()):
            raise HTTPException(status_code=409, detail="dup")
        user = {"_id": uuid.uuid4().hex[:24], **body, "createdAt": "2024-06-01T10:00:00.000Z"}
        state.users[user["_id"]] = user
        return user

    @fake.post("/user/join-pact")
    async def join_pact(body: dict) -> dict:
        state.joins.append(body)
        pact = state.pacts[body["pactId"]]
        user = state.users.get(body["userId"], {"_id": body["userId"], "name": "", "email": "", "phone": ""})
        pact["participants"].append(user)
        return {"ok": True}

    @fake.get("/pact/active")
    async def active_pacts() -> list[dict]:
        return [p for p in state.pacts.values() if p["status"] == "active"]

    @fake.get("/pact/{pact_id}")
    async def get_pact(pact_id: str):
        if pact_id not in state.pacts:
            return JSONResponse(status_code=404, content={"message": "Pact not found", "statusCode": 404})
        return state.pacts[pact_id]

    @fake.post("/pact", status_code=201)
    async def create_pact(body: dict) -> dict:
        return state.add_pact(**body)

    @fake.get("/activity")
    async def list_activities(pactId: str, userId: str | None = None) -> list[dict]:
        rows = [a for a in state.activities if a["pactId"] == pactId]
        if userId is not None:
            rows = [a for a in rows if a["userId"] == userId]
        return rows

    @fake.post("/activity", status_code=201)
    async def create_activity(body: dict) -> dict:
        activity = state.add_activity(body["pactId"], body["userId"], body["name"])
        activity.update(body)
        return activity

    @fake.post("/activity-logs", status_code=201)
    async def create_log(
        pactId: str = Form(...),
        activityId: str = Form(...),
        userId: str = Form(...),
        notes: str | None = Form(default=None),
        files: list[UploadFile] | None = File(default=None),
        x_user_id: str | None = Header(default=None),
    ) -> dict:
        received = []
        for f in files or []:
            received.append({"name": f.filename, "type": f.content_type, "size": len(await f.read())})
        state.uploads.append(
            {
                "pactId": pactId,
                "activityId": activityId,
                "userId": userId,
                "notes": notes,
                "files": received,
                "header": x_user_id,
            }
        )
        return {
            "_id": uuid.uuid4().hex[:24],
            "pactId": pactId,
            "activityId": activityId,
            "userId": userId,
            "occurredAt": datetime.now(timezone.utc).isoformat(),
            "notes": notes,
            "verified": False,
        }

    @fake.get("/activity-logs/progress/by-user")
    async def progress(userId: str) -> dict:
        return {"results": state.progress.get(userId, [])}

    @fake.get("/activity-logs/user-logs")
    async def user_logs(pactId: str, userId: str) -> dict:
        return {"pactId": pactId, "userId": userId, "days": state.user_logs.get((pactId, userId), [])}

    @fake.get("/activity-logs/{log_id}")
    async def log_detail(log_id: str):
        if log_id not in state.log_details:
            return JSONResponse(status_code=404, content={"message": "Log not found"})
        return state.log_details[log_id]

    return fake


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def backend_state() -> BackendState:
    return BackendState()


@pytest.fixture
async def backend(backend_state: BackendState):
    http = AsyncClient(transport=ASGITransport(app=build_fake_backend(backend_state)), base_url="http://backend")
    client = PactBackendClient(http)
    yield client
    await client.aclose()


@pytest.fixture
async def client(backend: PactBackendClient):
    app.dependency_overrides[get_backend] = lambda: backend
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
