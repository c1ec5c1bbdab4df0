import httpx
import pytest

from pactweb.core.identity import Anonymous, Identity
from pactweb.schemas.pact import PactCreateRequest
from pactweb.schemas.user import UserCreate
from pactweb.services.backend_client import BackendError, PactBackendClient, UploadPart

USER = Identity(user_id="u1")


@pytest.mark.anyio
async def test_identity_is_sent_as_header(backend, backend_state) -> None:
    backend_state.add_pact(_id="p1")

    await backend.list_active_pacts(USER)
    await backend.list_active_pacts(Anonymous())

    calls = backend_state.calls("GET", "/pact/active")
    assert [c[2] for c in calls] == ["u1", None]


@pytest.mark.anyio
async def test_reads_are_cached_until_invalidated(backend, backend_state) -> None:
    backend_state.add_pact(_id="p1")

    first = await backend.list_active_pacts(USER)
    again = await backend.list_active_pacts(USER)
    assert [p.id for p in first] == [p.id for p in again] == ["p1"]
    assert len(backend_state.calls("GET", "/pact/active")) == 1

    await backend.create_pact(USER, PactCreateRequest(title="Read Daily"))
    after = await backend.list_active_pacts(USER)
    assert len(after) == 2
    assert len(backend_state.calls("GET", "/pact/active")) == 2


@pytest.mark.anyio
async def test_join_invalidates_pact_reads(backend, backend_state) -> None:
    backend_state.add_pact(_id="p1")

    assert (await backend.get_pact(USER, "p1")).participants == []
    await backend.join_pact(USER, "p1", ["a1", "a2"])
    pact = await backend.get_pact(USER, "p1")

    assert pact.has_participant("u1")
    assert backend_state.joins == [{"userId": "u1", "pactId": "p1", "activityIds": ["a1", "a2"]}]
    assert len(backend_state.calls("GET", "/pact/p1")) == 2


@pytest.mark.anyio
async def test_user_logs_are_never_cached(backend, backend_state) -> None:
    backend_state.user_logs[("p1", "u1")] = [{"date": "2024-06-13", "logs": [{"_id": "l1"}]}]

    await backend.get_user_logs(USER, "p1")
    logs = await backend.get_user_logs(USER, "p1")

    assert logs.days[0].logs[0].id == "l1"
    assert len(backend_state.calls("GET", "/activity-logs/user-logs")) == 2


@pytest.mark.anyio
async def test_http_error_carries_status_and_server_message(backend, backend_state) -> None:
    backend_state.fail("GET", "/pact/active", 400, {"message": ["title too short", "bad fine"]})

    with pytest.raises(BackendError) as info:
        await backend.list_active_pacts(USER)

    assert info.value.kind == "http"
    assert info.value.status_code == 400
    assert info.value.message == "title too short; bad fine"


@pytest.mark.anyio
async def test_http_error_with_text_body(backend, backend_state) -> None:
    backend_state.fail("GET", "/pact/p1", 503, "upstream unavailable")

    with pytest.raises(BackendError) as info:
        await backend.get_pact(USER, "p1")

    assert info.value.status_code == 503
    assert info.value.message == "upstream unavailable"


@pytest.mark.anyio
async def test_error_without_message(backend) -> None:
    payload = UserCreate(name="Asha", email="asha@example.com", phone="9876543210")
    await backend.create_user(payload)

    with pytest.raises(BackendError) as info:
        await backend.create_user(payload)

    assert info.value.status_code == 409
    assert info.value.message is None


@pytest.mark.anyio
async def test_transport_failure_is_tagged() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = PactBackendClient.from_settings(transport=httpx.MockTransport(refuse))
    try:
        with pytest.raises(BackendError) as info:
            await client.list_active_pacts(USER)
    finally:
        await client.aclose()

    assert info.value.kind == "transport"
    assert info.value.status_code is None


@pytest.mark.anyio
async def test_activity_log_is_sent_as_multipart(backend, backend_state) -> None:
    log = await backend.create_activity_log(
        USER,
        "p1",
        "a1",
        [UploadPart("run.jpg", b"\xff\xd8" * 8, "image/jpeg"), UploadPart("clip.mp4", b"\x00" * 4, "video/mp4")],
        notes="Felt great",
    )

    assert log.activity_id == "a1"
    upload = backend_state.uploads[0]
    assert upload["pactId"] == "p1"
    assert upload["activityId"] == "a1"
    assert upload["userId"] == "u1"
    assert upload["notes"] == "Felt great"
    assert upload["header"] == "u1"
    assert upload["files"] == [
        {"name": "run.jpg", "type": "image/jpeg", "size": 16},
        {"name": "clip.mp4", "type": "video/mp4", "size": 4},
    ]
