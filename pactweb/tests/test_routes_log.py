import pytest

from pactweb.services.uploads import UNSUPPORTED_TYPE_MESSAGE

SIGNED_IN = {"Cookie": "userId=u1"}


@pytest.mark.anyio
async def test_upload_log_forwards_files_and_fields(client, backend_state) -> None:
    res = await client.post(
        "/pact/p1/logs",
        headers=SIGNED_IN,
        data={"activityId": "a1", "notes": "Felt great"},
        files=[("files", ("run.jpg", b"\xff\xd8\xff" * 100, "image/jpeg"))],
    )

    assert res.status_code == 201
    assert res.json() == {"redirect_to": "/pact/p1/week"}
    [upload] = backend_state.uploads
    assert upload["pactId"] == "p1"
    assert upload["activityId"] == "a1"
    assert upload["userId"] == "u1"
    assert upload["notes"] == "Felt great"
    assert upload["files"] == [{"name": "run.jpg", "type": "image/jpeg", "size": 300}]


@pytest.mark.anyio
async def test_upload_log_requires_identity(client, backend_state) -> None:
    res = await client.post("/pact/p1/logs", data={"activityId": "a1"})

    assert res.status_code == 303
    assert backend_state.uploads == []


@pytest.mark.anyio
async def test_upload_log_requires_activity(client, backend_state) -> None:
    res = await client.post("/pact/p1/logs", headers=SIGNED_IN, data={"notes": "x"})

    assert res.status_code == 422
    assert res.json() == {"errors": {"activityId": "Select an activity"}}


@pytest.mark.anyio
async def test_upload_log_rejects_unsupported_file(client, backend_state) -> None:
    res = await client.post(
        "/pact/p1/logs",
        headers=SIGNED_IN,
        data={"activityId": "a1"},
        files=[("files", ("notes.txt", b"hello", "text/plain"))],
    )

    assert res.status_code == 422
    assert res.json() == {"errors": {"files": UNSUPPORTED_TYPE_MESSAGE}}
    assert backend_state.uploads == []


@pytest.mark.anyio
async def test_upload_log_rejects_oversized_image(client, backend_state) -> None:
    res = await client.post(
        "/pact/p1/logs",
        headers=SIGNED_IN,
        data={"activityId": "a1"},
        files=[("files", ("huge.png", b"\x00" * (10 * 1024 * 1024 + 1), "image/png"))],
    )

    assert res.status_code == 422
    assert res.json()["errors"]["files"] == "File huge.png is too large. Max 10 MB."


@pytest.mark.anyio
async def test_upload_failure_is_an_alert_with_fixed_text(client, backend_state) -> None:
    backend_state.fail("POST", "/activity-logs", 500, {"message": "Drive quota exceeded"})

    res = await client.post(
        "/pact/p1/logs",
        headers=SIGNED_IN,
        data={"activityId": "a1"},
        files=[("files", ("run.jpg", b"\xff\xd8", "image/jpeg"))],
    )

    assert res.status_code == 500
    assert res.json() == {"detail": "Failed to save activity log.", "kind": "http", "presentation": "alert"}


@pytest.mark.anyio
async def test_log_detail_splits_images_from_other_media(client, backend_state) -> None:
    backend_state.log_details["l1"] = {
        "_id": "l1",
        "pactId": "p1",
        "activityId": "a1",
        "userId": "u1",
        "occurredAt": "2024-06-13T09:30:00.000Z",
        "notes": "Morning run by the lake",
        "verified": True,
        "images": [
            {"name": "lake.jpg", "mimeType": "image/jpeg", "webViewLink": "https://v/1", "webContentLink": "https://c/1"},
            {"name": "run.mp4", "mimeType": "video/mp4", "webViewLink": "https://v/2"},
        ],
    }

    res = await client.get("/pact/p1/log/l1", headers=SIGNED_IN)
    assert res.status_code == 200
    body = res.json()

    assert body["occurred_label"] == "Jun 13, 2024"
    assert body["verified"] is True
    assert body["back_href"] == "/pact/p1/week"
    assert body["images"] == [
        {"name": "lake.jpg", "mime_type": "image/jpeg", "view_link": "https://v/1", "content_link": "https://c/1"}
    ]
    assert [f["name"] for f in body["files"]] == ["run.mp4"]
    assert body["files"][0]["content_link"] is None


@pytest.mark.anyio
async def test_log_detail_not_found(client) -> None:
    res = await client.get("/pact/p1/log/missing", headers=SIGNED_IN)

    assert res.status_code == 404
    assert res.json()["detail"] == "Log not found"
