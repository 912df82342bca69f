import asyncio
from datetime import datetime, timezone

import httpx

from app.models.event import EventT
from app.services.event_dialogs import (
    MSG_CREATE_NG,
    MSG_CREATE_OK,
    MSG_EDIT_NG,
    MSG_EDIT_OK,
    EditEventController,
    NewEventController,
)


def new_event_form(**overrides):
    data = {
        "title": "Trip",
        "startDateTime": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "endDateTime": None,
        "place": "",
        "url": "",
        "member": "",
        "memo": "",
    }
    data.update(overrides)
    return data


def edit_form(photo=None, **overrides):
    event = new_event_form(title="Escape", diary="", success=None)
    event.update(overrides)
    return {"event": event, "eventPhotos": [photo]}


def photo():
    return {"index": 0, "filename": "room.png", "content_type": "image/png", "size": 4, "data": b"\x89PNG"}


def new_controller(api, rec):
    return NewEventController(api, rec, after_save=rec.after_save, on_close=rec.on_close)


def edit_controller(api, rec):
    return EditEventController(api, rec, 7, after_save=rec.after_save, on_close=rec.on_close)


async def test_new_event_end_to_end(api, backend, recorder):
    ctrl = new_controller(api, recorder)
    result = await ctrl.submit(new_event_form())

    assert backend.json_of("POST", "/api/events") == {
        "title": "Trip",
        "startDateTime": "2024-01-01T00:00:00.000Z",
        "endDateTime": None,
        "place": None,
        "url": None,
        "member": None,
        "memo": None,
    }
    assert result.ok and result.closed and result.refresh
    assert result.snackbar.text == MSG_CREATE_OK
    assert recorder.messages == [("success", MSG_CREATE_OK)]
    assert recorder.after_save_calls == 1
    assert recorder.close_calls == 1
    assert ctrl.closed
    assert not ctrl.is_loading


async def test_new_event_failure_keeps_dialog_open(api, backend, recorder):
    backend.on("POST", "/api/events", status=500, json_body={"error": "db down"})
    ctrl = new_controller(api, recorder)
    result = await ctrl.submit(new_event_form())

    assert not result.ok
    assert not result.closed
    # 상세 원인은 화면에 내보내지 않는다
    assert recorder.messages == [("error", MSG_CREATE_NG)]
    assert recorder.after_save_calls == 0
    assert recorder.close_calls == 0
    assert not ctrl.is_loading


async def test_invalid_form_makes_no_request(api, backend, recorder):
    ctrl = new_controller(api, recorder)
    result = await ctrl.submit(new_event_form(title=""))

    assert [e.path for e in result.errors] == [["title"]]
    assert backend.calls() == []
    assert recorder.messages == []
    assert not ctrl.closed


async def test_edit_with_photo_succeeds(api, backend, recorder):
    ctrl = edit_controller(api, recorder)
    result = await ctrl.submit(edit_form(photo=photo(), success="true"))

    assert result.ok
    assert result.snackbar.text == MSG_EDIT_OK
    assert backend.json_of("PATCH", "/api/events/7")["event"]["success"] is True
    assert recorder.after_save_calls == 1
    assert ctrl.closed


async def test_edit_patch_failure_after_upload(api, backend, recorder):
    backend.on("PATCH", "/api/events/7", status=500)
    ctrl = edit_controller(api, recorder)
    result = await ctrl.submit(edit_form(photo=photo()))

    assert ("PUT", "/bucket/photo-key") in backend.calls()
    assert not result.ok
    assert result.failedStep == "patching"
    assert result.snackbar.text == MSG_EDIT_NG
    assert recorder.after_save_calls == 0
    assert recorder.close_calls == 0
    assert not ctrl.closed
    assert not ctrl.is_loading


async def test_edit_can_be_resubmitted_after_failure(api, backend, recorder):
    backend.on("PATCH", "/api/events/7", status=500)
    ctrl = edit_controller(api, recorder)
    await ctrl.submit(edit_form(photo=photo()))

    backend.on("PATCH", "/api/events/7", json_body={"id": 7})
    result = await ctrl.submit(edit_form(photo=photo()))

    assert result.ok
    # 재제출 시 서명 URL 을 새로 받는다
    assert backend.calls().count(("POST", "/api/generateSignedUrls")) == 2


async def test_duplicate_submit_while_loading_is_ignored(api, backend, recorder):
    gate = asyncio.Event()

    async def slow_patch(request):
        await gate.wait()
        return httpx.Response(200, json={"id": 7})

    backend.on("PATCH", "/api/events/7", handler=slow_patch)
    ctrl = edit_controller(api, recorder)

    first = asyncio.create_task(ctrl.submit(edit_form()))
    for _ in range(20):
        if ctrl.is_loading:
            break
        await asyncio.sleep(0)
    assert ctrl.is_loading

    second = await ctrl.submit(edit_form())
    assert second.busy
    assert not second.ok

    gate.set()
    result = await first
    assert result.ok
    assert backend.calls() == [("PATCH", "/api/events/7")]
    assert not ctrl.is_loading


def test_edit_defaults_from_event():
    event = EventT(
        id=7,
        title="Escape",
        startDateTime=datetime(2024, 1, 1, tzinfo=timezone.utc),
        place="Shibuya",
        success=True,
    )
    defaults = EditEventController.defaults(event)
    assert defaults["eventPhotos"] == [None]
    assert defaults["event"]["success"] == "true"
    assert defaults["event"]["place"] == "Shibuya"
