# app/api/routes_events.py
# 이벤트 등록/편집 폼 제출

from __future__ import annotations
from typing import Any, Callable, Dict, Hashable, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Response, UploadFile

from app.core.deps import (
    CurrentUser,
    FormRegistry,
    get_current_user,
    get_events_api,
    get_form_registry,
    get_notifier,
)
from app.models.form_result import FormResult
from app.services.event_dialogs import DialogController, EditEventController, NewEventController
from app.services.events_api import EventsApi
from app.services.notifier import CollectingNotifier

router = APIRouter(prefix="/forms/events", tags=["events"])


def status_for(result: FormResult) -> int:
    # 검증 실패 422 / 중복 제출 409 / 그 외(저장 실패 포함) 200
    if result.errors:
        return 422
    if result.busy:
        return 409
    return 200


async def _submit(
    registry: FormRegistry,
    key: Hashable,
    factory: Callable[[], DialogController],
    data: Dict[str, Any],
    response: Response,
) -> Dict[str, Any]:
    form = registry.get_or_create(key, factory)
    try:
        result = await form.submit(data)
    finally:
        registry.release(key)
    response.status_code = status_for(result)
    return result.model_dump()


@router.post("")
async def create_event(
    response: Response,
    payload: Dict[str, Any] = Body(...),
    user: CurrentUser = Depends(get_current_user),
    api: EventsApi = Depends(get_events_api),
    notifier: CollectingNotifier = Depends(get_notifier),
    registry: FormRegistry = Depends(get_form_registry),
):
    """새 이벤트 등록 (JSON)"""
    return await _submit(
        registry,
        (user.token, "new"),
        lambda: NewEventController(api, notifier, after_save=lambda: None),
        payload,
        response,
    )


@router.post("/{event_id}")
async def edit_event(
    event_id: str,
    response: Response,
    # 빈 제목/시작일시는 "" 그대로 넘겨서 JSON 등록과 같은 메시지가 나오게
    title: str = Form(""),
    startDateTime: str = Form(""),
    endDateTime: Optional[str] = Form(None),
    place: Optional[str] = Form(None),
    url: Optional[str] = Form(None),
    member: Optional[str] = Form(None),
    memo: Optional[str] = Form(None),
    diary: Optional[str] = Form(None),
    success: Optional[str] = Form(None),
    eventPhotos: Optional[UploadFile] = File(None),
    user: CurrentUser = Depends(get_current_user),
    api: EventsApi = Depends(get_events_api),
    notifier: CollectingNotifier = Depends(get_notifier),
    registry: FormRegistry = Depends(get_form_registry),
):
    """이벤트 편집 (multipart, 사진 1장까지)"""
    fields = {
        "title": title,
        "startDateTime": startDateTime,
        "endDateTime": endDateTime,
        "place": place,
        "url": url,
        "member": member,
        "memo": memo,
        "diary": diary,
        "success": success,
    }
    # 보내지 않은 필드는 빼서 "missing" 으로 검증되게
    event = {k: v for k, v in fields.items() if v is not None}

    photo = None
    # 파일 미선택이면 브라우저가 빈 파일명을 보낸다
    if eventPhotos is not None and eventPhotos.filename:
        data = await eventPhotos.read()
        photo = {
            "index": 0,
            "filename": eventPhotos.filename,
            "content_type": eventPhotos.content_type or "application/octet-stream",
            "size": len(data),
            "data": data,
        }

    return await _submit(
        registry,
        (user.token, "edit", event_id),
        lambda: EditEventController(api, notifier, event_id, after_save=lambda: None),
        {"event": event, "eventPhotos": [photo]},
        response,
    )
