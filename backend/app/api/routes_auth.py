# app/api/routes_auth.py
# 회원가입/로그인/비밀번호 재설정 폼 제출

from __future__ import annotations
from typing import Any, Callable, Dict

from fastapi import APIRouter, Body, Depends, Response

from app.api.routes_events import status_for
from app.core.deps import get_api_factory, get_identity, get_notifier, set_auth_cookie
from app.models.form_result import FormResult
from app.services import auth_flows
from app.services.events_api import EventsApi
from app.services.identity import IdentityProvider
from app.services.notifier import CollectingNotifier

router = APIRouter(prefix="/forms", tags=["auth"])


def _respond(result: FormResult, response: Response) -> Dict[str, Any]:
    # 토큰을 받았으면 쿠키로 (가입 도중 실패해도 로그인 상태는 유지)
    if result.token:
        set_auth_cookie(response, result.token)
    response.status_code = status_for(result)
    return result.model_dump()


@router.post("/register")
async def register(
    response: Response,
    payload: Dict[str, Any] = Body(...),
    identity: IdentityProvider = Depends(get_identity),
    make_api: Callable[[str], EventsApi] = Depends(get_api_factory),
    notifier: CollectingNotifier = Depends(get_notifier),
):
    result = await auth_flows.register(payload, identity, make_api, notifier)
    return _respond(result, response)


@router.post("/login")
async def login(
    response: Response,
    payload: Dict[str, Any] = Body(...),
    identity: IdentityProvider = Depends(get_identity),
    make_api: Callable[[str], EventsApi] = Depends(get_api_factory),
    notifier: CollectingNotifier = Depends(get_notifier),
):
    result = await auth_flows.login(payload, identity, make_api, notifier)
    return _respond(result, response)


@router.post("/password-reset")
async def password_reset(
    response: Response,
    payload: Dict[str, Any] = Body(...),
    identity: IdentityProvider = Depends(get_identity),
    notifier: CollectingNotifier = Depends(get_notifier),
):
    result = await auth_flows.request_password_reset(payload, identity, notifier)
    return _respond(result, response)
