# 공용 의존성/헬퍼 (현재 사용자, 알림, API 클라이언트, 인증 쿠키 등)
from __future__ import annotations
from typing import Callable, Dict, Hashable

import httpx
from fastapi import Depends, HTTPException, Request, Response
from pydantic import BaseModel

from app.core.config import settings
from app.core.http import get_http
from app.services.event_dialogs import DialogController
from app.services.events_api import EventsApi
from app.services.identity import FirebaseIdentity, IdentityProvider
from app.services.notifier import CollectingNotifier


class CurrentUser(BaseModel):
    token: str


def get_current_user(request: Request) -> CurrentUser:
    # 쿠키(token) 우선, 없으면 Authorization: Bearer
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token:
        auth = request.headers.get("Authorization", "")
        if auth.lower().startswith("bearer "):
            token = auth[7:].strip()
    if not token:
        raise HTTPException(status_code=401, detail="not logged in")
    return CurrentUser(token=token)


def get_notifier() -> CollectingNotifier:
    # 요청마다 새로
    return CollectingNotifier()


def get_events_api(
    user: CurrentUser = Depends(get_current_user),
    http: httpx.AsyncClient = Depends(get_http),
) -> EventsApi:
    return EventsApi(http, user.token)


def get_api_factory(http: httpx.AsyncClient = Depends(get_http)) -> Callable[[str], EventsApi]:
    # 로그인/가입 도중에 토큰을 받으므로 팩토리로 넘긴다
    return lambda token: EventsApi(http, token)


def get_identity(http: httpx.AsyncClient = Depends(get_http)) -> IdentityProvider:
    return FirebaseIdentity(http)


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        token,
        max_age=settings.COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
    )


class FormRegistry:
    """열려 있는 폼 인스턴스(컨트롤러) 보관

    같은 폼에 대한 요청이 겹치면 같은 컨트롤러를 돌려줘서
    로딩 플래그가 중복 제출을 막도록 한다. 로딩이 끝나면 버린다.
    """

    def __init__(self) -> None:
        self._forms: Dict[Hashable, DialogController] = {}

    def get_or_create(self, key: Hashable, factory: Callable[[], DialogController]) -> DialogController:
        form = self._forms.get(key)
        if form is None:
            form = factory()
            self._forms[key] = form
        return form

    def release(self, key: Hashable) -> None:
        form = self._forms.get(key)
        if form is not None and not form.is_loading:
            del self._forms[key]

    def __len__(self) -> int:
        return len(self._forms)


_registry = FormRegistry()


def get_form_registry() -> FormRegistry:
    return _registry
