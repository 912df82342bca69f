# app/services/events_api.py
# 원격 이벤트 API 호출 (httpx 비동기)
# - 백엔드 호출에는 인증 토큰을 쿠키로 실어 보낸다
# - 서명 URL(GCS) 업로드에는 쿠키를 보내지 않는다
# - 재시도 없음: 실패는 EventsApiError 로 올려 보낸다

from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.models.event import (
    PatchEventRequestBody,
    PostEventRequestBody,
    SignedUrlsRequestBody,
    SignedUrlsResponseBody,
)

log = logging.getLogger(__name__)


class EventsApiError(Exception):
    """백엔드/스토리지 호출 실패"""

    def __init__(self, message: str, status_code: Optional[int] = None, error_text: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        # 백엔드가 {"error": "..."} 로 내려준 문구 (있으면)
        self.error_text = error_text


def _error_text(resp: httpx.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return None


class EventsApi:
    def __init__(self, client: httpx.AsyncClient, token: Optional[str] = None):
        self.client = client
        self.token = token

    def _auth_headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Cookie": f"{settings.AUTH_COOKIE_NAME}={self.token}"}

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = await self.client.request(method, url, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.HTTPStatusError as e:
            log.warning("%s %s -> %s", method, url, e.response.status_code)
            raise EventsApiError(
                f"{method} {url} failed with {e.response.status_code}",
                status_code=e.response.status_code,
                error_text=_error_text(e.response),
            ) from e
        except httpx.HTTPError as e:
            log.warning("%s %s transport error: %s", method, url, e)
            raise EventsApiError(f"{method} {url} failed: {e}") from e

    async def _json(self, method: str, url: str, **kwargs: Any) -> Any:
        resp = await self._send(method, url, headers=self._auth_headers(), **kwargs)
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise EventsApiError(f"{method} {url} returned non-JSON body") from e

    # ---------------------------------------------------------------------
    # 이벤트
    # ---------------------------------------------------------------------
    async def create_event(self, body: PostEventRequestBody) -> Any:
        return await self._json("POST", "/api/events", json=body.model_dump())

    async def patch_event(self, event_id: int | str, body: PatchEventRequestBody) -> Any:
        return await self._json("PATCH", f"/api/events/{event_id}", json=body.model_dump())

    # ---------------------------------------------------------------------
    # 사진 업로드 (서명 URL 발급 → 직접 PUT)
    # ---------------------------------------------------------------------
    async def generate_signed_urls(self, upload_length: int = 1) -> SignedUrlsResponseBody:
        data = await self._json(
            "POST",
            settings.SIGNED_URL_PATH,
            json=SignedUrlsRequestBody(uploadLength=upload_length).model_dump(),
        )
        try:
            parsed = SignedUrlsResponseBody.model_validate(data)
        except ValueError as e:
            raise EventsApiError("signed url response is malformed") from e
        if len(parsed.uploads) < upload_length:
            raise EventsApiError(
                f"signed url response has {len(parsed.uploads)} uploads, expected {upload_length}"
            )
        return parsed

    async def upload_to_signed_url(self, signed_url: str, data: bytes) -> None:
        await self._send(
            "PUT",
            signed_url,
            content=data,
            headers={"Content-Type": "application/octet-stream"},
        )

    # ---------------------------------------------------------------------
    # 사용자/로그인
    # ---------------------------------------------------------------------
    async def post_user(self, body: Dict[str, Any]) -> Any:
        return await self._json("POST", "/api/users", json=body)

    async def get_login(self) -> Any:
        return await self._json("GET", "/api/login")
