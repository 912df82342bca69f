# app/core/http.py
# 공용 httpx 클라이언트: 앱 시작/종료 시 생성/정리 (on_event용)

from __future__ import annotations
import httpx

from app.core.config import settings

_client: httpx.AsyncClient | None = None

async def init_http() -> httpx.AsyncClient:
    # 앱 시작 시 1회. timeout=None 이면 무제한
    global _client
    if _client is not None:
        return _client
    _client = httpx.AsyncClient(
        base_url=settings.API_BASE_URL,
        timeout=httpx.Timeout(settings.HTTP_TIMEOUT),
    )
    return _client

def get_http() -> httpx.AsyncClient:
    # 라우터에서 쓰는 핸들. 미초기화면 예외 발생
    if _client is None:
        raise RuntimeError("HTTP client is not initialized yet.")
    return _client

async def close_http() -> None:
    global _client
    if _client:
        await _client.aclose()
    _client = None
