# app/main.py
# FastAPI 앱 초기화 및 라우터 설정
# 브라우저 폼 → (검증/변환/업로드 순서 제어) → 원격 이벤트 API

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes_auth import router as auth_router
from app.api.routes_events import router as events_router
from app.core.config import settings
from app.core.http import close_http, init_http

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
log = logging.getLogger(__name__)

app = FastAPI(title="Event Diary - Form Gateway", version="0.1.0")

# CORS: 프론트 origin 허용 + 쿠키 전달
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 앱 시작/종료 이벤트 핸들러
@app.on_event("startup")
async def on_startup() -> None:
    await init_http()
    log.info("http client ready (api=%s)", settings.API_BASE_URL)

@app.on_event("shutdown")
async def on_shutdown() -> None:
    await close_http()

@app.get("/health")
async def health():
    return {"status": "ok"}

# 라우터 prefix는 각 파일 내에서 정의함 , 중복 prefix 금지
app.include_router(events_router)
app.include_router(auth_router)
