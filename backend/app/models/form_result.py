# app/models/form_result.py
# 폼 제출 결과: 브라우저는 이것만 보고 에러 표시/스낵바/다이얼로그 닫기를 한다
from __future__ import annotations
from typing import List, Optional

from pydantic import BaseModel, Field

from app.forms.errors import FieldError
from app.services.notifier import SnackbarMessage

class FormResult(BaseModel):
    ok: bool = False
    # 로딩 중 중복 제출
    busy: bool = False
    errors: List[FieldError] = Field(default_factory=list)
    snackbar: Optional[SnackbarMessage] = None
    closed: bool = False
    # 목록/캐시 갱신 필요 여부 (afterSaveEvent)
    refresh: bool = False
    redirect: Optional[str] = None
    failedStep: Optional[str] = None
    # 쿠키로 내려줄 토큰. JSON 에는 싣지 않는다
    token: Optional[str] = Field(default=None, exclude=True)
