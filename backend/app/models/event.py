# app/models/event.py
# 이벤트/사진/업로드 관련 API 스키마 (필드명은 원격 API 그대로 camelCase)

from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class SuccessState(Enum):
    """脱出 성공 여부 (성공/실패/미기록)

    UI 라디오는 문자열만 다루고 API 는 bool|null 을 쓰므로
    변환은 from_*/to_* 에서만 한다.
    """
    TRUE = "true"
    FALSE = "false"
    UNKNOWN = None

    @classmethod
    def from_form(cls, value: Optional[str]) -> "SuccessState":
        if value is None or value == "":
            return cls.UNKNOWN
        if value == "true":
            return cls.TRUE
        if value == "false":
            return cls.FALSE
        raise ValueError(f"unexpected success value: {value!r}")

    @classmethod
    def from_api(cls, value: Optional[bool]) -> "SuccessState":
        if value is None:
            return cls.UNKNOWN
        return cls.TRUE if value else cls.FALSE

    def to_form(self) -> Optional[str]:
        return self.value

    def to_api(self) -> Optional[bool]:
        if self is SuccessState.UNKNOWN:
            return None
        return self is SuccessState.TRUE


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    # 브라우저 toISOString() 과 같은 형태: 2024-01-01T00:00:00.000Z
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# # 서버에서 내려오는 이벤트
class EventT(BaseModel):
    id: int | str
    title: str
    startDateTime: datetime
    endDateTime: Optional[datetime] = None
    place: Optional[str] = None
    url: Optional[str] = None
    member: Optional[str] = None
    memo: Optional[str] = None
    diary: Optional[str] = None
    success: Optional[bool] = None

class EventPhotoT(BaseModel):
    id: int | str
    fileKey: str
    originalFileName: str


# # POST /api/events
class PostEventRequestBody(BaseModel):
    title: str
    startDateTime: str
    endDateTime: Optional[str] = None
    place: Optional[str] = None
    url: Optional[str] = None
    member: Optional[str] = None
    memo: Optional[str] = None


# # PATCH /api/events/{id}
class PatchEventFields(PostEventRequestBody):
    diary: Optional[str] = None
    success: Optional[bool] = None

class PhotoDescriptor(BaseModel):
    fileKey: str
    originalFileName: str

class PatchEventRequestBody(BaseModel):
    event: PatchEventFields
    # 0 또는 1개
    eventPhotos: List[PhotoDescriptor] = Field(default_factory=list, max_length=1)


# # 서명 URL 발급
class SignedUrlsRequestBody(BaseModel):
    uploadLength: int = 1

class SignedUpload(BaseModel):
    fileKey: str
    signedGcsUrl: str

class SignedUrlsResponseBody(BaseModel):
    uploads: List[SignedUpload] = Field(default_factory=list)
