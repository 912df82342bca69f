# app/forms/event_forms.py
# 이벤트 등록/편집 폼 스키마
# - 필드 단위 검증 → 모두 통과하면 종료일시 교차 검증
# - 메시지는 화면에 그대로 노출되는 일본어

from __future__ import annotations
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.core.config import settings
from app.forms.errors import field_error
from app.models.event import (
    EventT,
    PatchEventFields,
    PostEventRequestBody,
    SuccessState,
    to_iso,
)

TITLE_MAX = 50
PLACE_MAX = 100
URL_MAX = 200
MEMBER_MAX = 100
MEMO_MAX = 255
DIARY_MAX = 10000

MSG_TITLE_REQUIRED = "イベントタイトルを入力してください"
MSG_TITLE_TOO_LONG = "イベントタイトルが長すぎます"
MSG_TOO_LONG = "文字数超過"
MSG_END_BEFORE_START = "終了日時は開始日時の後に設定してください"
MSG_FILE_TOO_LARGE = "ファイルサイズを30MB以内にしてください"
MSG_FILE_TYPE = "画像ファイルのみアップロードできます"


def _max_len(value: Optional[str], limit: int) -> Optional[str]:
    # null 은 항상 통과
    if value is not None and len(value) > limit:
        raise field_error("string_too_long", MSG_TOO_LONG)
    return value


def _blank_to_none(value):
    # HTML 폼은 null 을 못 보내므로 "" 를 null 로
    if isinstance(value, str) and value == "":
        return None
    return value


def _as_utc(dt: datetime) -> datetime:
    # naive 는 UTC 로 간주
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def or_none(value: Optional[str]) -> Optional[str]:
    # 빈 문자열 옵션 필드는 null 로 전송
    return value or None


class NewEventForm(BaseModel):
    title: str
    startDateTime: datetime
    endDateTime: Optional[datetime] = None
    place: Optional[str] = None
    url: Optional[str] = None
    member: Optional[str] = None
    memo: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _v_title(cls, v: str) -> str:
        if len(v) < 1:
            raise field_error("title_required", MSG_TITLE_REQUIRED)
        if len(v) > TITLE_MAX:
            raise field_error("title_too_long", MSG_TITLE_TOO_LONG)
        return v

    @field_validator("endDateTime", mode="before")
    @classmethod
    def _v_end_blank(cls, v):
        return _blank_to_none(v)

    @field_validator("place")
    @classmethod
    def _v_place(cls, v):
        return _max_len(v, PLACE_MAX)

    @field_validator("url")
    @classmethod
    def _v_url(cls, v):
        return _max_len(v, URL_MAX)

    @field_validator("member")
    @classmethod
    def _v_member(cls, v):
        return _max_len(v, MEMBER_MAX)

    @field_validator("memo")
    @classmethod
    def _v_memo(cls, v):
        return _max_len(v, MEMO_MAX)

    @model_validator(mode="after")
    def _v_date_order(self):
        # 종료일시가 null 이거나 시작일시 이후면 OK. 에러는 endDateTime 에 붙인다
        if self.endDateTime is not None and _as_utc(self.endDateTime) < _as_utc(self.startDateTime):
            raise field_error("end_before_start", MSG_END_BEFORE_START, field="endDateTime")
        return self

    def to_request(self) -> PostEventRequestBody:
        return PostEventRequestBody(
            title=self.title,
            startDateTime=to_iso(self.startDateTime),
            endDateTime=to_iso(self.endDateTime),
            place=or_none(self.place),
            url=or_none(self.url),
            member=or_none(self.member),
            memo=or_none(self.memo),
        )


class EditEventFields(NewEventForm):
    diary: Optional[str] = None
    # 라디오 컴포넌트가 문자열만 다루기 때문에 일단 문자열로 받는다
    success: Optional[Literal["true", "false"]] = None

    @field_validator("diary")
    @classmethod
    def _v_diary(cls, v):
        return _max_len(v, DIARY_MAX)

    @field_validator("success", mode="before")
    @classmethod
    def _v_success_blank(cls, v):
        return _blank_to_none(v)

    @property
    def success_state(self) -> SuccessState:
        return SuccessState.from_form(self.success)

    def to_patch_fields(self) -> PatchEventFields:
        base = self.to_request()
        return PatchEventFields(
            **base.model_dump(),
            diary=or_none(self.diary),
            success=self.success_state.to_api(),
        )

    @classmethod
    def defaults_from(cls, event: EventT) -> dict:
        # 편집 다이얼로그 초기값 (bool → 문자열로 되돌림)
        return {
            "title": event.title,
            "startDateTime": event.startDateTime,
            "endDateTime": event.endDateTime,
            "place": event.place,
            "url": event.url,
            "member": event.member,
            "memo": event.memo,
            "diary": event.diary,
            "success": SuccessState.from_api(event.success).to_form(),
        }


class UploadIntent(BaseModel):
    """폼 제출 동안만 존재하는 선택 파일"""
    model_config = ConfigDict(revalidate_instances="always")

    index: int = 0
    filename: str
    # 검증 순서: 크기 → 형식
    size: int
    content_type: str
    data: bytes = b""

    @field_validator("size")
    @classmethod
    def _v_size(cls, v: int) -> int:
        if v > settings.MAX_UPLOAD_SIZE:
            raise field_error("file_too_large", MSG_FILE_TOO_LARGE)
        return v

    @field_validator("content_type")
    @classmethod
    def _v_type(cls, v: str) -> str:
        if v not in settings.ACCEPTED_FILE_TYPES:
            raise field_error("file_type_not_allowed", MSG_FILE_TYPE)
        return v


class EditEventForm(BaseModel):
    event: EditEventFields
    # 파일 초기값은 [None] (선택 안 함)
    eventPhotos: List[Optional[UploadIntent]] = Field(default_factory=lambda: [None], max_length=1)

    def chosen_photo(self) -> Optional[UploadIntent]:
        # null 항목은 업로드 전에 걸러낸다
        photos = [p for p in self.eventPhotos if p is not None]
        return photos[0] if photos else None
