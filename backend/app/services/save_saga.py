# app/services/save_saga.py
# 이벤트 편집 저장 흐름 (사진 포함)
#
# 1) 서명 URL 1개 발급 (uploadLength: 1)
# 2) 서명 URL 로 파일 바이트 PUT (application/octet-stream)
# 3) 이벤트 PATCH (사진이 있으면 {fileKey, originalFileName} 1개, 없으면 [])
#
# 순서대로만 진행하고, 어느 단계든 실패하면 남은 단계는 건너뛴다.
# 원자적이지 않다: 3) 이 실패해도 2) 에서 올린 파일은 그대로 남는다 (롤백/재시도 없음).

from __future__ import annotations
import logging
from enum import Enum
from typing import Any, List, Optional, Tuple

from app.forms.event_forms import UploadIntent
from app.models.event import PatchEventFields, PatchEventRequestBody, PhotoDescriptor
from app.services.events_api import EventsApi

log = logging.getLogger(__name__)


class SaveState(str, Enum):
    IDLE = "idle"
    REQUESTING_SLOT = "requesting_slot"
    UPLOADING = "uploading"
    PATCHING = "patching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SaveFailed(Exception):
    def __init__(self, step: SaveState, cause: BaseException):
        super().__init__(f"event save failed while {step.value}: {cause}")
        self.step = step
        self.cause = cause


class SagaAlreadyRun(RuntimeError):
    pass


class PhotoSaveSaga:
    def __init__(
        self,
        api: EventsApi,
        event_id: int | str,
        fields: PatchEventFields,
        photo: Optional[UploadIntent] = None,
    ):
        self.api = api
        self.event_id = event_id
        self.fields = fields
        self.photo = photo
        self.state = SaveState.IDLE
        self.failed_step: Optional[SaveState] = None
        self.history: List[SaveState] = [SaveState.IDLE]
        self.photos: List[PhotoDescriptor] = []

    def _enter(self, state: SaveState) -> None:
        log.debug("event %s save: %s -> %s", self.event_id, self.state.value, state.value)
        self.state = state
        self.history.append(state)

    async def run(self) -> Any:
        # 한 인스턴스는 한 번만. 다시 저장하려면 새 사가를 만든다 (서명 URL 도 새로 발급)
        if self.state is not SaveState.IDLE:
            raise SagaAlreadyRun(f"saga for event {self.event_id} is already {self.state.value}")
        try:
            if self.photo is not None:
                self._enter(SaveState.REQUESTING_SLOT)
                file_key, signed_url = await self._request_slot()

                self._enter(SaveState.UPLOADING)
                await self.api.upload_to_signed_url(signed_url, self.photo.data)
                self.photos = [PhotoDescriptor(fileKey=file_key, originalFileName=self.photo.filename)]

            self._enter(SaveState.PATCHING)
            result = await self.api.patch_event(
                self.event_id,
                PatchEventRequestBody(event=self.fields, eventPhotos=self.photos),
            )
        except Exception as e:
            step = self.state
            self.failed_step = step
            self._enter(SaveState.FAILED)
            if step is SaveState.PATCHING and self.photos:
                # 업로드된 파일은 정리하지 않는다
                log.warning("event %s: patch failed, uploaded file %s is orphaned",
                            self.event_id, self.photos[0].fileKey)
            raise SaveFailed(step, e) from e

        self._enter(SaveState.SUCCEEDED)
        return result

    async def _request_slot(self) -> Tuple[str, str]:
        res = await self.api.generate_signed_urls(upload_length=1)
        upload = res.uploads[0]
        return upload.fileKey, upload.signedGcsUrl
