# app/services/event_dialogs.py
# 이벤트 등록/편집 다이얼로그 컨트롤러
# - 제출 시 1회 검증 → 실패면 네트워크 호출 없이 필드 에러 반환
# - 로딩 플래그로 중복 제출 차단 (성공/실패 모두 해제)
# - 성공: afterSave → 성공 스낵바 → 닫기 / 실패: 공통 실패 스낵바, 열린 채로 유지

from __future__ import annotations
import logging
from typing import Any, Callable, Mapping, Optional

from app.forms.errors import FormValidationError, validate_form
from app.forms.event_forms import EditEventFields, EditEventForm, NewEventForm
from app.models.event import EventT
from app.models.form_result import FormResult
from app.services.events_api import EventsApi, EventsApiError
from app.services.notifier import Notifier, Severity, SnackbarMessage
from app.services.save_saga import PhotoSaveSaga, SaveFailed

log = logging.getLogger(__name__)

MSG_CREATE_OK = "イベント登録完了"
MSG_CREATE_NG = "イベントの登録に失敗しました。"
MSG_EDIT_OK = "イベント編集完了"
MSG_EDIT_NG = "イベントの編集に失敗しました。"


class DialogController:
    success_text = ""
    failure_text = ""

    def __init__(
        self,
        api: EventsApi,
        notifier: Notifier,
        after_save: Optional[Callable[[], None]] = None,
        on_close: Optional[Callable[[], None]] = None,
    ):
        self.api = api
        self.notifier = notifier
        self.after_save = after_save
        self.on_close = on_close
        self.is_loading = False
        self.closed = False

    def close(self) -> None:
        self.closed = True
        if self.on_close:
            self.on_close()

    def _notify(self, severity: Severity, text: str) -> SnackbarMessage:
        self.notifier.notify(severity, text)
        return SnackbarMessage(severity=severity, text=text)

    async def submit(self, data: Mapping[str, Any]) -> FormResult:
        if self.is_loading:
            log.info("%s: submit ignored while loading", type(self).__name__)
            return FormResult(busy=True)

        try:
            form = self._validate(data)
        except FormValidationError as e:
            return FormResult(errors=e.errors)

        self.is_loading = True
        try:
            await self._save(form)
        except (EventsApiError, SaveFailed) as e:
            # 상세 원인은 로그에만
            log.exception("%s: save failed", type(self).__name__)
            message = self._notify("error", self.failure_text)
            step = e.step.value if isinstance(e, SaveFailed) else None
            return FormResult(failedStep=step, snackbar=message)
        finally:
            self.is_loading = False

        refresh = False
        if self.after_save:
            self.after_save()
            refresh = True
        message = self._notify("success", self.success_text)
        self.close()
        return FormResult(ok=True, closed=True, refresh=refresh, snackbar=message)

    def _validate(self, data: Mapping[str, Any]):
        raise NotImplementedError

    async def _save(self, form) -> None:
        raise NotImplementedError


class NewEventController(DialogController):
    success_text = MSG_CREATE_OK
    failure_text = MSG_CREATE_NG

    def _validate(self, data: Mapping[str, Any]) -> NewEventForm:
        return validate_form(NewEventForm, data)

    async def _save(self, form: NewEventForm) -> None:
        await self.api.create_event(form.to_request())


class EditEventController(DialogController):
    success_text = MSG_EDIT_OK
    failure_text = MSG_EDIT_NG

    def __init__(self, api: EventsApi, notifier: Notifier, event_id: int | str, **kwargs: Any):
        super().__init__(api, notifier, **kwargs)
        self.event_id = event_id
        self.saga: Optional[PhotoSaveSaga] = None

    @staticmethod
    def defaults(event: EventT) -> dict:
        return {"event": EditEventFields.defaults_from(event), "eventPhotos": [None]}

    def _validate(self, data: Mapping[str, Any]) -> EditEventForm:
        return validate_form(EditEventForm, data)

    async def _save(self, form: EditEventForm) -> None:
        # 제출마다 새 사가 (이전 업로드는 재사용하지 않음)
        self.saga = PhotoSaveSaga(
            self.api,
            self.event_id,
            form.event.to_patch_fields(),
            photo=form.chosen_photo(),
        )
        await self.saga.run()
