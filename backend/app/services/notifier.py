# app/services/notifier.py
# 스낵바 알림: 컨트롤러에 주입해서 쓰는 알림 싱크

from __future__ import annotations
import logging
from typing import List, Literal, Optional, Protocol

from pydantic import BaseModel

log = logging.getLogger(__name__)

Severity = Literal["success", "error"]


class SnackbarMessage(BaseModel):
    severity: Severity
    text: str


class Notifier(Protocol):
    def notify(self, severity: Severity, text: str) -> None: ...


class CollectingNotifier:
    """요청 단위로 알림을 모아 두었다가 응답에 실어 보낸다"""

    def __init__(self) -> None:
        self.messages: List[SnackbarMessage] = []

    def notify(self, severity: Severity, text: str) -> None:
        log.debug("snackbar %s: %s", severity, text)
        self.messages.append(SnackbarMessage(severity=severity, text=text))

    @property
    def last(self) -> Optional[SnackbarMessage]:
        # 스낵바는 하나만 보이므로 마지막 것만 의미 있음
        return self.messages[-1] if self.messages else None
