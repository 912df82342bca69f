# app/services/identity.py
# Firebase Identity Toolkit (REST) 어댑터
# - 가입/로그인/확인 메일/비밀번호 재설정 메일
# - 에러 메시지(EMAIL_EXISTS 등)는 auth/... 코드로 정규화

from __future__ import annotations
import logging
from typing import Any, Dict, Optional, Protocol

import httpx
from pydantic import BaseModel, Field, ValidationError

from app.core.config import settings

log = logging.getLogger(__name__)

# REST 에러 메시지 → SDK 와 같은 auth/... 코드
_CODE_MAP: Dict[str, str] = {
    "EMAIL_EXISTS": "auth/email-already-in-use",
    "EMAIL_NOT_FOUND": "auth/user-not-found",
    "INVALID_PASSWORD": "auth/wrong-password",
    "INVALID_LOGIN_CREDENTIALS": "auth/invalid-credential",
    "INVALID_EMAIL": "auth/invalid-email",
    "WEAK_PASSWORD": "auth/weak-password",
    "USER_DISABLED": "auth/user-disabled",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "auth/too-many-requests",
    "INVALID_ID_TOKEN": "auth/invalid-user-token",
}


class IdentityProviderError(Exception):
    def __init__(self, code: str, message: str = ""):
        super().__init__(message or code)
        self.code = code


class IdentityNotReady(IdentityProviderError):
    # API 키 미설정 등
    def __init__(self, message: str):
        super().__init__("auth/configuration-not-found", message)


def normalize_code(message: str) -> str:
    # "WEAK_PASSWORD : Password should be at least 6 characters" 같은 형태도 있음
    head = (message or "").split(" : ", 1)[0].strip()
    return _CODE_MAP.get(head, f"auth/{head.lower().replace('_', '-')}" if head else "auth/internal-error")


class IdentitySession(BaseModel):
    id_token: str = Field(alias="idToken")
    email: Optional[str] = None
    local_id: Optional[str] = Field(default=None, alias="localId")
    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")


class IdentityProvider(Protocol):
    async def sign_up(self, email: str, password: str) -> IdentitySession: ...
    async def sign_in(self, email: str, password: str) -> IdentitySession: ...
    async def send_email_verification(self, id_token: str) -> None: ...
    async def send_password_reset(self, email: str) -> None: ...


class FirebaseIdentity:
    def __init__(self, client: httpx.AsyncClient, api_key: Optional[str] = None, base_url: Optional[str] = None):
        self.client = client
        self.api_key = api_key if api_key is not None else settings.FIREBASE_API_KEY
        self.base_url = (base_url or settings.IDENTITY_BASE_URL).rstrip("/")

    async def _call(self, method: str, body: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise IdentityNotReady("FIREBASE_API_KEY not set")
        url = f"{self.base_url}/accounts:{method}"
        try:
            resp = await self.client.post(url, params={"key": self.api_key}, json=body)
        except httpx.HTTPError as e:
            log.warning("identity %s transport error: %s", method, e)
            raise IdentityProviderError("auth/network-request-failed", str(e)) from e

        if resp.is_error:
            try:
                body = resp.json()
            except ValueError:
                body = None
            error = body.get("error") if isinstance(body, dict) else None
            message = error.get("message", "") if isinstance(error, dict) else ""
            code = normalize_code(message)
            log.info("identity %s failed: %s (%s)", method, code, resp.status_code)
            raise IdentityProviderError(code, message)
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            log.warning("identity %s returned non-JSON body", method)
            raise IdentityProviderError("auth/internal-error", "malformed identity response") from e

    async def _session(self, method: str, body: Dict[str, Any]) -> IdentitySession:
        data = await self._call(method, body)
        try:
            return IdentitySession.model_validate(data)
        except ValidationError as e:
            # 2xx 인데 idToken 이 없는 경우
            log.warning("identity %s returned no session: %s", method, e)
            raise IdentityProviderError("auth/internal-error", "identity response has no session") from e

    async def sign_up(self, email: str, password: str) -> IdentitySession:
        return await self._session("signUp", {"email": email, "password": password, "returnSecureToken": True})

    async def sign_in(self, email: str, password: str) -> IdentitySession:
        return await self._session(
            "signInWithPassword", {"email": email, "password": password, "returnSecureToken": True}
        )

    async def send_email_verification(self, id_token: str) -> None:
        await self._call("sendOobCode", {"requestType": "VERIFY_EMAIL", "idToken": id_token})

    async def send_password_reset(self, email: str) -> None:
        await self._call("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})
