# app/services/auth_flows.py
# 회원가입/로그인/비밀번호 재설정 흐름
# 인증 자체는 외부(IdentityProvider)에 맡기고, 여기서는 순서와 에러 문구만 담당

from __future__ import annotations
import logging
from typing import Any, Callable, Mapping

from app.forms.auth_forms import LoginForm, PasswordResetForm, RegisterForm
from app.forms.errors import FormValidationError, validate_form
from app.models.form_result import FormResult
from app.services.events_api import EventsApi, EventsApiError
from app.services.identity import IdentityProvider, IdentityProviderError
from app.services.notifier import Notifier, SnackbarMessage

log = logging.getLogger(__name__)

MSG_EMAIL_IN_USE = "すでに登録されているメールアドレスです。"
MSG_REGISTER_NG = "アカウントの作成に失敗しました。"
MSG_VERIFY_MAIL_NG = "確認メールの送信に失敗しました。"
MSG_AUTH_NG = "認証に失敗しました。"
MSG_LOGIN_NG = "ログインに失敗しました。"
MSG_RESET_MAIL_OK = "メールを送信しました。"
MSG_RESET_MAIL_NG = "メールの送信に失敗しました。"

# 로그인 실패 중 "인증 실패" 로 보여줄 코드
AUTH_FAILURE_CODES = {"auth/user-not-found", "auth/wrong-password", "auth/invalid-credential"}

REDIRECT_AFTER_REGISTER = "/sendConfirmationEmail"
REDIRECT_AFTER_LOGIN = "/"

ApiFactory = Callable[[str], EventsApi]


def _fail(notifier: Notifier, text: str, **kwargs: Any) -> FormResult:
    notifier.notify("error", text)
    return FormResult(snackbar=SnackbarMessage(severity="error", text=text), **kwargs)


def register_error_message(err: IdentityProviderError) -> str:
    if err.code == "auth/email-already-in-use":
        return MSG_EMAIL_IN_USE
    return MSG_REGISTER_NG


def login_error_message(err: IdentityProviderError) -> str:
    if err.code in AUTH_FAILURE_CODES:
        return MSG_AUTH_NG
    return MSG_LOGIN_NG


async def register(
    data: Mapping[str, Any],
    identity: IdentityProvider,
    make_api: ApiFactory,
    notifier: Notifier,
) -> FormResult:
    try:
        form = validate_form(RegisterForm, data)
    except FormValidationError as e:
        return FormResult(errors=e.errors)

    try:
        session = await identity.sign_up(form.email, form.password)
    except IdentityProviderError as e:
        log.info("sign up failed: %s", e.code)
        return _fail(notifier, register_error_message(e))

    # 가입하면 바로 로그인 상태 → 토큰은 쿠키로 내려간다
    token = session.id_token
    api = make_api(token)
    try:
        await api.post_user(form.model_dump())
    except EventsApiError as e:
        # 서버가 준 문구를 그대로 보여준다
        log.warning("POST /api/users failed: %s", e)
        return _fail(notifier, e.error_text or MSG_REGISTER_NG, token=token)

    try:
        await identity.send_email_verification(token)
    except IdentityProviderError as e:
        log.warning("verification mail failed: %s", e.code)
        return _fail(notifier, MSG_VERIFY_MAIL_NG, token=token)

    log.info("verification mail sent to %s", form.email)
    return FormResult(ok=True, redirect=REDIRECT_AFTER_REGISTER, token=token)


async def login(
    data: Mapping[str, Any],
    identity: IdentityProvider,
    make_api: ApiFactory,
    notifier: Notifier,
) -> FormResult:
    try:
        form = validate_form(LoginForm, data)
    except FormValidationError as e:
        return FormResult(errors=e.errors)

    try:
        session = await identity.sign_in(form.email, form.password)
    except IdentityProviderError as e:
        log.info("sign in failed: %s", e.code)
        return _fail(notifier, login_error_message(e))

    token = session.id_token
    try:
        await make_api(token).get_login()
    except EventsApiError as e:
        log.warning("GET /api/login failed: %s", e)
        return _fail(notifier, e.error_text or MSG_LOGIN_NG)

    return FormResult(ok=True, redirect=REDIRECT_AFTER_LOGIN, token=token)


async def request_password_reset(
    data: Mapping[str, Any],
    identity: IdentityProvider,
    notifier: Notifier,
) -> FormResult:
    try:
        form = validate_form(PasswordResetForm, data)
    except FormValidationError as e:
        return FormResult(errors=e.errors)

    try:
        await identity.send_password_reset(form.email)
    except IdentityProviderError as e:
        log.info("password reset mail failed: %s", e.code)
        return _fail(notifier, MSG_RESET_MAIL_NG)

    notifier.notify("success", MSG_RESET_MAIL_OK)
    return FormResult(ok=True, snackbar=SnackbarMessage(severity="success", text=MSG_RESET_MAIL_OK))
