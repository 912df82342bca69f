# app/forms/auth_forms.py
# 회원가입/로그인/비밀번호 재설정 폼 스키마

from __future__ import annotations
import re

from pydantic import BaseModel, field_validator, model_validator

from app.forms.errors import field_error

PASSWORD_MIN = 8

# 이메일은 형식만 대충 본다 (실제 확인은 인증 메일)
RX_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
RX_PASSWORD = re.compile(r"^[a-zA-Z0-9]+$")

MSG_EMAIL_REQUIRED = "メールアドレスを入力してください"
MSG_EMAIL_FORMAT = "正しいメールアドレスの形式で入力してください。"
MSG_PASSWORD_MIN = "8桁以上のパスワードを入力してください"
MSG_PASSWORD_CHARS = "英大文字、英小文字、数字で入力してください"
MSG_PASSWORD_MISMATCH = "パスワードと確認用パスワードが一致しません"
MSG_RESET_EMAIL_REQUIRED = "メールアドレスを入力してください。"


def _check_email(v: str) -> str:
    if len(v) < 1:
        raise field_error("email_required", MSG_EMAIL_REQUIRED)
    if not RX_EMAIL.match(v):
        raise field_error("email_format", MSG_EMAIL_FORMAT)
    return v


def _check_password(v: str) -> str:
    if len(v) < PASSWORD_MIN:
        raise field_error("password_too_short", MSG_PASSWORD_MIN)
    if not RX_PASSWORD.match(v):
        raise field_error("password_chars", MSG_PASSWORD_CHARS)
    return v


class LoginForm(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _v_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def _v_password(cls, v: str) -> str:
        return _check_password(v)


class RegisterForm(LoginForm):
    passwordConfirmation: str

    @field_validator("passwordConfirmation")
    @classmethod
    def _v_confirmation(cls, v: str) -> str:
        return _check_password(v)

    @model_validator(mode="after")
    def _v_match(self):
        if self.password != self.passwordConfirmation:
            raise field_error("password_mismatch", MSG_PASSWORD_MISMATCH, field="passwordConfirmation")
        return self


class PasswordResetForm(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def _v_email(cls, v: str) -> str:
        if len(v) < 1:
            raise field_error("email_required", MSG_RESET_EMAIL_REQUIRED)
        return v
