# app/forms/errors.py
# 폼 검증 공통: pydantic ValidationError → (필드 경로, 메시지) 목록

from __future__ import annotations
from typing import Any, Dict, List, Mapping, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticCustomError

M = TypeVar("M", bound=BaseModel)

# pydantic 기본 에러 타입 → 화면 메시지
_BUILTIN_MESSAGES: Dict[str, str] = {
    "missing": "入力してください",
    "string_type": "文字列で入力してください",
    "datetime_type": "日時の形式が正しくありません",
    "datetime_parsing": "日時の形式が正しくありません",
    "datetime_from_date_parsing": "日時の形式が正しくありません",
    "literal_error": "選択肢から選んでください",
    "too_long": "アップロードできるファイルは1つまでです",
    "int_parsing": "数値で入力してください",
}


class FieldError(BaseModel):
    path: List[Union[str, int]]
    message: str

    @property
    def field(self) -> str:
        return ".".join(str(p) for p in self.path)


class FormValidationError(Exception):
    # 필드 단위 에러 (네트워크 호출 전 단계)
    def __init__(self, errors: List[FieldError]):
        super().__init__(", ".join(f"{e.field}: {e.message}" for e in errors))
        self.errors = errors


def field_error(error_type: str, message: str, field: str | None = None) -> PydanticCustomError:
    """커스텀 에러 생성. field 를 주면 모델 단위 검증이라도 해당 필드에 붙는다."""
    ctx = {"field": field} if field else None
    return PydanticCustomError(error_type, message, ctx)


def _to_field_error(err: Mapping[str, Any]) -> FieldError:
    loc: Tuple[Union[str, int], ...] = tuple(err.get("loc") or ())
    ctx = err.get("ctx") or {}
    if ctx.get("field"):
        loc = loc + (ctx["field"],)
    message = _BUILTIN_MESSAGES.get(err.get("type", ""), err.get("msg", ""))
    return FieldError(path=list(loc), message=message)


def collect_errors(exc: ValidationError) -> List[FieldError]:
    # pydantic 이 돌려준 순서(필드 선언 순) 그대로
    return [_to_field_error(e) for e in exc.errors()]


def validate_form(schema: Type[M], data: Mapping[str, Any]) -> M:
    try:
        return schema.model_validate(dict(data))
    except ValidationError as e:
        raise FormValidationError(collect_errors(e)) from e
