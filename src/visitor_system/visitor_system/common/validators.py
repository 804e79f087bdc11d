from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} không hợp lệ")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} tối thiểu {min_len} ký tự")
    return value


def optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} phải là số nguyên")


def require_int(value: Any, field_name: str) -> int:
    parsed = optional_int(value, field_name)
    if parsed is None:
        raise ValidationError(f"{field_name} không hợp lệ")
    return parsed


def optional_date(value: Any, field_name: str) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"{field_name} phải có dạng YYYY-MM-DD")


def require_choice(value: Any, enum_cls: Type[E], field_name: str, *, default: Optional[E] = None) -> E:
    if value is None or (isinstance(value, str) and not value.strip()):
        if default is None:
            raise ValidationError(f"{field_name} không hợp lệ")
        return default
    try:
        return enum_cls(str(value).strip())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} phải là một trong: {allowed}")


def optional_choice(value: Any, enum_cls: Type[E], field_name: str) -> Optional[E]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return require_choice(value, enum_cls, field_name)
