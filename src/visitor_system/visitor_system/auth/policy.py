from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Optional, Protocol

from ..core.exceptions import AuthenticationError, ValidationError


class AuthPolicy(Protocol):
    name: str

    def check(self, authorization: Optional[str]) -> None:
        """Raise AuthenticationError when the request must be rejected."""

        raise NotImplementedError


@dataclass(frozen=True)
class AllowAllPolicy:
    """Token enforcement switched off: every request passes."""

    name: str = "allow"

    def check(self, authorization: Optional[str]) -> None:
        return None


@dataclass(frozen=True)
class BearerTokenPolicy:
    """Expects ``Authorization: Bearer <API_TOKEN>``."""

    api_token: str
    name: str = "bearer"

    def check(self, authorization: Optional[str]) -> None:
        if not authorization:
            raise AuthenticationError("Truy cập bị từ chối: chưa gửi token")

        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise AuthenticationError("Truy cập bị từ chối: chưa gửi token")

        if not hmac.compare_digest(token.strip().encode("utf-8"), self.api_token.encode("utf-8")):
            raise AuthenticationError("Token không hợp lệ")


def build_auth_policy(name: str, *, api_token: Optional[str] = None) -> AuthPolicy:
    name = (name or "allow").strip().lower()
    if name in {"allow", "none", "off"}:
        return AllowAllPolicy()
    if name in {"bearer", "require-bearer-token"}:
        if not api_token:
            raise ValidationError("AUTH_POLICY=bearer cần cấu hình API_TOKEN")
        return BearerTokenPolicy(api_token=api_token)
    raise ValidationError(f"AUTH_POLICY không hợp lệ: {name!r}")
