from __future__ import annotations

from enum import Enum


class QRStatus(str, Enum):
    """Trạng thái mã QR gắn với một lượt khách (chỉ đi một chiều UNUSED -> USED)."""

    UNUSED = "unused"
    USED = "used"


class RedemptionOutcome(str, Enum):
    SIGNED_OUT = "signed_out"
    ALREADY_SIGNED_OUT = "already_signed_out"
    NOT_FOUND = "not_found"


class SignoutPolicy(str, Enum):
    """How a scanned sign-out token is redeemed.

    STRICT guards the update with ``qr_status='unused'`` so only the first scan wins.
    LEGACY updates unconditionally and always reports success.
    """

    STRICT = "strict"
    LEGACY = "legacy"


class RecordStatus(str, Enum):
    """Trạng thái hoạt động của công ty/phòng ban/chức danh/nhân viên."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"
