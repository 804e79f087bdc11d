from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from ..common.validators import optional_choice, optional_int, optional_str, require_non_empty
from ..core.enums import Gender, QRStatus, RedemptionOutcome, SignoutPolicy
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..organization.service import OrganizationService
from .model import RedemptionResult, TokenPayload, Visitor, VisitorDetails
from .repository import VisitorRepository
from .tokens import QRTokenEncoder, coerce_visitor_id

logger = logging.getLogger(__name__)


def parse_visitor_form(form: Mapping[str, object]) -> VisitorDetails:
    """Build VisitorDetails from a submitted form; ``qr_status`` is never read from input."""

    gender = optional_choice(form.get("gender"), Gender, "Giới tính")
    return VisitorDetails(
        first_name=require_non_empty(form.get("first_name"), "Tên khách"),
        last_name=optional_str(form.get("last_name")),
        email=optional_str(form.get("email")),
        phone=optional_str(form.get("phone")),
        gender=gender.value if gender else None,
        company_id=optional_int(form.get("company_id"), "company_id"),
        department_id=optional_int(form.get("department_id"), "department_id"),
        designation_id=optional_int(form.get("designation_id"), "designation_id"),
        whom_to_meet=optional_int(form.get("whom_to_meet"), "whom_to_meet"),
        purpose=optional_str(form.get("purpose")),
        aadhar_no=optional_str(form.get("aadhar_no")),
        address=optional_str(form.get("address")),
    )


class VisitorService:
    """Visitor lifecycle: check-in, QR token issue, QR sign-out, presence toggle.

    ``qr_status`` only ever moves unused -> used. ``status`` (on premises or not)
    is toggled by staff and is not tied to ``qr_status``.
    """

    def __init__(
        self,
        visitors: VisitorRepository,
        encoder: QRTokenEncoder,
        *,
        signout_policy: SignoutPolicy = SignoutPolicy.STRICT,
        organization: Optional[OrganizationService] = None,
        employees: Optional[EmployeeRepository] = None,
    ):
        self._visitors = visitors
        self._encoder = encoder
        self._policy = SignoutPolicy(signout_policy)
        self._organization = organization
        self._employees = employees

    @property
    def signout_policy(self) -> SignoutPolicy:
        return self._policy

    def _check_references(self, details: VisitorDetails) -> None:
        if self._organization is not None:
            self._organization.ensure_references(
                company_id=details.company_id,
                department_id=details.department_id,
                designation_id=details.designation_id,
            )
        if self._employees is not None and details.whom_to_meet is not None:
            if not self._employees.get_by_id(details.whom_to_meet):
                raise ValidationError(f"Nhân viên #{details.whom_to_meet} không tồn tại")

    def list_visitors(self) -> Sequence[Visitor]:
        return self._visitors.list_all()

    def get_visitor(self, visitor_id: int) -> Visitor:
        visitor = self._visitors.get_by_id(visitor_id)
        if not visitor:
            raise NotFoundError(f"Không tìm thấy khách #{visitor_id}")
        return visitor

    def check_in(self, details: VisitorDetails, *, image: Optional[str] = None) -> TokenPayload:
        """Register a new visit and hand back the sign-out token for it."""

        self._check_references(details)
        visitor_id = self._visitors.create(details=details, image=image)
        logger.info("visitor %s checked in", visitor_id)
        return self.issue_token(visitor_id)

    def update_visitor(self, visitor_id: int, details: VisitorDetails, *, image: Optional[str] = None) -> None:
        self.get_visitor(visitor_id)
        self._check_references(details)
        self._visitors.update(visitor_id=visitor_id, details=details, image=image)

    def issue_token(self, visitor_id) -> TokenPayload:
        """Render the QR for ``visitor_id``. Does not read or write the store."""

        visitor_id = coerce_visitor_id(visitor_id)
        url = self._encoder.signout_url(visitor_id)
        return TokenPayload(visitor_id=visitor_id, url=url, data_url=self._encoder.encode(url))

    def get_card(self, visitor_id: int) -> TokenPayload:
        self.get_visitor(visitor_id)
        return self.issue_token(visitor_id)

    def redeem_token(self, visitor_id: int) -> RedemptionResult:
        if self._policy == SignoutPolicy.LEGACY:
            # Unconditional update: replays and unknown ids still report success.
            self._visitors.update_qr_status(visitor_id=visitor_id, value=QRStatus.USED)
            logger.info("visitor %s signed out (legacy policy)", visitor_id)
            return RedemptionResult(visitor_id=visitor_id, outcome=RedemptionOutcome.SIGNED_OUT)

        rows = self._visitors.update_qr_status(
            visitor_id=visitor_id,
            value=QRStatus.USED,
            expected_prior=QRStatus.UNUSED,
        )
        if rows > 0:
            logger.info("visitor %s signed out", visitor_id)
            return RedemptionResult(visitor_id=visitor_id, outcome=RedemptionOutcome.SIGNED_OUT)

        if self._visitors.get_by_id(visitor_id) is None:
            logger.warning("sign-out token for unknown visitor %s", visitor_id)
            return RedemptionResult(visitor_id=visitor_id, outcome=RedemptionOutcome.NOT_FOUND)

        logger.warning("sign-out token for visitor %s was already used", visitor_id)
        return RedemptionResult(visitor_id=visitor_id, outcome=RedemptionOutcome.ALREADY_SIGNED_OUT)

    def redeem_scanned_image(self, image_bytes: bytes) -> RedemptionResult:
        return self.redeem_token(self._encoder.decode_image(image_bytes))

    def toggle_check_in_status(self, visitor_id: int) -> bool:
        """Flip the on-premises flag and return its new value."""

        rows = self._visitors.toggle_status(visitor_id)
        if rows == 0:
            raise NotFoundError(f"Không tìm thấy khách #{visitor_id}")
        status = self.get_visitor(visitor_id).status
        logger.info("visitor %s status -> %s", visitor_id, "in" if status else "out")
        return status
