from __future__ import annotations

import io
from typing import Sequence

import qrcode

from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError
from ..core.logging import get_logger
from ..subjects.service import SubjectService
from ..users.model import User
from .model import QrCode
from .repository import QrCodeRepository

log = get_logger(__name__)


class QrCodeService:
    def __init__(self, qr_codes: QrCodeRepository, subjects: SubjectService):
        self._qr_codes = qr_codes
        self._subjects = subjects

    def generate(self, *, actor: User, subject_id: int, code: str) -> QrCode:
        code = require_non_empty(code, "code")
        subject = self._subjects.require_manageable(actor, subject_id)

        qr = self._qr_codes.replace_active(subject_id=subject.subject_id, code=code)
        if not qr:
            raise NotFoundError("Subject not found")
        log.info("new active QR code for subject %s (qr_id=%s)", subject.subject_id, qr.qr_id)
        return qr

    def get_active(self, subject_id: int) -> QrCode:
        qr = self._qr_codes.get_active(int(subject_id))
        if not qr:
            raise NotFoundError("No active QR code for this subject")
        return qr

    def list_active(self, subject_id: int) -> Sequence[QrCode]:
        return self._qr_codes.list_active(int(subject_id))

    def render_png(self, subject_id: int) -> bytes:
        qr = self.get_active(subject_id)
        img = qrcode.make(qr.code)
        buf = io.BytesIO()
        img.save(buf)
        return buf.getvalue()
