from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import QrCode


class QrCodeRepository(Protocol):
    def replace_active(self, *, subject_id: int, code: str) -> Optional[QrCode]:
        """Deactivate the subject's codes and insert `code` as the active one.

        Runs as one transaction serialized on the subject. Returns None when
        the subject does not exist.
        """

        raise NotImplementedError

    def get_active(self, subject_id: int) -> Optional[QrCode]:
        raise NotImplementedError

    def list_active(self, subject_id: int) -> Sequence[QrCode]:
        raise NotImplementedError

    def find_active_by_code(self, code: str, *, student_id: Optional[int] = None) -> Optional[QrCode]:
        """Newest active code equal to `code`.

        Codes are chosen per subject and may repeat across subjects; with
        `student_id` only subjects the student is enrolled in are searched.
        """

        raise NotImplementedError
