"""Class attendance tracker.

Feature modules (users, subjects, sections, schedules, enrollments, attendance,
qrcodes) each hold a model, a repository protocol with its MySQL
implementation, a service and a thin Flask controller.
"""
from __future__ import annotations

from .main import create_app

__all__ = ["create_app"]
