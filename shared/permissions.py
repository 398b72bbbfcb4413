# shared/permissions.py
from __future__ import annotations

import hmac

from django.conf import settings
from rest_framework.permissions import BasePermission

# ---- helpers ---------------------------------------------------------------


def _is_schema_generation(view) -> bool:
    """drf-spectacular 스키마 생성 시 True (권한을 널널하게 통과시켜 문서 생성 편의)."""
    return bool(getattr(view, "swagger_fake_view", False))


def cron_secret_matches(request) -> bool:
    """
    Authorization: Bearer <CRON_SECRET_KEY> 검사 (상수 시간 비교).
    시크릿이 설정돼 있지 않으면 항상 False.
    """
    secret = getattr(settings, "CRON_SECRET_KEY", "") or ""
    if not secret:
        return False
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return False
    return hmac.compare_digest(token.strip().encode(), secret.encode())


# ---- permissions -----------------------------------------------------------


class IsStaffUser(BasePermission):
    """로그인 + is_staff (운영자 전용 API)"""

    def has_permission(self, request, view):
        if _is_schema_generation(view):
            return True
        u = request.user
        return bool(getattr(u, "is_authenticated", False) and getattr(u, "is_staff", False))


__all__ = ["cron_secret_matches", "IsStaffUser"]
