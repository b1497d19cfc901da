"""
Identity and data-store error codes and their user-facing messages.

The codes follow the ``auth/<reason>`` convention of hosted identity
providers so that the front-end can keep matching on them.  Messages
are shown to the user verbatim.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.exceptions import APIException

USER_NOT_FOUND = "auth/user-not-found"
WRONG_PASSWORD = "auth/wrong-password"
EMAIL_IN_USE = "auth/email-already-in-use"
WEAK_PASSWORD = "auth/weak-password"
INVALID_EMAIL = "auth/invalid-email"
USER_DISABLED = "auth/user-disabled"
TOO_MANY_REQUESTS = "auth/too-many-requests"
PROFILE_NOT_FOUND = "auth/profile-not-found"

ERROR_MESSAGES: dict[str, str] = {
    USER_NOT_FOUND: "Pengguna tidak ditemukan",
    WRONG_PASSWORD: "Password salah",
    EMAIL_IN_USE: "Email sudah digunakan",
    WEAK_PASSWORD: "Password terlalu lemah",
    INVALID_EMAIL: "Format email tidak valid",
    USER_DISABLED: "Akun pengguna telah dinonaktifkan",
    TOO_MANY_REQUESTS: "Terlalu banyak percobaan login. Coba lagi nanti",
    PROFILE_NOT_FOUND: "Profil pengguna tidak ditemukan",
    "permission-denied": "Akses ditolak",
    "unavailable": "Layanan tidak tersedia",
    "not-found": "Data tidak ditemukan",
    "already-exists": "Data sudah ada",
    "unauthenticated": "Belum login",
    "unknown": "Terjadi kesalahan yang tidak diketahui",
}

# DRF exception codes that have a direct counterpart above.
DRF_CODE_ALIASES = {
    "permission_denied": "permission-denied",
    "not_found": "not-found",
    "not_authenticated": "unauthenticated",
    "authentication_failed": "unauthenticated",
    "throttled": TOO_MANY_REQUESTS,
    "invalid": "validation_error",
}


def readable_message(code: str | None) -> str:
    """Return the user-facing message for ``code``, or the generic one."""
    return ERROR_MESSAGES.get(code or "", ERROR_MESSAGES["unknown"])


class AuthError(APIException):
    """A sign-in or sign-up failure carrying a provider-style code."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "unknown"

    def __init__(self, code: str, status_code: int | None = None):
        super().__init__(detail=readable_message(code), code=code)
        self.error_code = code
        if status_code is not None:
            self.status_code = status_code
