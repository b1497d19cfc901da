"""
Custom permission classes for role based access control.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS


def _role(request):
    user = getattr(request, "user", None)
    if not (user and user.is_authenticated):
        return None
    return getattr(user, "role", None)


class IsAdminRole(BasePermission):
    """Allow access only to administrators."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) == "admin"


class IsDoctorRole(BasePermission):
    """Allow access only to users with the doctor role."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) == "doctor"


class IsPatientRole(BasePermission):
    """Allow access only to users with the patient role."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) == "patient"


class IsStaffRole(BasePermission):
    """admin or doctor."""
    def has_permission(self, request, view) -> bool:
        return _role(request) in {"admin", "doctor"}


class AdminWriteOrReadOnly(BasePermission):
    """Everyone authenticated may read; only administrators may write."""
    def has_permission(self, request, view) -> bool:
        if request.method in SAFE_METHODS:
            return _role(request) is not None
        return _role(request) == "admin"
