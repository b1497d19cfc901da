import logging
from typing import Optional, Any, Dict

from django.contrib.auth import get_user_model

from reminders.models import AuditEvent

User = get_user_model()
logger = logging.getLogger(__name__)


def log_action(*, user: Optional[User], action: str, object_type: Optional[str]=None, object_id: Optional[int]=None, detail: Optional[Dict[str, Any]]=None) -> AuditEvent:
    return AuditEvent.objects.create(
        user=user if isinstance(user, User) and user.pk else None,
        action=action,
        object_type=object_type, object_id=object_id,
        detail=detail or {},
    )


def audit_write(request, action: str, obj, detail: Optional[Dict[str, Any]]=None) -> None:
    """Audit a write made through the API; a failing audit never fails the write."""
    try:
        log_action(user=request.user, action=action, object_type=obj._meta.model_name,
                   object_id=obj.pk, detail=detail)
    except Exception:
        logger.warning("Could not audit %s on %s #%s", action, obj._meta.model_name, obj.pk, exc_info=True)
