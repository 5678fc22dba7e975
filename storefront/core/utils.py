"""
Audit trail for catalog and order changes.

Audited models describe themselves through ``audit_identity()``, which returns
``(human name, reference)``: a product gives its name and SKU, an order its
customer and order number. Call sites only pass the instance and what changed.
"""
import logging

from .models import AuditLog

logger = logging.getLogger(__name__)


def client_ip(request):
    """First hop of X-Forwarded-For, else the socket address"""
    meta = getattr(request, 'META', None)
    if not meta:
        return None
    forwarded = meta.get('HTTP_X_FORWARDED_FOR', '')
    return forwarded.split(',')[0].strip() or meta.get('REMOTE_ADDR') or None


def acting_user(request, user=None):
    """Explicit user wins; anonymous requests are recorded without one"""
    candidate = user or getattr(request, 'user', None)
    if candidate is not None and candidate.is_authenticated:
        return candidate
    return None


def describe(instance):
    """(model name, object id, human name, reference) of an audited instance"""
    identity = getattr(instance, 'audit_identity', None)
    name, reference = identity() if identity else (str(instance), None)
    return type(instance).__name__, str(instance.pk), name, reference


def record_audit(action, instance, request=None, user=None, changes=None):
    """
    Write one audit entry for ``action`` on a saved ``instance``.

    Returns the AuditLog, or None when it could not be written. The audited
    operation has already happened by the time this runs, so failures are
    logged rather than raised.
    """
    if instance is None or instance.pk is None:
        logger.warning(f"Audit entry '{action}' skipped: nothing saved to refer to")
        return None

    model_name, object_id, name, reference = describe(instance)
    try:
        return AuditLog.objects.create(
            user=acting_user(request, user),
            action=action,
            model_name=model_name,
            object_id=object_id,
            object_name=name,
            object_reference=reference,
            changes=changes or {},
            ip_address=client_ip(request),
        )
    except Exception as e:
        logger.error(f"Failed to write audit entry '{action}' for {model_name} {object_id}: {e}")
        return None
