"""
Audit logging utility.
Records who did what to which reservation or space.
"""

import logging
from flask import request
from flask_login import current_user

logger = logging.getLogger(__name__)


def log_audit(
    action: str,
    entity_type: str,
    entity_id: int = None,
    details: dict = None,
    user_id: int = None
) -> int:
    """
    Log an audit entry.

    Captures the current user, IP address and user agent from the Flask
    request context when available.

    Args:
        action: CREATED, JOINED, CANCELLED, ADMIN_CANCELLED,
            PARTICIPANT_REMOVED, SPACE_UPDATED, SPACE_UNAVAILABLE,
            SPACE_AVAILABLE, FLOOR_CREATED, FLOOR_UPDATED
        entity_type: Entity type (reservation, space, floor)
        entity_id: ID of the affected entity
        details: Extra context stored as JSON
        user_id: Override user ID (defaults to current_user.id)

    Returns:
        New audit log ID, or None if logging failed
    """
    try:
        from models.audit_log import create_audit_log

        if user_id is None:
            if getattr(current_user, 'is_authenticated', False):
                user_id = current_user.id

        ip_address = None
        user_agent = None

        try:
            ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
            if ip_address and ',' in ip_address:
                ip_address = ip_address.split(',')[0].strip()
            user_agent = request.headers.get('User-Agent', '')[:255]
        except RuntimeError:
            # Outside request context (CLI, housekeeping)
            pass

        return create_audit_log(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=user_id,
            details=details,
            ip_address=ip_address,
            user_agent=user_agent
        )

    except Exception as e:
        # Audit logging never fails the main operation
        logger.error(f"Failed to log audit entry: {e}", exc_info=True)
        return None
