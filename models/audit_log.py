"""
Audit Log model and data access functions.
Handles audit log creation and filtered retrieval.
"""

import json
from database import get_db


# =============================================================================
# WRITE OPERATIONS
# =============================================================================

def create_audit_log(
    action: str,
    entity_type: str,
    entity_id: int = None,
    user_id: int = None,
    details: dict = None,
    ip_address: str = None,
    user_agent: str = None
) -> int:
    """
    Create a new audit log entry.

    Args:
        action: Action type (CREATED, JOINED, CANCELLED, ADMIN_CANCELLED, ...)
        entity_type: Entity type (reservation, space, user)
        entity_id: ID of the affected entity
        user_id: ID of the acting user (None for system actions)
        details: Free-form context, serialized as JSON
        ip_address: Client IP address
        user_agent: Client user agent string

    Returns:
        New audit log ID
    """
    details_json = json.dumps(details or {}, default=str, ensure_ascii=False)

    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute('''
            INSERT INTO audit_log
            (user_id, action, entity_type, entity_id, details, ip_address, user_agent)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        ''', (user_id, action, entity_type, entity_id, details_json, ip_address, user_agent))

        return cursor.lastrowid


# =============================================================================
# READ OPERATIONS
# =============================================================================

def _build_filters(user_id=None, action=None, entity_type=None, user=None,
                   start_date=None, end_date=None) -> tuple:
    clauses = []
    params = []

    if user_id is not None:
        clauses.append('al.user_id = ?')
        params.append(user_id)

    if action:
        clauses.append('al.action = ?')
        params.append(action)

    if entity_type:
        clauses.append('al.entity_type = ?')
        params.append(entity_type)

    if user:
        clauses.append('(u.name LIKE ? OR u.email LIKE ?)')
        params.extend([f'%{user}%', f'%{user}%'])

    if start_date:
        clauses.append('date(al.created_at) >= date(?)')
        params.append(start_date)

    if end_date:
        clauses.append('date(al.created_at) <= date(?)')
        params.append(end_date)

    where = (' WHERE ' + ' AND '.join(clauses)) if clauses else ''
    return where, params


def get_audit_logs(limit: int = 50, offset: int = 0, **filters) -> list:
    """
    Get audit logs with optional filtering, newest first.

    Args:
        limit: Maximum number of records to return
        offset: Number of records to skip for pagination
        **filters: user_id, action, entity_type, user (name/email search),
            start_date, end_date (YYYY-MM-DD)

    Returns:
        List of audit log dicts with parsed details
    """
    where, params = _build_filters(**filters)

    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(f'''
            SELECT al.*, u.name as user_name, u.email as user_email
            FROM audit_log al
            LEFT JOIN users u ON al.user_id = u.id
            {where}
            ORDER BY al.created_at DESC, al.id DESC
            LIMIT ? OFFSET ?
        ''', params + [limit, offset])

        entries = []
        for row in cursor.fetchall():
            entry = dict(row)
            entry['details'] = json.loads(entry['details']) if entry['details'] else {}
            entries.append(entry)
        return entries


def count_audit_logs(**filters) -> int:
    """Count audit logs matching the same filters as get_audit_logs()."""
    where, params = _build_filters(**filters)

    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(f'''
            SELECT COUNT(*) as total
            FROM audit_log al
            LEFT JOIN users u ON al.user_id = u.id
            {where}
        ''', params)
        return cursor.fetchone()['total']
