"""
Space registry data access functions.
Spaces are read-only to the booking core; admins create and edit them and
open or close maintenance windows.
"""

import logging
from datetime import datetime

from database import get_db
from utils.datetime_helpers import get_now, to_db, to_iso, from_db, coerce_datetime
from utils.errors import NotFoundError, InvalidInputError
from utils.messages import MESSAGES
from utils.validators import validate_space_capacity, sanitize_input
from .floor import get_floor_by_id

logger = logging.getLogger(__name__)

AVAILABLE = 'AVAILABLE'
UNAVAILABLE = 'UNAVAILABLE'


# =============================================================================
# READ
# =============================================================================

def get_space_by_id(space_id: int, cursor=None) -> dict:
    """
    Get space by ID with its floor.

    Args:
        space_id: Space ID
        cursor: Active transaction cursor (optional)

    Returns:
        Space dict or None if not found
    """
    cur = cursor or get_db().cursor()
    cur.execute('''
        SELECT s.*, f.name as floor_name, f.building
        FROM spaces s
        LEFT JOIN floors f ON s.floor_id = f.id
        WHERE s.id = ?
    ''', (space_id,))
    row = cur.fetchone()
    return dict(row) if row else None


def get_all_spaces(space_type: str = None, floor_id: int = None, min_capacity: int = None) -> list:
    """
    List spaces, optionally filtered.

    Args:
        space_type: Filter by type (desk, meeting_room, ...)
        floor_id: Filter by floor
        min_capacity: Only spaces holding at least this many people

    Returns:
        List of space dicts ordered by name
    """
    query = '''
        SELECT s.*, f.name as floor_name, f.building
        FROM spaces s
        LEFT JOIN floors f ON s.floor_id = f.id
        WHERE 1=1
    '''
    params = []

    if space_type:
        query += ' AND s.space_type = ?'
        params.append(space_type)

    if floor_id:
        query += ' AND s.floor_id = ?'
        params.append(floor_id)

    if min_capacity:
        query += ' AND s.capacity >= ?'
        params.append(min_capacity)

    query += ' ORDER BY s.name'

    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(query, params)
        return [dict(row) for row in cursor.fetchall()]


def is_unavailable_at(space: dict, instant: datetime) -> bool:
    """
    Check whether an instant falls inside the space's maintenance window.

    The window is closed on both ends; a window without an end is open-ended.
    """
    start = from_db(space.get('unavailability_start'))
    if start is None:
        return False
    end = from_db(space.get('unavailability_end'))
    return start <= instant and (end is None or instant <= end)


def window_touches_day(space: dict, day_start: datetime, day_end: datetime) -> bool:
    """
    Check whether the maintenance window touches a calendar day.

    day_start/day_end are the UTC [start, end) bounds of the day. A window
    ending exactly at midnight still counts for the day that starts there.
    """
    start = from_db(space.get('unavailability_start'))
    if start is None:
        return False
    end = from_db(space.get('unavailability_end'))
    return start < day_end and (end is None or end >= day_start)


def serialize_space(space: dict) -> dict:
    """Shape a space row for API output."""
    return {
        'id': space['id'],
        'name': space['name'],
        'space_type': space['space_type'],
        'description': space.get('description'),
        'capacity': space['capacity'],
        'min_capacity': space['min_capacity'],
        'floor': {
            'id': space.get('floor_id'),
            'name': space.get('floor_name'),
            'building': space.get('building'),
        } if space.get('floor_id') else None,
        'availability_status': space['availability_status'],
        'unavailability_start': to_iso(space.get('unavailability_start')),
        'unavailability_end': to_iso(space.get('unavailability_end')),
        'unavailability_reason': space.get('unavailability_reason'),
    }


# =============================================================================
# ADMIN WRITES
# =============================================================================

def create_space(
    name: str,
    capacity: int,
    min_capacity: int = 1,
    space_type: str = 'room',
    floor_id: int = None,
    description: str = None
) -> int:
    """
    Create a space.

    Raises:
        InvalidInputError: If capacity >= min_capacity >= 1 does not hold
    """
    name = sanitize_input(name, max_length=120)
    if not name:
        raise InvalidInputError(MESSAGES['invalid_payload'])
    if not validate_space_capacity(capacity, min_capacity):
        raise InvalidInputError(MESSAGES['invalid_space_capacity'], 'INVALID_CAPACITY')
    if floor_id is not None and not get_floor_by_id(floor_id):
        raise NotFoundError(MESSAGES['floor_not_found'], 'FLOOR_NOT_FOUND')

    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO spaces (floor_id, name, space_type, description, capacity, min_capacity)
        VALUES (?, ?, ?, ?, ?, ?)
    ''', (floor_id, name, space_type, description, capacity, min_capacity))
    db.commit()

    logger.info('Space %s created (capacity=%s, min_capacity=%s)', cursor.lastrowid, capacity, min_capacity)
    return cursor.lastrowid


def update_space(space_id: int, **kwargs) -> dict:
    """
    Update space fields.

    capacity and min_capacity are checked together against the merged row,
    so changing one of them alone cannot break capacity >= min_capacity >= 1.
    Existing reservations are left untouched.

    Args:
        space_id: Space ID to update
        **kwargs: Fields to update (name, space_type, description,
                  capacity, min_capacity, floor_id)

    Returns:
        Updated space dict

    Raises:
        NotFoundError: Space or target floor does not exist
        InvalidInputError: Empty name or inconsistent capacities
    """
    space = get_space_by_id(space_id)
    if not space:
        raise NotFoundError(MESSAGES['space_not_found'], 'SPACE_NOT_FOUND')

    allowed_fields = ['name', 'space_type', 'description', 'capacity', 'min_capacity', 'floor_id']
    changes = {field: kwargs[field] for field in allowed_fields if field in kwargs}

    if 'name' in changes:
        changes['name'] = sanitize_input(changes['name'], max_length=120)
        if not changes['name']:
            raise InvalidInputError(MESSAGES['invalid_payload'])

    merged = {**space, **changes}
    if not validate_space_capacity(merged['capacity'], merged['min_capacity']):
        raise InvalidInputError(MESSAGES['invalid_space_capacity'], 'INVALID_CAPACITY')

    if changes.get('floor_id') is not None and not get_floor_by_id(changes['floor_id']):
        raise NotFoundError(MESSAGES['floor_not_found'], 'FLOOR_NOT_FOUND')

    if changes:
        updates = [f'{field} = ?' for field in changes]
        values = list(changes.values()) + [space_id]
        db = get_db()
        db.execute(f'UPDATE spaces SET {", ".join(updates)} WHERE id = ?', values)
        db.commit()
        logger.info('Space %s updated (%s)', space_id, ', '.join(changes))

    return get_space_by_id(space_id)


def mark_space_unavailable(space_id: int, reason: str, start, end=None) -> dict:
    """
    Open a maintenance window on a space.

    Args:
        space_id: Space ID
        reason: Why the space is closed
        start: Window start (ISO string or datetime)
        end: Window end, or None for open-ended

    Returns:
        Updated space dict
    """
    reason = sanitize_input(reason, max_length=255)
    if not reason:
        raise InvalidInputError(MESSAGES['unavailability_reason_required'])

    try:
        start_dt = coerce_datetime(start)
        end_dt = coerce_datetime(end) if end else None
    except ValueError:
        raise InvalidInputError(MESSAGES['invalid_datetime'], 'INVALID_DATETIME')

    start_dt = start_dt.replace(microsecond=0)
    if end_dt is not None:
        end_dt = end_dt.replace(microsecond=0)

    if end_dt is not None and end_dt < start_dt:
        raise InvalidInputError(MESSAGES['invalid_time_range'], 'INVALID_TIME_RANGE')

    if not get_space_by_id(space_id):
        raise NotFoundError(MESSAGES['space_not_found'], 'SPACE_NOT_FOUND')

    db = get_db()
    db.execute('''
        UPDATE spaces
        SET availability_status = ?, unavailability_reason = ?,
            unavailability_start = ?, unavailability_end = ?
        WHERE id = ?
    ''', (UNAVAILABLE, reason, to_db(start_dt), to_db(end_dt) if end_dt else None, space_id))
    db.commit()

    logger.info('Space %s marked unavailable: %s', space_id, reason)
    return get_space_by_id(space_id)


def mark_space_available(space_id: int) -> dict:
    """Close the maintenance window of a space."""
    if not get_space_by_id(space_id):
        raise NotFoundError(MESSAGES['space_not_found'], 'SPACE_NOT_FOUND')

    db = get_db()
    db.execute('''
        UPDATE spaces
        SET availability_status = ?, unavailability_reason = NULL,
            unavailability_start = NULL, unavailability_end = NULL
        WHERE id = ?
    ''', (AVAILABLE, space_id))
    db.commit()

    logger.info('Space %s marked available', space_id)
    return get_space_by_id(space_id)


# =============================================================================
# HOUSEKEEPING
# =============================================================================

def release_expired_unavailability(now: datetime = None) -> int:
    """
    Flip spaces whose maintenance window has ended back to AVAILABLE.

    Args:
        now: Reference instant (default: current time)

    Returns:
        Number of spaces released
    """
    now = now or get_now()

    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        UPDATE spaces
        SET availability_status = ?, unavailability_reason = NULL,
            unavailability_start = NULL, unavailability_end = NULL
        WHERE availability_status = ?
          AND unavailability_end IS NOT NULL
          AND unavailability_end <= ?
    ''', (AVAILABLE, UNAVAILABLE, to_db(now)))
    db.commit()

    released = cursor.rowcount
    if released > 0:
        logger.info('Updated %s space(s) with expired unavailability period', released)
    return released
