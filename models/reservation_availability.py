"""
Availability snapshots: every space at one instant, and the hourly grid of
one space for one calendar day. Read-only.
"""

from datetime import datetime, timedelta

from flask import current_app

from database import get_db
from utils.datetime_helpers import (
    get_now, get_timezone, to_db, to_iso, from_db, coerce_datetime, local_day_bounds
)
from utils.errors import NotFoundError, InvalidInputError
from utils.messages import MESSAGES
from utils.validators import validate_date_format
from .space import get_space_by_id, is_unavailable_at, window_touches_day
from .reservation_conflicts import seats_of, intervals_overlap

AVAILABLE = 'AVAILABLE'
OCCUPIED = 'OCCUPIED'
UNAVAILABLE = 'UNAVAILABLE'


# =============================================================================
# POINT IN TIME
# =============================================================================

def get_availability(point_in_time=None) -> dict:
    """
    Status of every space at one instant.

    A space is UNAVAILABLE when the instant lies inside its maintenance
    window, OCCUPIED when confirmed reservations covering the instant
    (start <= t < end) use all its seats, AVAILABLE otherwise.

    Args:
        point_in_time: ISO string or datetime (default: now)

    Returns:
        dict: {'datetime': iso, 'spaces': [per-space status dicts]}

    Raises:
        InvalidInputError: Unparseable point_in_time
    """
    if point_in_time is None or point_in_time == '':
        instant = get_now()
    else:
        try:
            instant = coerce_datetime(point_in_time)
        except ValueError:
            raise InvalidInputError(MESSAGES['invalid_datetime'], 'INVALID_DATETIME')

    db = get_db()
    cursor = db.cursor()

    cursor.execute('''
        SELECT s.*, f.name as floor_name, f.building
        FROM spaces s
        LEFT JOIN floors f ON s.floor_id = f.id
        ORDER BY s.id
    ''')
    spaces = [dict(row) for row in cursor.fetchall()]

    t = to_db(instant)
    cursor.execute('''
        SELECT space_id, seat_count, end_time
        FROM reservations
        WHERE status = 'confirmed' AND start_time <= ? AND end_time > ?
        ORDER BY end_time
    ''', (t, t))

    covering = {}
    for row in cursor.fetchall():
        covering.setdefault(row['space_id'], []).append(dict(row))

    snapshot = []
    for space in spaces:
        if is_unavailable_at(space, instant):
            snapshot.append({
                'space_id': space['id'],
                'name': space['name'],
                'status': UNAVAILABLE,
                'reason': space.get('unavailability_reason') or MESSAGES['maintenance'],
            })
            continue

        reservations = covering.get(space['id'], [])
        occupied = sum(seats_of(r) for r in reservations)

        if occupied >= space['capacity']:
            snapshot.append({
                'space_id': space['id'],
                'name': space['name'],
                'status': OCCUPIED,
                # rows are ordered by end_time, the first to end frees a seat
                'next_available': to_iso(reservations[0]['end_time']),
            })
        else:
            snapshot.append({
                'space_id': space['id'],
                'name': space['name'],
                'status': AVAILABLE,
                'available_seats': space['capacity'] - occupied,
                'total_seats': space['capacity'],
            })

    return {'datetime': to_iso(t), 'spaces': snapshot}


# =============================================================================
# DAY GRID
# =============================================================================

def get_space_day_availability(space_id: int, date_str: str) -> dict:
    """
    Hourly grid for one space on one calendar day (configured timezone).

    Slots run from DAY_GRID_START_HOUR to DAY_GRID_END_HOUR (08:00..21:00
    by default, 14 one-hour slots). Maintenance is decided once per day:
    when the window touches the day every slot is UNAVAILABLE. Otherwise a
    slot is OCCUPIED when any confirmed reservation overlaps
    [slot_start, slot_end), AVAILABLE if not.

    Raises:
        InvalidInputError: date_str is not YYYY-MM-DD
        NotFoundError: Space does not exist
    """
    if not validate_date_format(date_str):
        raise InvalidInputError(MESSAGES['invalid_date_format'], 'INVALID_DATE_FORMAT')

    space = get_space_by_id(space_id)
    if not space:
        raise NotFoundError(MESSAGES['space_not_found'], 'SPACE_NOT_FOUND')

    day = datetime.strptime(date_str, '%Y-%m-%d').date()
    day_start, day_end = local_day_bounds(day)

    cursor = get_db().cursor()
    cursor.execute('''
        SELECT id, start_time, end_time
        FROM reservations
        WHERE space_id = ? AND status = 'confirmed'
          AND start_time < ? AND end_time > ?
        ORDER BY start_time
    ''', (space_id, to_db(day_end), to_db(day_start)))
    reservations = [
        (from_db(row['start_time']), from_db(row['end_time']))
        for row in cursor.fetchall()
    ]

    tz = get_timezone()
    first_hour = current_app.config.get('DAY_GRID_START_HOUR', 8)
    last_hour = current_app.config.get('DAY_GRID_END_HOUR', 22)
    under_maintenance = window_touches_day(space, day_start, day_end)

    slots = []
    for hour in range(first_hour, last_hour):
        local_start = datetime(day.year, day.month, day.day, hour, tzinfo=tz)
        slot_start = coerce_datetime(local_start)
        slot_end = coerce_datetime(local_start + timedelta(hours=1))

        if under_maintenance:
            status = UNAVAILABLE
        elif any(intervals_overlap(start, end, slot_start, slot_end) for start, end in reservations):
            status = OCCUPIED
        else:
            status = AVAILABLE

        slots.append({'time': f'{hour:02d}:00', 'status': status})

    return {'space_id': space_id, 'date': date_str, 'slots': slots}

