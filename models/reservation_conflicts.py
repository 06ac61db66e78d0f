"""
Booking admission checks: time range, group size, seat capacity and
per-user double booking.

All checks take the cursor of the caller's write transaction so that the
reads and the following insert happen under the same lock.

Intervals are half-open: [start, end). Two reservations overlap when
existing.start < requested.end AND existing.end > requested.start, so a
reservation ending at 11:00 never conflicts with one starting at 11:00.
"""

import logging
from datetime import datetime

from flask import current_app

from utils.datetime_helpers import to_db
from utils.errors import ConflictError, InvalidInputError
from utils.messages import MESSAGES
from utils.validators import validate_time_range

logger = logging.getLogger(__name__)

INDIVIDUAL = 'individual'
GROUP = 'group'
RESERVATION_TYPES = (INDIVIDUAL, GROUP)


def intervals_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open interval intersection test."""
    return a_start < b_end and b_start < a_end


def seat_expression() -> str:
    """SQL aggregate for seats consumed by a set of reservations."""
    if current_app.config.get('SEAT_ACCOUNTING', 'seats') == 'reservations':
        return 'COUNT(*)'
    return 'COALESCE(SUM(seat_count), 0)'


def seats_of(reservation: dict) -> int:
    """Seats a single reservation row consumes under the configured accounting."""
    if current_app.config.get('SEAT_ACCOUNTING', 'seats') == 'reservations':
        return 1
    return reservation.get('seat_count') or 1


def count_occupied_seats(cursor, space_id: int, start: datetime, end: datetime) -> int:
    """
    Sum the seats of confirmed reservations on a space overlapping [start, end).

    Args:
        cursor: Active transaction cursor
        space_id: Space ID
        start: Requested start (aware)
        end: Requested end (aware)

    Returns:
        Occupied seat count
    """
    cursor.execute(f'''
        SELECT {seat_expression()} as occupied
        FROM reservations
        WHERE space_id = ?
          AND status = 'confirmed'
          AND start_time < ?
          AND end_time > ?
    ''', (space_id, to_db(end), to_db(start)))
    return cursor.fetchone()['occupied']


def find_user_conflict(cursor, user_id: int, start: datetime, end: datetime) -> dict:
    """
    Find a confirmed reservation of the user, in any space, overlapping [start, end).

    Returns:
        The conflicting reservation dict, or None
    """
    cursor.execute('''
        SELECT r.id, r.space_id, r.start_time, r.end_time, s.name as space_name
        FROM reservations r
        JOIN spaces s ON r.space_id = s.id
        WHERE r.user_id = ?
          AND r.status = 'confirmed'
          AND r.start_time < ?
          AND r.end_time > ?
        ORDER BY r.start_time
        LIMIT 1
    ''', (user_id, to_db(end), to_db(start)))
    row = cursor.fetchone()
    return dict(row) if row else None


def requested_seats(space: dict, kind: str, group_size) -> int:
    """
    Validate the group size against the space and return the seats requested.

    Individual bookings take one seat; group bookings take group_size seats
    with min_capacity <= group_size <= capacity.
    """
    if kind != GROUP:
        return 1

    if group_size is None or group_size == 0 or isinstance(group_size, bool):
        raise InvalidInputError(MESSAGES['group_size_required'])
    if not isinstance(group_size, int):
        raise InvalidInputError(MESSAGES['group_size_required'])
    if group_size < space['min_capacity']:
        raise InvalidInputError(
            MESSAGES['insufficient_group_size'].format(min_capacity=space['min_capacity']),
            'INSUFFICIENT_GROUP_SIZE'
        )
    if group_size > space['capacity']:
        raise InvalidInputError(
            MESSAGES['exceeds_max_capacity'].format(capacity=space['capacity']),
            'EXCEEDS_MAX_CAPACITY'
        )
    return group_size


def check_booking_admissible(cursor, space: dict, user_id: int, start: datetime,
                             end: datetime, kind: str, group_size=None) -> int:
    """
    Run the admission checks for a booking request, first failure wins.

    Order: strict time range, group size, seat capacity, per-user overlap.
    The caller has already confirmed the space exists.

    Returns:
        Seats the new reservation will consume

    Raises:
        InvalidInputError: Bad time range or group size
        ConflictError: Seats exhausted or user already booked at that time
    """
    if not validate_time_range(start, end):
        raise InvalidInputError(MESSAGES['invalid_time_range'], 'INVALID_TIME_RANGE')

    seats = requested_seats(space, kind, group_size)

    occupied = count_occupied_seats(cursor, space['id'], start, end)
    if occupied + seats > space['capacity']:
        logger.warning(
            'Booking rejected on space %s: %s occupied + %s requested > capacity %s',
            space['id'], occupied, seats, space['capacity']
        )
        raise ConflictError(MESSAGES['not_enough_seats'], 'BOOKING_CONFLICT')

    conflict = find_user_conflict(cursor, user_id, start, end)
    if conflict:
        logger.warning(
            'Booking rejected for user %s: overlaps reservation %s', user_id, conflict['id']
        )
        raise ConflictError(MESSAGES['user_double_booking'], 'BOOKING_CONFLICT')

    return seats
