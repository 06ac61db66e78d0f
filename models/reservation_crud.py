"""
Reservation CRUD operations.
Handles create and read for reservations and their participants.
"""

import logging
import uuid

from flask import current_app

from database import get_db
from utils.datetime_helpers import get_now, to_db, to_iso, coerce_datetime
from utils.errors import NotFoundError, ForbiddenError, InvalidInputError
from utils.messages import MESSAGES
from utils.validators import sanitize_input
from .space import get_space_by_id
from .reservation_conflicts import check_booking_admissible, GROUP, RESERVATION_TYPES

logger = logging.getLogger(__name__)

RESERVATION_SELECT = '''
    SELECT r.*,
           s.name as space_name, s.space_type, s.capacity as space_capacity,
           s.min_capacity as space_min_capacity,
           u.name as user_name, u.email as user_email
    FROM reservations r
    JOIN spaces s ON r.space_id = s.id
    JOIN users u ON r.user_id = u.id
'''


# =============================================================================
# INVITATION TOKENS
# =============================================================================

def generate_invitation_token(cursor, max_retries: int = 5) -> str:
    """
    Generate a unique invitation token.

    Args:
        cursor: Active transaction cursor
        max_retries: Max attempts on collision

    Returns:
        str: Token not yet used by any reservation

    Raises:
        RuntimeError: If unable to generate a unique token
    """
    for attempt in range(max_retries):
        token = str(uuid.uuid4())
        cursor.execute('SELECT id FROM reservations WHERE invitation_token = ?', (token,))
        if not cursor.fetchone():
            return token

    raise RuntimeError('Could not generate a unique invitation token')


def build_invitation_link(token: str) -> str:
    """Public link a group organizer shares with invitees."""
    base_url = current_app.config.get('APP_BASE_URL', 'http://localhost:3000').rstrip('/')
    return f'{base_url}/invite/{token}'


# =============================================================================
# SERIALIZATION
# =============================================================================

def get_participants(reservation_ids: list, cursor=None) -> dict:
    """
    Load participants for several reservations at once.

    Returns:
        dict: {reservation_id: [participant dict, ...]} ordered by join time
    """
    if not reservation_ids:
        return {}

    cur = cursor or get_db().cursor()
    placeholders = ','.join('?' * len(reservation_ids))
    cur.execute(f'''
        SELECT p.id, p.reservation_id, p.user_id, p.role, p.status, p.created_at,
               u.name, u.email
        FROM reservation_participants p
        JOIN users u ON p.user_id = u.id
        WHERE p.reservation_id IN ({placeholders})
        ORDER BY p.created_at, p.id
    ''', list(reservation_ids))

    grouped = {rid: [] for rid in reservation_ids}
    for row in cur.fetchall():
        grouped[row['reservation_id']].append({
            'id': row['id'],
            'user_id': row['user_id'],
            'name': row['name'],
            'email': row['email'],
            'role': row['role'],
            'status': row['status'],
            'joined_at': to_iso(row['created_at']),
        })
    return grouped


def serialize_reservation(row: dict, participants: list) -> dict:
    """Shape a reservation row (from RESERVATION_SELECT) for API output."""
    token = row.get('invitation_token')
    data = {
        'id': row['id'],
        'type': GROUP if token else 'individual',
        'space_id': row['space_id'],
        'user_id': row['user_id'],
        'start_time': to_iso(row['start_time']),
        'end_time': to_iso(row['end_time']),
        'seat_count': row['seat_count'],
        'status': row['status'],
        'notes': row.get('notes'),
        'cancelled_by': row.get('cancelled_by'),
        'created_at': to_iso(row['created_at']),
        'space': {
            'id': row['space_id'],
            'name': row['space_name'],
            'space_type': row['space_type'],
            'capacity': row['space_capacity'],
            'min_capacity': row['space_min_capacity'],
        },
        'user': {
            'id': row['user_id'],
            'name': row['user_name'],
            'email': row['user_email'],
        },
        'participants': participants,
    }
    if token:
        data['invitation_token'] = token
        data['invitation_link'] = build_invitation_link(token)
    return data


# =============================================================================
# CREATE
# =============================================================================

def create_reservation(
    user_id: int,
    space_id: int,
    start_time,
    end_time,
    kind: str = 'individual',
    group_size: int = None,
    notes: str = None
) -> dict:
    """
    Admit and persist a booking request.

    The admission checks and the inserts run in one BEGIN IMMEDIATE
    transaction: SQLite grants a single writer at a time, so two requests
    for the same slot cannot both pass the capacity check. For group
    bookings the organizer participant is inserted in the same
    transaction.

    Args:
        user_id: Organizer / owner
        space_id: Space to book
        start_time: Start (ISO string or datetime)
        end_time: End (ISO string or datetime), strictly after start
        kind: 'individual' or 'group'
        group_size: Seats for a group booking
        notes: Free text

    Returns:
        dict: Created reservation with participants (and invitation link for groups)

    Raises:
        NotFoundError: Space does not exist
        InvalidInputError: Bad time range or group size
        ConflictError: Seats exhausted or user double-booked
    """
    if kind not in RESERVATION_TYPES:
        raise InvalidInputError(MESSAGES['invalid_reservation_type'])

    try:
        start = coerce_datetime(start_time)
        end = coerce_datetime(end_time)
    except ValueError:
        raise InvalidInputError(MESSAGES['invalid_datetime'], 'INVALID_DATETIME')

    # Stored at second precision; validate what will be stored
    start = start.replace(microsecond=0)
    end = end.replace(microsecond=0)

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        space = get_space_by_id(space_id, cursor=cursor)
        if not space:
            raise NotFoundError(MESSAGES['space_not_found'], 'SPACE_NOT_FOUND')

        seats = check_booking_admissible(cursor, space, user_id, start, end, kind, group_size)

        is_group = kind == GROUP
        invitation_token = generate_invitation_token(cursor) if is_group else None
        now = to_db(get_now())

        cursor.execute('''
            INSERT INTO reservations (
                space_id, user_id, start_time, end_time, seat_count,
                status, notes, invitation_token, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, 'confirmed', ?, ?, ?, ?)
        ''', (
            space_id, user_id, to_db(start), to_db(end), seats,
            sanitize_input(notes, max_length=1000) or None, invitation_token, now, now
        ))
        reservation_id = cursor.lastrowid

        if is_group:
            cursor.execute('''
                INSERT INTO reservation_participants
                (reservation_id, user_id, role, status, created_at)
                VALUES (?, ?, 'organizer', 'confirmed', ?)
            ''', (reservation_id, user_id, now))

        db.commit()

    except Exception:
        db.rollback()
        raise

    logger.info(
        'Reservation %s created: user=%s space=%s %s-%s seats=%s type=%s',
        reservation_id, user_id, space_id, to_db(start), to_db(end), seats, kind
    )
    return get_reservation_by_id(reservation_id)


# =============================================================================
# READ
# =============================================================================

def get_reservation_row(reservation_id: int, cursor=None) -> dict:
    """Raw reservation row joined with space and owner, or None."""
    cur = cursor or get_db().cursor()
    cur.execute(RESERVATION_SELECT + ' WHERE r.id = ?', (reservation_id,))
    row = cur.fetchone()
    return dict(row) if row else None


def get_reservation_by_id(reservation_id: int) -> dict:
    """
    Get reservation by ID with space, owner and participants.

    Args:
        reservation_id: Reservation ID

    Returns:
        dict: Serialized reservation, or None if not found
    """
    row = get_reservation_row(reservation_id)
    if not row:
        return None
    participants = get_participants([reservation_id])[reservation_id]
    return serialize_reservation(row, participants)


def get_reservation(reservation_id: int, user_id: int) -> dict:
    """
    Get a reservation on behalf of its owner.

    Raises:
        NotFoundError: Reservation does not exist
        ForbiddenError: Requester is not the owner
    """
    reservation = get_reservation_by_id(reservation_id)
    if not reservation:
        raise NotFoundError(MESSAGES['reservation_not_found'], 'RESERVATION_NOT_FOUND')
    if reservation['user_id'] != user_id:
        raise ForbiddenError(MESSAGES['access_denied'])
    return reservation
