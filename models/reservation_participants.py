"""
Group reservations: invitation tokens and participant membership.

A group reservation carries an invitation token. The token is live while
the reservation is confirmed and younger than INVITATION_TTL_DAYS (derived
from created_at, never stored). Capacity counts every participant,
organizer included.
"""

import logging
from datetime import datetime, timedelta

from flask import current_app

from database import get_db
from utils.datetime_helpers import get_now, to_db, to_iso, from_db
from utils.errors import (
    NotFoundError, ExpiredError, ConflictError, ForbiddenError, InvalidStateError
)
from utils.messages import MESSAGES
from .reservation_crud import RESERVATION_SELECT, get_participants, get_reservation_by_id, get_reservation_row

logger = logging.getLogger(__name__)

ORGANIZER = 'organizer'
PARTICIPANT = 'participant'


# =============================================================================
# TOKEN CHECKS
# =============================================================================

def invitation_ttl() -> timedelta:
    return timedelta(days=current_app.config.get('INVITATION_TTL_DAYS', 30))


def is_invitation_expired(created_at: str, now: datetime = None) -> bool:
    """True once strictly more than the TTL has elapsed since created_at."""
    now = now or get_now()
    return now - from_db(created_at) > invitation_ttl()


def _load_by_token(cursor, token: str, now: datetime) -> dict:
    """Fetch the reservation behind a token, enforcing existence and expiry."""
    cursor.execute(RESERVATION_SELECT + ' WHERE r.invitation_token = ?', (token,))
    row = cursor.fetchone()
    if not token or not row:
        raise NotFoundError(MESSAGES['invalid_token'], 'INVALID_TOKEN')

    reservation = dict(row)
    if is_invitation_expired(reservation['created_at'], now):
        raise ExpiredError(
            MESSAGES['invitation_expired'].format(days=invitation_ttl().days), 'EXPIRED'
        )
    return reservation


# =============================================================================
# VALIDATE
# =============================================================================

def validate_invitation(token: str, now: datetime = None) -> dict:
    """
    Describe the reservation behind an invitation token.

    Read-only; callable without authentication.

    Args:
        token: Invitation token
        now: Reference instant (default: current time)

    Returns:
        dict: {token, reservation, invitation_created_at, is_valid, can_join}

    Raises:
        NotFoundError: Unknown token
        ExpiredError: Token older than the TTL
    """
    now = now or get_now()
    cursor = get_db().cursor()

    reservation = _load_by_token(cursor, token, now)
    participants = get_participants([reservation['id']], cursor=cursor)[reservation['id']]

    is_valid = reservation['status'] == 'confirmed'
    can_join = is_valid and len(participants) < reservation['space_capacity']

    return {
        'token': token,
        'reservation': {
            'id': reservation['id'],
            'space_id': reservation['space_id'],
            'user_id': reservation['user_id'],
            'start_time': to_iso(reservation['start_time']),
            'end_time': to_iso(reservation['end_time']),
            'status': reservation['status'],
            'space': {
                'name': reservation['space_name'],
                'space_type': reservation['space_type'],
                'capacity': reservation['space_capacity'],
            },
            'participants': [
                {
                    'user_id': p['user_id'],
                    'name': p['name'],
                    'email': p['email'],
                    'role': p['role'],
                    'status': p['status'],
                }
                for p in participants
            ],
        },
        'invitation_created_at': to_iso(reservation['created_at']),
        'is_valid': is_valid,
        'can_join': can_join,
    }


# =============================================================================
# JOIN
# =============================================================================

def join_reservation(token: str, user_id: int, now: datetime = None) -> dict:
    """
    Add a user to a group reservation through its invitation token.

    The participant count is read and the row inserted inside one
    BEGIN IMMEDIATE transaction so concurrent joins cannot overfill the
    space.

    Raises:
        NotFoundError: Unknown token
        ExpiredError: Token older than the TTL
        InvalidStateError: Reservation is no longer confirmed
        ConflictError: Already joined (ALREADY_JOINED) or full (FULL)
    """
    now = now or get_now()
    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        reservation = _load_by_token(cursor, token, now)

        if reservation['status'] != 'confirmed':
            raise InvalidStateError(MESSAGES['reservation_not_active'], 'INVALID_STATE')

        participants = get_participants([reservation['id']], cursor=cursor)[reservation['id']]

        if any(p['user_id'] == user_id for p in participants):
            raise ConflictError(MESSAGES['already_joined'], 'ALREADY_JOINED')

        if len(participants) >= reservation['space_capacity']:
            raise ConflictError(MESSAGES['reservation_full'], 'FULL')

        cursor.execute('''
            INSERT INTO reservation_participants
            (reservation_id, user_id, role, status, created_at)
            VALUES (?, ?, ?, 'confirmed', ?)
        ''', (reservation['id'], user_id, PARTICIPANT, to_db(now)))

        db.commit()

    except Exception:
        db.rollback()
        raise

    logger.info('User %s joined reservation %s', user_id, reservation['id'])
    return get_reservation_by_id(reservation['id'])


# =============================================================================
# REMOVE
# =============================================================================

def remove_participant(reservation_id: int, participant_id: int, requester_id: int) -> dict:
    """
    Remove a participant from a group reservation. Organizer only.

    Args:
        reservation_id: Reservation ID
        participant_id: Participant row ID to remove
        requester_id: Acting user, must be the organizer

    Returns:
        dict: Updated reservation

    Raises:
        NotFoundError: Reservation or participant missing
        InvalidStateError: Not a group reservation, or target is the organizer
        ForbiddenError: Requester is not the organizer
    """
    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        reservation = get_reservation_row(reservation_id, cursor=cursor)
        if not reservation:
            raise NotFoundError(MESSAGES['reservation_not_found'], 'RESERVATION_NOT_FOUND')

        if not reservation['invitation_token']:
            raise InvalidStateError(MESSAGES['not_group_reservation'], 'NOT_GROUP_RESERVATION')

        participants = get_participants([reservation_id], cursor=cursor)[reservation_id]

        organizer = next((p for p in participants if p['role'] == ORGANIZER), None)
        if organizer is None or organizer['user_id'] != requester_id:
            raise ForbiddenError(MESSAGES['organizer_only'])

        target = next((p for p in participants if p['id'] == participant_id), None)
        if target is None:
            raise NotFoundError(MESSAGES['participant_not_found'], 'PARTICIPANT_NOT_FOUND')

        if target['role'] == ORGANIZER:
            raise InvalidStateError(MESSAGES['cannot_remove_organizer'], 'CANNOT_REMOVE_ORGANIZER')

        cursor.execute('DELETE FROM reservation_participants WHERE id = ?', (participant_id,))
        db.commit()

    except Exception:
        db.rollback()
        raise

    logger.info(
        'Participant %s (user %s) removed from reservation %s by organizer %s',
        participant_id, target['user_id'], reservation_id, requester_id
    )
    return get_reservation_by_id(reservation_id)
