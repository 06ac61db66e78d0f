"""
Reservation status transitions.

Reservations are never deleted. The only transitions are
confirmed -> cancelled and confirmed -> completed.
"""

import logging
from datetime import datetime

from database import get_db
from utils.datetime_helpers import get_now, to_db
from utils.errors import NotFoundError, ForbiddenError, ConflictError, InvalidStateError, InvalidInputError
from utils.messages import MESSAGES
from utils.validators import sanitize_input
from .reservation_crud import get_reservation_row, get_reservation_by_id

logger = logging.getLogger(__name__)

CONFIRMED = 'confirmed'
CANCELLED = 'cancelled'
COMPLETED = 'completed'
RESERVATION_STATUSES = (CONFIRMED, CANCELLED, COMPLETED)


def _ensure_cancellable(reservation: dict) -> None:
    if reservation['status'] == CANCELLED:
        raise ConflictError(MESSAGES['already_cancelled'], 'ALREADY_CANCELLED')
    if reservation['status'] == COMPLETED:
        raise InvalidStateError(MESSAGES['cannot_cancel_completed'], 'CANNOT_CANCEL_COMPLETED')


def _mark_cancelled(reservation_id: int, cancelled_by: str, reason: str = None, notes: str = None) -> None:
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        UPDATE reservations
        SET status = ?, cancelled_by = ?, cancellation_reason = ?,
            cancellation_notes = ?, updated_at = ?
        WHERE id = ? AND status = ?
    ''', (CANCELLED, cancelled_by, reason, notes, to_db(get_now()), reservation_id, CONFIRMED))
    db.commit()

    # Lost a race with another cancel or the completion sweep
    if cursor.rowcount == 0:
        _ensure_cancellable(get_reservation_row(reservation_id))


def cancel_reservation(reservation_id: int, user_id: int) -> dict:
    """
    Cancel a reservation on behalf of its owner.

    Args:
        reservation_id: Reservation ID
        user_id: Requesting user, must be the owner

    Returns:
        dict: Updated reservation

    Raises:
        NotFoundError: Reservation does not exist
        ForbiddenError: Requester is not the owner
        ConflictError: Already cancelled
        InvalidStateError: Already completed
    """
    reservation = get_reservation_row(reservation_id)
    if not reservation:
        raise NotFoundError(MESSAGES['reservation_not_found'], 'RESERVATION_NOT_FOUND')
    if reservation['user_id'] != user_id:
        raise ForbiddenError(MESSAGES['access_denied'])
    _ensure_cancellable(reservation)

    _mark_cancelled(reservation_id, 'user')

    logger.info('Reservation %s cancelled by owner %s', reservation_id, user_id)
    return get_reservation_by_id(reservation_id)


def admin_cancel_reservation(reservation_id: int, reason: str, notes: str = None) -> dict:
    """
    Cancel any reservation as an administrator.

    Args:
        reservation_id: Reservation ID
        reason: Mandatory cancellation reason
        notes: Optional notes

    Returns:
        dict: Updated reservation
    """
    reason = sanitize_input(reason, max_length=255)
    if not reason:
        raise InvalidInputError(MESSAGES['cancellation_reason_required'])

    reservation = get_reservation_row(reservation_id)
    if not reservation:
        raise NotFoundError(MESSAGES['reservation_not_found'], 'RESERVATION_NOT_FOUND')
    _ensure_cancellable(reservation)

    _mark_cancelled(reservation_id, 'admin', reason, sanitize_input(notes, max_length=1000) or None)

    logger.info('Reservation %s cancelled by admin: %s', reservation_id, reason)
    return get_reservation_by_id(reservation_id)


def complete_finished_reservations(now: datetime = None) -> int:
    """
    Mark confirmed reservations whose end time has passed as completed.

    Args:
        now: Reference instant (default: current time)

    Returns:
        Number of reservations completed
    """
    now = now or get_now()

    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        UPDATE reservations
        SET status = ?, updated_at = ?
        WHERE status = ? AND end_time <= ?
    ''', (COMPLETED, to_db(now), CONFIRMED, to_db(now)))
    db.commit()

    completed = cursor.rowcount
    if completed > 0:
        logger.info('Completed %s finished reservation(s)', completed)
    return completed
