"""
Reservation query functions.
Handles listing, filtering, admin detail and statistics.
"""

from datetime import datetime

from flask import current_app

from database import get_db
from utils.datetime_helpers import get_now, get_timezone, to_db, to_iso, local_day_bounds
from utils.errors import NotFoundError, InvalidInputError
from utils.messages import MESSAGES
from utils.validators import validate_date_format
from .reservation_crud import RESERVATION_SELECT, get_participants, serialize_reservation, get_reservation_row
from .reservation_state import RESERVATION_STATUSES


def _clamp_page(page, limit, default_limit: int) -> tuple:
    page = page if isinstance(page, int) and page > 0 else 1
    limit = limit if isinstance(limit, int) and limit > 0 else default_limit
    return page, min(limit, 100)


def _day_start(date_str: str) -> str:
    if not validate_date_format(date_str):
        raise InvalidInputError(MESSAGES['invalid_date_format'], 'INVALID_DATE_FORMAT')
    day = datetime.strptime(date_str, '%Y-%m-%d').date()
    return to_db(local_day_bounds(day)[0])


def _day_end(date_str: str) -> str:
    if not validate_date_format(date_str):
        raise InvalidInputError(MESSAGES['invalid_date_format'], 'INVALID_DATE_FORMAT')
    day = datetime.strptime(date_str, '%Y-%m-%d').date()
    return to_db(local_day_bounds(day)[1])


def _fetch_page(cursor, where: str, params: list, order_by: str, page: int, limit: int) -> tuple:
    cursor.execute(f'''
        SELECT COUNT(*) as total
        FROM reservations r
        JOIN spaces s ON r.space_id = s.id
        JOIN users u ON r.user_id = u.id
        WHERE {where}
    ''', params)
    total = cursor.fetchone()['total']

    cursor.execute(
        RESERVATION_SELECT + f' WHERE {where} ORDER BY {order_by} LIMIT ? OFFSET ?',
        params + [limit, (page - 1) * limit]
    )
    rows = [dict(row) for row in cursor.fetchall()]

    participants = get_participants([row['id'] for row in rows], cursor=cursor)
    items = [serialize_reservation(row, participants[row['id']]) for row in rows]
    return items, total


# =============================================================================
# LIST QUERIES
# =============================================================================

def list_reservations(
    user_id: int,
    page: int = 1,
    limit: int = None,
    status: str = None,
    start_date: str = None,
    end_date: str = None
) -> dict:
    """
    List a user's own reservations, newest start first.

    Args:
        user_id: Owner
        page: 1-based page number
        limit: Page size (default ITEMS_PER_PAGE, max 100)
        status: confirmed, cancelled or completed
        start_date: Only reservations starting on or after this day (YYYY-MM-DD)
        end_date: Only reservations ending on or before the end of this day

    Returns:
        dict: {'items', 'page', 'limit', 'total'}
    """
    page, limit = _clamp_page(page, limit, current_app.config.get('ITEMS_PER_PAGE', 10))

    where = 'r.user_id = ?'
    params = [user_id]

    if status:
        if status not in RESERVATION_STATUSES:
            raise InvalidInputError(MESSAGES['invalid_status'], 'INVALID_STATUS')
        where += ' AND r.status = ?'
        params.append(status)

    if start_date:
        where += ' AND r.start_time >= ?'
        params.append(_day_start(start_date))

    if end_date:
        where += ' AND r.end_time <= ?'
        params.append(_day_end(end_date))

    cursor = get_db().cursor()
    items, total = _fetch_page(cursor, where, params, 'r.start_time DESC, r.id DESC', page, limit)

    return {'items': items, 'page': page, 'limit': limit, 'total': total}


def admin_list_reservations(
    page: int = 1,
    limit: int = None,
    date_from: str = None,
    date_to: str = None,
    space_id: int = None,
    user: str = None,
    status: str = None
) -> dict:
    """
    List every reservation with admin filters, most recently created first.

    Args:
        page: 1-based page number
        limit: Page size (default ADMIN_ITEMS_PER_PAGE, max 100)
        date_from: Start time on or after this day
        date_to: Start time before the end of this day
        space_id: Filter by space
        user: Search in owner name or email
        status: confirmed, cancelled or completed

    Returns:
        dict: {'items', 'page', 'limit', 'total'}
    """
    page, limit = _clamp_page(page, limit, current_app.config.get('ADMIN_ITEMS_PER_PAGE', 50))

    where = '1=1'
    params = []

    if date_from:
        where += ' AND r.start_time >= ?'
        params.append(_day_start(date_from))

    if date_to:
        where += ' AND r.start_time < ?'
        params.append(_day_end(date_to))

    if space_id:
        where += ' AND r.space_id = ?'
        params.append(space_id)

    if user:
        where += ' AND (u.name LIKE ? OR u.email LIKE ?)'
        search = f'%{user}%'
        params.extend([search, search])

    if status:
        if status not in RESERVATION_STATUSES:
            raise InvalidInputError(MESSAGES['invalid_status'], 'INVALID_STATUS')
        where += ' AND r.status = ?'
        params.append(status)

    cursor = get_db().cursor()
    items, total = _fetch_page(cursor, where, params, 'r.created_at DESC, r.id DESC', page, limit)

    return {'items': items, 'page': page, 'limit': limit, 'total': total}


# =============================================================================
# ADMIN DETAIL
# =============================================================================

def get_reservation_detail(reservation_id: int) -> dict:
    """
    Full reservation view for administrators.

    Adds invitation_info for group reservations and cancellation_info for
    cancelled ones.

    Raises:
        NotFoundError: Reservation does not exist
    """
    row = get_reservation_row(reservation_id)
    if not row:
        raise NotFoundError(MESSAGES['reservation_not_found'], 'RESERVATION_NOT_FOUND')

    participants = get_participants([reservation_id])[reservation_id]
    detail = serialize_reservation(row, participants)

    detail['invitation_info'] = None
    if row['invitation_token']:
        detail['invitation_info'] = {
            'token': row['invitation_token'],
            'link': detail['invitation_link'],
            'created_at': to_iso(row['created_at']),
        }

    detail['cancellation_info'] = None
    if row['status'] == 'cancelled':
        detail['cancellation_info'] = {
            'cancelled_by': row['cancelled_by'],
            'reason': row['cancellation_reason'],
            'notes': row['cancellation_notes'],
            'cancelled_at': to_iso(row['updated_at']),
        }

    return detail


# =============================================================================
# STATISTICS
# =============================================================================

def get_space_reservation_stats(now: datetime = None) -> dict:
    """
    Dashboard counters.

    Returns:
        dict: total_spaces, active_reservations (confirmed and not yet
        ended), today_bookings (confirmed reservations starting today in
        the configured timezone), by_status
    """
    now = now or get_now()
    day_start, day_end = local_day_bounds(now.astimezone(get_timezone()).date())

    with get_db() as conn:
        cursor = conn.cursor()

        cursor.execute('SELECT COUNT(*) as total FROM spaces')
        total_spaces = cursor.fetchone()['total']

        cursor.execute('''
            SELECT COUNT(*) as total FROM reservations
            WHERE status = 'confirmed' AND end_time > ?
        ''', (to_db(now),))
        active = cursor.fetchone()['total']

        cursor.execute('''
            SELECT COUNT(*) as total FROM reservations
            WHERE status = 'confirmed' AND start_time >= ? AND start_time < ?
        ''', (to_db(day_start), to_db(day_end)))
        today = cursor.fetchone()['total']

        cursor.execute('''
            SELECT status, COUNT(*) as count
            FROM reservations
            GROUP BY status
        ''')
        by_status = {row['status']: row['count'] for row in cursor.fetchall()}

    return {
        'total_spaces': total_spaces,
        'active_reservations': active,
        'today_bookings': today,
        'by_status': by_status,
    }


def get_utilization_analytics(top: int = 5) -> dict:
    """
    Reservation counts per space, based on confirmed reservations.

    utilization_rate is confirmed reservations per space. Popular spaces
    carry their share of all confirmed reservations (percent); underutilized
    spaces are those below 30% of the per-space average and carry their
    count relative to that average (percent).

    Returns:
        dict: total_reservations, total_users, total_spaces, utilization_rate,
        most_popular_space, popular_spaces, underutilized_spaces
    """
    with get_db() as conn:
        cursor = conn.cursor()

        cursor.execute('SELECT COUNT(*) as total FROM users')
        total_users = cursor.fetchone()['total']

        cursor.execute('''
            SELECT s.id, s.name, s.space_type, s.capacity, f.name as floor_name,
                   COUNT(r.id) as reservation_count
            FROM spaces s
            LEFT JOIN floors f ON s.floor_id = f.id
            LEFT JOIN reservations r ON r.space_id = s.id AND r.status = 'confirmed'
            GROUP BY s.id
            ORDER BY reservation_count DESC, s.name
        ''')
        rows = [dict(row) for row in cursor.fetchall()]

    total_spaces = len(rows)
    total_reservations = sum(row['reservation_count'] for row in rows)
    average = total_reservations / total_spaces if total_spaces else 0

    def space_summary(row):
        return {
            'id': row['id'],
            'name': row['name'],
            'space_type': row['space_type'],
            'capacity': row['capacity'],
            'floor_name': row['floor_name'],
        }

    popular = [
        {
            'space': space_summary(row),
            'reservation_count': row['reservation_count'],
            'utilization_rate': round(row['reservation_count'] / total_reservations * 100, 2),
        }
        for row in rows[:top] if row['reservation_count'] > 0
    ]

    underutilized = [
        {
            'space': space_summary(row),
            'reservation_count': row['reservation_count'],
            'utilization_rate': round(row['reservation_count'] / average * 100, 2) if average else 0,
        }
        for row in rows if row['reservation_count'] < average * 0.3
    ]

    return {
        'total_reservations': total_reservations,
        'total_users': total_users,
        'total_spaces': total_spaces,
        'utilization_rate': round(average, 2),
        'most_popular_space': popular[0]['space'] if popular else None,
        'popular_spaces': popular,
        'underutilized_spaces': underutilized,
    }
