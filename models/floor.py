"""
Floor data access functions.
Floors group spaces by building level; admins list, create and rename them.
"""

import logging

from database import get_db
from utils.datetime_helpers import to_iso
from utils.errors import NotFoundError, InvalidInputError
from utils.messages import MESSAGES
from utils.validators import sanitize_input

logger = logging.getLogger(__name__)


def get_all_floors(building: str = None) -> list:
    """
    Get all floors.

    Args:
        building: Only floors of this building

    Returns:
        List of floor dicts with their space count, ordered by name
    """
    query = '''
        SELECT f.*,
               (SELECT COUNT(*) FROM spaces WHERE floor_id = f.id) as space_count
        FROM floors f
    '''
    params = []

    if building:
        query += ' WHERE f.building = ?'
        params.append(building)

    query += ' ORDER BY f.name'

    cursor = get_db().cursor()
    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def get_floor_by_id(floor_id: int) -> dict:
    """
    Get floor by ID.

    Returns:
        Floor dict or None if not found
    """
    cursor = get_db().cursor()
    cursor.execute('''
        SELECT f.*,
               (SELECT COUNT(*) FROM spaces WHERE floor_id = f.id) as space_count
        FROM floors f
        WHERE f.id = ?
    ''', (floor_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def serialize_floor(floor: dict) -> dict:
    return {
        'id': floor['id'],
        'name': floor['name'],
        'building': floor.get('building'),
        'space_count': floor.get('space_count', 0),
        'created_at': to_iso(floor.get('created_at')),
    }


def create_floor(name: str, building: str = None) -> int:
    """
    Create new floor.

    Args:
        name: Floor name
        building: Building the floor belongs to

    Returns:
        New floor ID
    """
    name = sanitize_input(name, max_length=120)
    if not name:
        raise InvalidInputError(MESSAGES['floor_name_required'])

    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO floors (name, building)
        VALUES (?, ?)
    ''', (name, sanitize_input(building, max_length=120) or None))
    db.commit()

    logger.info('Floor %s created', cursor.lastrowid)
    return cursor.lastrowid


def update_floor(floor_id: int, **kwargs) -> dict:
    """
    Update floor fields.

    Args:
        floor_id: Floor ID to update
        **kwargs: Fields to update (name, building)

    Returns:
        Updated floor dict

    Raises:
        NotFoundError: Floor does not exist
        InvalidInputError: Name set to empty
    """
    if not get_floor_by_id(floor_id):
        raise NotFoundError(MESSAGES['floor_not_found'], 'FLOOR_NOT_FOUND')

    allowed_fields = ['name', 'building']
    updates = []
    values = []

    for field in allowed_fields:
        if field in kwargs:
            value = sanitize_input(kwargs[field], max_length=120) or None
            if field == 'name' and not value:
                raise InvalidInputError(MESSAGES['floor_name_required'])
            updates.append(f'{field} = ?')
            values.append(value)

    if updates:
        values.append(floor_id)
        db = get_db()
        db.execute(f'UPDATE floors SET {", ".join(updates)} WHERE id = ?', values)
        db.commit()
        logger.info('Floor %s updated (%s)', floor_id, ', '.join(kwargs))

    return get_floor_by_id(floor_id)
