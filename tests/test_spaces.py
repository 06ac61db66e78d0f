"""
Tests for the space registry: editing spaces, floors and utilization
analytics.
"""

import pytest
from datetime import datetime, timezone

from conftest import DESK_ID, MEETING_ROOM_ID, LAB_ID
from utils.errors import InvalidInputError, NotFoundError


def utc(hour, day=4):
    return datetime(2030, 3, day, hour, tzinfo=timezone.utc)


class TestUpdateSpace:

    def test_partial_update_keeps_other_fields(self, app):
        with app.app_context():
            from models.space import update_space

            space = update_space(LAB_ID, name='  Chemistry lab  ', description='Fume hoods')

            assert space['name'] == 'Chemistry lab'
            assert space['description'] == 'Fume hoods'
            assert space['capacity'] == 12
            assert space['min_capacity'] == 3

    def test_capacity_checked_against_merged_values(self, app):
        with app.app_context():
            from models.space import update_space, get_space_by_id

            # Meeting room is 4/2: a capacity below the current minimum is refused
            with pytest.raises(InvalidInputError) as exc:
                update_space(MEETING_ROOM_ID, capacity=1)
            assert exc.value.error_code == 'INVALID_CAPACITY'

            with pytest.raises(InvalidInputError) as exc:
                update_space(MEETING_ROOM_ID, min_capacity=5)
            assert exc.value.error_code == 'INVALID_CAPACITY'

            assert get_space_by_id(MEETING_ROOM_ID)['capacity'] == 4

            space = update_space(MEETING_ROOM_ID, capacity=8, min_capacity=5)
            assert (space['capacity'], space['min_capacity']) == (8, 5)

    def test_min_capacity_must_stay_positive(self, app):
        with app.app_context():
            from models.space import update_space

            with pytest.raises(InvalidInputError) as exc:
                update_space(DESK_ID, min_capacity=0)
            assert exc.value.error_code == 'INVALID_CAPACITY'

    def test_unknown_fields_are_ignored(self, app):
        with app.app_context():
            from models.space import update_space

            space = update_space(DESK_ID, availability_status='UNAVAILABLE')
            assert space['availability_status'] == 'AVAILABLE'

    def test_unknown_space(self, app):
        with app.app_context():
            from models.space import update_space

            with pytest.raises(NotFoundError) as exc:
                update_space(999, name='Ghost')
            assert exc.value.error_code == 'SPACE_NOT_FOUND'

    def test_unknown_floor(self, app):
        with app.app_context():
            from models.space import update_space

            with pytest.raises(NotFoundError) as exc:
                update_space(DESK_ID, floor_id=999)
            assert exc.value.error_code == 'FLOOR_NOT_FOUND'

    def test_empty_name_is_refused(self, app):
        with app.app_context():
            from models.space import update_space

            with pytest.raises(InvalidInputError):
                update_space(DESK_ID, name='   ')

    def test_new_capacity_applies_to_next_booking(self, app, make_user):
        users = [make_user() for _ in range(3)]
        with app.app_context():
            from models.reservation import create_reservation
            from models.space import update_space
            from utils.errors import ConflictError

            update_space(DESK_ID, capacity=2)
            create_reservation(users[0], DESK_ID, utc(9), utc(10))
            create_reservation(users[1], DESK_ID, utc(9), utc(10))

            with pytest.raises(ConflictError):
                create_reservation(users[2], DESK_ID, utc(9), utc(10))


class TestFloors:

    def test_seeded_floor_is_listed(self, app):
        with app.app_context():
            from models.floor import get_all_floors

            floors = get_all_floors()

            assert len(floors) == 1
            assert floors[0]['name'] == 'Ground floor'
            assert floors[0]['space_count'] == 4

    def test_create_and_filter_by_building(self, app):
        with app.app_context():
            from models.floor import create_floor, get_all_floors, get_floor_by_id

            floor_id = create_floor(' First floor ', building='Annex')

            floor = get_floor_by_id(floor_id)
            assert floor['name'] == 'First floor'
            assert floor['building'] == 'Annex'
            assert floor['space_count'] == 0

            assert [f['id'] for f in get_all_floors(building='Annex')] == [floor_id]

    def test_create_requires_name(self, app):
        with app.app_context():
            from models.floor import create_floor

            with pytest.raises(InvalidInputError):
                create_floor('  ')

    def test_update_floor(self, app):
        with app.app_context():
            from models.floor import create_floor, update_floor

            floor_id = create_floor('Basement', building='Main building')

            floor = update_floor(floor_id, name='Lower ground')
            assert floor['name'] == 'Lower ground'
            assert floor['building'] == 'Main building'

            floor = update_floor(floor_id, building='')
            assert floor['building'] is None

            with pytest.raises(InvalidInputError):
                update_floor(floor_id, name='')

    def test_update_unknown_floor(self, app):
        with app.app_context():
            from models.floor import update_floor

            with pytest.raises(NotFoundError) as exc:
                update_floor(999, name='Roof')
            assert exc.value.error_code == 'FLOOR_NOT_FOUND'

    def test_space_can_move_to_new_floor(self, app):
        with app.app_context():
            from models.floor import create_floor, get_floor_by_id
            from models.space import update_space, serialize_space

            floor_id = create_floor('First floor', building='Annex')
            space = update_space(LAB_ID, floor_id=floor_id)

            assert serialize_space(space)['floor'] == {
                'id': floor_id, 'name': 'First floor', 'building': 'Annex'
            }
            assert get_floor_by_id(floor_id)['space_count'] == 1

    def test_create_space_on_unknown_floor(self, app):
        with app.app_context():
            from models.space import create_space

            with pytest.raises(NotFoundError) as exc:
                create_space('Phone booth', capacity=1, floor_id=999)
            assert exc.value.error_code == 'FLOOR_NOT_FOUND'


class TestUtilizationAnalytics:

    def test_empty_database(self, app):
        with app.app_context():
            from models.reservation import get_utilization_analytics

            result = get_utilization_analytics()

            assert result['total_reservations'] == 0
            assert result['total_spaces'] == 4
            assert result['utilization_rate'] == 0
            assert result['most_popular_space'] is None
            assert result['popular_spaces'] == []
            assert result['underutilized_spaces'] == []

    def test_popular_and_underutilized_spaces(self, app, make_user):
        users = [make_user() for _ in range(4)]
        with app.app_context():
            from models.reservation import (
                create_reservation, cancel_reservation, get_utilization_analytics
            )

            for hour, user_id in zip(range(9, 12), users):
                create_reservation(user_id, LAB_ID, utc(hour), utc(hour + 1))
            create_reservation(users[3], DESK_ID, utc(9), utc(10))
            cancelled = create_reservation(users[3], LAB_ID, utc(14), utc(15))
            cancel_reservation(cancelled['id'], users[3])

            result = get_utilization_analytics()

            # 4 confirmed over 4 spaces; threshold is 30% of 1 reservation
            assert result['total_reservations'] == 4
            assert result['utilization_rate'] == 1.0
            assert result['most_popular_space']['id'] == LAB_ID

            popular = [(p['space']['id'], p['reservation_count'], p['utilization_rate'])
                       for p in result['popular_spaces']]
            assert popular == [(LAB_ID, 3, 75.0), (DESK_ID, 1, 25.0)]

            underutilized = {u['space']['id'] for u in result['underutilized_spaces']}
            assert underutilized == {MEETING_ROOM_ID, 4}
