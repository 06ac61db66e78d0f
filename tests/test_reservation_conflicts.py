"""
Tests for booking admission: time range, group size, seat capacity and
per-user double booking.
"""

import pytest
from datetime import datetime, timezone

from conftest import DESK_ID, MEETING_ROOM_ID, LAB_ID
from utils.errors import ConflictError, InvalidInputError, NotFoundError
from utils.messages import MESSAGES


def utc(hour, minute=0, day=4):
    return datetime(2030, 3, day, hour, minute, tzinfo=timezone.utc)


class TestIntervalOverlap:
    """Half-open interval semantics."""

    def test_touching_intervals_do_not_overlap(self):
        from models.reservation import intervals_overlap
        assert not intervals_overlap(utc(10), utc(11), utc(11), utc(12))
        assert not intervals_overlap(utc(11), utc(12), utc(10), utc(11))

    def test_nested_and_partial_intervals_overlap(self):
        from models.reservation import intervals_overlap
        assert intervals_overlap(utc(9), utc(12), utc(10), utc(11))
        assert intervals_overlap(utc(10), utc(11), utc(10, 59), utc(12))


class TestCreateReservation:
    """create_reservation admission rules."""

    def test_individual_booking(self, app, make_user):
        user_id = make_user()
        with app.app_context():
            from models.reservation import create_reservation

            reservation = create_reservation(user_id, LAB_ID, utc(9), utc(10))

            assert reservation['status'] == 'confirmed'
            assert reservation['type'] == 'individual'
            assert reservation['seat_count'] == 1
            assert reservation['participants'] == []
            assert 'invitation_token' not in reservation
            assert reservation['start_time'] == '2030-03-04T09:00:00Z'

    def test_accepts_iso_strings(self, app, make_user):
        user_id = make_user()
        with app.app_context():
            from models.reservation import create_reservation

            reservation = create_reservation(
                user_id, LAB_ID, '2030-03-04T09:00:00Z', '2030-03-04T10:30:00+00:00'
            )
            assert reservation['end_time'] == '2030-03-04T10:30:00Z'

    def test_group_booking_creates_organizer_and_token(self, app, make_user):
        user_id = make_user()
        with app.app_context():
            from models.reservation import create_reservation

            reservation = create_reservation(
                user_id, MEETING_ROOM_ID, utc(9), utc(10), kind='group', group_size=3
            )

            assert reservation['type'] == 'group'
            assert reservation['seat_count'] == 3
            assert reservation['invitation_token']
            assert reservation['invitation_link'] == (
                f"http://testserver/invite/{reservation['invitation_token']}"
            )
            assert len(reservation['participants']) == 1
            assert reservation['participants'][0]['user_id'] == user_id
            assert reservation['participants'][0]['role'] == 'organizer'

    def test_unknown_space(self, app, make_user):
        user_id = make_user()
        with app.app_context():
            from models.reservation import create_reservation

            with pytest.raises(NotFoundError) as exc:
                create_reservation(user_id, 999, utc(9), utc(10))
            assert exc.value.error_code == 'SPACE_NOT_FOUND'

    @pytest.mark.parametrize('start, end', [(10, 10), (11, 10)])
    def test_start_must_precede_end(self, app, make_user, start, end):
        user_id = make_user()
        with app.app_context():
            from models.reservation import create_reservation

            with pytest.raises(InvalidInputError) as exc:
                create_reservation(user_id, LAB_ID, utc(start), utc(end))
            assert exc.value.error_code == 'INVALID_TIME_RANGE'

    def test_sub_second_range_is_rejected(self, app, make_user):
        user_id = make_user()
        with app.app_context():
            from models.reservation import create_reservation

            with pytest.raises(InvalidInputError) as exc:
                create_reservation(
                    user_id, LAB_ID, '2030-03-04T10:00:00.200000Z', '2030-03-04T10:00:00.700000Z'
                )
            assert exc.value.error_code == 'INVALID_TIME_RANGE'

    def test_fractional_seconds_are_dropped(self, app, make_user):
        user_id = make_user()
        with app.app_context():
            from models.reservation import create_reservation

            reservation = create_reservation(
                user_id, LAB_ID, '2030-03-04T10:00:00.900000Z', '2030-03-04T11:00:00.100000Z'
            )
            assert reservation['start_time'] == '2030-03-04T10:00:00Z'
            assert reservation['end_time'] == '2030-03-04T11:00:00Z'

    def test_unparseable_datetime(self, app, make_user):
        user_id = make_user()
        with app.app_context():
            from models.reservation import create_reservation

            with pytest.raises(InvalidInputError) as exc:
                create_reservation(user_id, LAB_ID, 'tomorrow', utc(10))
            assert exc.value.error_code == 'INVALID_DATETIME'

    @pytest.mark.parametrize('group_size, code', [
        (None, 'VALIDATION_ERROR'),
        (0, 'VALIDATION_ERROR'),
        (True, 'VALIDATION_ERROR'),
        (2.5, 'VALIDATION_ERROR'),
        (1, 'INSUFFICIENT_GROUP_SIZE'),
        (5, 'EXCEEDS_MAX_CAPACITY'),
    ])
    def test_group_size_rules(self, app, make_user, group_size, code):
        user_id = make_user()
        with app.app_context():
            from models.reservation import create_reservation

            with pytest.raises(InvalidInputError) as exc:
                create_reservation(
                    user_id, MEETING_ROOM_ID, utc(9), utc(10), kind='group', group_size=group_size
                )
            assert exc.value.error_code == code

    @pytest.mark.parametrize('group_size', [2, 4])
    def test_group_size_bounds_are_inclusive(self, app, make_user, group_size):
        user_id = make_user()
        with app.app_context():
            from models.reservation import create_reservation

            reservation = create_reservation(
                user_id, MEETING_ROOM_ID, utc(9), utc(10), kind='group', group_size=group_size
            )
            assert reservation['seat_count'] == group_size

    def test_invalid_type(self, app, make_user):
        user_id = make_user()
        with app.app_context():
            from models.reservation import create_reservation

            with pytest.raises(InvalidInputError):
                create_reservation(user_id, LAB_ID, utc(9), utc(10), kind='team')


class TestCapacity:
    """Seat accounting across overlapping reservations."""

    def test_group_plus_individual_fill_the_room(self, app, make_user):
        organizer, walk_in, late = make_user(), make_user(), make_user()
        with app.app_context():
            from models.reservation import create_reservation

            create_reservation(organizer, MEETING_ROOM_ID, utc(9), utc(10), kind='group', group_size=3)
            create_reservation(walk_in, MEETING_ROOM_ID, utc(9), utc(10))

            with pytest.raises(ConflictError) as exc:
                create_reservation(late, MEETING_ROOM_ID, utc(9, 30), utc(10, 30))
            assert exc.value.error_code == 'BOOKING_CONFLICT'
            assert exc.value.status_code == 409

    def test_single_seat_space(self, app, make_user):
        first, second = make_user(), make_user()
        with app.app_context():
            from models.reservation import create_reservation

            create_reservation(first, DESK_ID, utc(10), utc(11))

            with pytest.raises(ConflictError):
                create_reservation(second, DESK_ID, utc(10, 30), utc(11, 30))

    def test_back_to_back_bookings_are_allowed(self, app, make_user):
        first, second = make_user(), make_user()
        with app.app_context():
            from models.reservation import create_reservation

            create_reservation(first, DESK_ID, utc(10), utc(11))
            reservation = create_reservation(second, DESK_ID, utc(11), utc(12))
            assert reservation['status'] == 'confirmed'

    def test_cancelled_reservations_free_their_seats(self, app, make_user):
        first, second = make_user(), make_user()
        with app.app_context():
            from models.reservation import create_reservation, cancel_reservation

            reservation = create_reservation(first, DESK_ID, utc(10), utc(11))
            cancel_reservation(reservation['id'], first)

            assert create_reservation(second, DESK_ID, utc(10), utc(11))['status'] == 'confirmed'

    def test_legacy_accounting_counts_reservations(self, app, make_user):
        app.config['SEAT_ACCOUNTING'] = 'reservations'
        organizer, other = make_user(), make_user()
        with app.app_context():
            from models.reservation import create_reservation

            create_reservation(organizer, MEETING_ROOM_ID, utc(9), utc(10), kind='group', group_size=4)
            # One seat consumed per reservation: 1 + 1 <= 4
            reservation = create_reservation(other, MEETING_ROOM_ID, utc(9), utc(10))
            assert reservation['status'] == 'confirmed'


class TestDoubleBooking:
    """A user cannot hold two overlapping confirmed reservations."""

    def test_overlap_in_another_space(self, app, make_user):
        user_id = make_user()
        with app.app_context():
            from models.reservation import create_reservation

            create_reservation(user_id, LAB_ID, utc(9), utc(11))

            with pytest.raises(ConflictError) as exc:
                create_reservation(user_id, MEETING_ROOM_ID, utc(10), utc(12), kind='group', group_size=2)
            assert exc.value.error_code == 'BOOKING_CONFLICT'

    def test_adjacent_slots_for_same_user(self, app, make_user):
        user_id = make_user()
        with app.app_context():
            from models.reservation import create_reservation

            create_reservation(user_id, LAB_ID, utc(9), utc(10))
            assert create_reservation(user_id, LAB_ID, utc(10), utc(11))['status'] == 'confirmed'

    def test_capacity_checked_before_double_booking(self, app, make_user):
        first, second = make_user(), make_user()
        with app.app_context():
            from models.reservation import create_reservation
            from models.space import create_space

            tiny = create_space('Phone booth', capacity=1)
            create_reservation(first, tiny, utc(9), utc(10))
            create_reservation(second, LAB_ID, utc(9), utc(10))

            # Both rules are violated; the capacity rule answers first
            with pytest.raises(ConflictError) as exc:
                create_reservation(second, tiny, utc(9), utc(10))
            assert exc.value.message == MESSAGES['not_enough_seats']
