"""
Tests for group invitations: token validation, expiry, joining and
participant removal.
"""

import pytest
from datetime import datetime, timedelta, timezone

from conftest import MEETING_ROOM_ID, LAB_ID
from utils.errors import (
    ConflictError, ExpiredError, ForbiddenError, InvalidStateError, NotFoundError
)


START = datetime(2030, 3, 4, 9, tzinfo=timezone.utc)
END = datetime(2030, 3, 4, 10, tzinfo=timezone.utc)


@pytest.fixture
def group(app, make_user):
    """A confirmed group booking of 2 in the meeting room (capacity 4)."""
    organizer = make_user('instructor')
    with app.app_context():
        from models.reservation import create_reservation
        reservation = create_reservation(
            organizer, MEETING_ROOM_ID, START, END, kind='group', group_size=2
        )
    return {
        'id': reservation['id'],
        'token': reservation['invitation_token'],
        'organizer': organizer,
    }


def created_at(reservation_id):
    from models.reservation_crud import get_reservation_row
    from utils.datetime_helpers import from_db
    return from_db(get_reservation_row(reservation_id)['created_at'])


class TestValidateInvitation:

    def test_describes_reservation(self, app, group):
        with app.app_context():
            from models.reservation import validate_invitation

            result = validate_invitation(group['token'])

            assert result['token'] == group['token']
            assert result['is_valid'] is True
            assert result['can_join'] is True
            assert result['reservation']['id'] == group['id']
            assert result['reservation']['space']['capacity'] == 4
            assert [p['role'] for p in result['reservation']['participants']] == ['organizer']

    def test_unknown_token(self, app):
        with app.app_context():
            from models.reservation import validate_invitation

            with pytest.raises(NotFoundError) as exc:
                validate_invitation('no-such-token')
            assert exc.value.error_code == 'INVALID_TOKEN'

    def test_expiry_boundary(self, app, group):
        with app.app_context():
            from models.reservation import validate_invitation

            issued = created_at(group['id'])

            # Exactly 30 days old is still valid
            assert validate_invitation(group['token'], now=issued + timedelta(days=30))['is_valid']

            with pytest.raises(ExpiredError) as exc:
                validate_invitation(group['token'], now=issued + timedelta(days=30, seconds=1))
            assert exc.value.status_code == 410
            assert exc.value.error_code == 'EXPIRED'

    def test_cancelled_reservation_is_not_joinable(self, app, group):
        with app.app_context():
            from models.reservation import validate_invitation, cancel_reservation

            cancel_reservation(group['id'], group['organizer'])
            result = validate_invitation(group['token'])

            assert result['is_valid'] is False
            assert result['can_join'] is False

    def test_is_read_only(self, app, group):
        with app.app_context():
            from models.reservation import validate_invitation

            first = validate_invitation(group['token'])
            second = validate_invitation(group['token'])
            assert first == second


class TestJoinReservation:

    def test_join_adds_participant(self, app, group, make_user):
        guest = make_user()
        with app.app_context():
            from models.reservation import join_reservation

            reservation = join_reservation(group['token'], guest)

            roles = {p['user_id']: p['role'] for p in reservation['participants']}
            assert roles == {group['organizer']: 'organizer', guest: 'participant'}

    def test_join_twice(self, app, group, make_user):
        guest = make_user()
        with app.app_context():
            from models.reservation import join_reservation

            join_reservation(group['token'], guest)
            with pytest.raises(ConflictError) as exc:
                join_reservation(group['token'], guest)
            assert exc.value.error_code == 'ALREADY_JOINED'

    def test_organizer_cannot_join_own_reservation(self, app, group):
        with app.app_context():
            from models.reservation import join_reservation

            with pytest.raises(ConflictError) as exc:
                join_reservation(group['token'], group['organizer'])
            assert exc.value.error_code == 'ALREADY_JOINED'

    def test_join_until_full(self, app, group, make_user):
        guests = [make_user() for _ in range(4)]
        with app.app_context():
            from models.reservation import join_reservation, validate_invitation

            # Organizer holds one of the 4 seats
            for guest in guests[:3]:
                join_reservation(group['token'], guest)

            assert validate_invitation(group['token'])['can_join'] is False

            with pytest.raises(ConflictError) as exc:
                join_reservation(group['token'], guests[3])
            assert exc.value.error_code == 'FULL'

    def test_join_cancelled_reservation(self, app, group, make_user):
        guest = make_user()
        with app.app_context():
            from models.reservation import join_reservation, cancel_reservation

            cancel_reservation(group['id'], group['organizer'])

            with pytest.raises(InvalidStateError) as exc:
                join_reservation(group['token'], guest)
            assert exc.value.error_code == 'INVALID_STATE'

    def test_join_expired_token(self, app, group, make_user):
        guest = make_user()
        with app.app_context():
            from models.reservation import join_reservation

            with pytest.raises(ExpiredError):
                join_reservation(
                    group['token'], guest, now=created_at(group['id']) + timedelta(days=31)
                )


class TestRemoveParticipant:

    def _join(self, token, user_id):
        from models.reservation import join_reservation
        reservation = join_reservation(token, user_id)
        return next(p['id'] for p in reservation['participants'] if p['user_id'] == user_id)

    def test_organizer_removes_participant(self, app, group, make_user):
        guest = make_user()
        with app.app_context():
            from models.reservation import remove_participant

            participant_id = self._join(group['token'], guest)
            reservation = remove_participant(group['id'], participant_id, group['organizer'])

            assert [p['user_id'] for p in reservation['participants']] == [group['organizer']]

    def test_removed_participant_can_rejoin(self, app, group, make_user):
        guest = make_user()
        with app.app_context():
            from models.reservation import remove_participant

            participant_id = self._join(group['token'], guest)
            remove_participant(group['id'], participant_id, group['organizer'])
            assert self._join(group['token'], guest)

    def test_only_organizer_may_remove(self, app, group, make_user):
        guest, other = make_user(), make_user()
        with app.app_context():
            from models.reservation import remove_participant

            participant_id = self._join(group['token'], guest)
            self._join(group['token'], other)

            with pytest.raises(ForbiddenError):
                remove_participant(group['id'], participant_id, other)

    def test_organizer_cannot_be_removed(self, app, group):
        with app.app_context():
            from models.reservation import get_reservation_by_id, remove_participant

            organizer_row = get_reservation_by_id(group['id'])['participants'][0]

            with pytest.raises(InvalidStateError) as exc:
                remove_participant(group['id'], organizer_row['id'], group['organizer'])
            assert exc.value.error_code == 'CANNOT_REMOVE_ORGANIZER'

    def test_unknown_participant(self, app, group):
        with app.app_context():
            from models.reservation import remove_participant

            with pytest.raises(NotFoundError) as exc:
                remove_participant(group['id'], 999, group['organizer'])
            assert exc.value.error_code == 'PARTICIPANT_NOT_FOUND'

    def test_individual_reservation(self, app, make_user):
        owner = make_user()
        with app.app_context():
            from models.reservation import create_reservation, remove_participant

            reservation = create_reservation(owner, LAB_ID, START, END)

            with pytest.raises(InvalidStateError) as exc:
                remove_participant(reservation['id'], 1, owner)
            assert exc.value.error_code == 'NOT_GROUP_RESERVATION'

    def test_unknown_reservation(self, app, make_user):
        owner = make_user()
        with app.app_context():
            from models.reservation import remove_participant

            with pytest.raises(NotFoundError) as exc:
                remove_participant(999, 1, owner)
            assert exc.value.error_code == 'RESERVATION_NOT_FOUND'
