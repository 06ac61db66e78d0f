"""
Centralized user-facing messages.
All API text in one place for consistency.
"""

MESSAGES = {
    # Success messages
    'login_success': 'Welcome {name}',
    'logout_success': 'Signed out',
    'reservation_created': 'Reservation created',
    'reservation_cancelled': 'Reservation cancelled',
    'reservation_cancelled_by_admin': 'Reservation cancelled successfully by admin',
    'participant_joined': 'You joined the reservation',
    'participant_removed': 'Participant removed',
    'space_created': 'Space created',
    'space_marked_unavailable': 'Space marked as unavailable',
    'space_marked_available': 'Space marked as available',
    'space_updated': 'Space updated',
    'floor_created': 'Floor created',
    'floor_updated': 'Floor updated',

    # Auth / generic errors
    'invalid_credentials': 'Invalid email or password',
    'account_disabled': 'This account has been disabled',
    'login_required': 'Authentication required',
    'permission_denied': 'You do not have permission for this action',
    'not_found': 'Resource not found',
    'method_not_allowed': 'Method not allowed',
    'internal_error': 'Internal server error',
    'invalid_payload': 'Invalid request payload',
    'csrf_failed': 'Missing or invalid CSRF token',

    # Spaces
    'space_not_found': 'Space not found',
    'floor_not_found': 'Floor not found',
    'floor_name_required': 'A floor name is required',
    'invalid_space_capacity': 'Capacity must be at least the minimum capacity, and the minimum capacity at least 1',
    'unavailability_reason_required': 'A reason is required to mark a space unavailable',
    'maintenance': 'Maintenance',

    # Booking validation
    'invalid_time_range': 'Start time must be before end time',
    'invalid_datetime': 'Invalid datetime. Use ISO 8601',
    'invalid_date_format': 'Invalid date format. Use YYYY-MM-DD',
    'invalid_status': 'Invalid status. Use confirmed, cancelled or completed',
    'invalid_reservation_type': "Reservation type must be 'individual' or 'group'",
    'group_size_required': 'Group size is required for group reservations',
    'insufficient_group_size': 'This room requires at least {min_capacity} participants',
    'exceeds_max_capacity': 'This room has a maximum capacity of {capacity}',
    'not_enough_seats': 'Not enough seats available',
    'user_double_booking': 'You already have a reservation at this time',

    # Reservation lifecycle
    'reservation_not_found': 'Reservation not found',
    'access_denied': 'Access denied',
    'already_cancelled': 'Reservation is already cancelled',
    'cannot_cancel_completed': 'Cannot cancel a completed reservation',
    'cancellation_reason_required': 'A cancellation reason is required',

    # Invitations and participants
    'invalid_token': 'Invalid invitation token',
    'invitation_expired': 'Invitation has expired ({days} days)',
    'reservation_not_active': 'Reservation is not active',
    'already_joined': 'You are already a participant in this reservation',
    'reservation_full': 'Reservation is at full capacity',
    'not_group_reservation': 'This is not a group reservation',
    'organizer_only': 'Only the organizer can remove participants',
    'participant_not_found': 'Participant not found in this reservation',
    'cannot_remove_organizer': 'Cannot remove the organizer from the reservation',
}
