"""
Reservation data access functions.
Handles booking admission, reservation CRUD, status transitions, group
invitations and availability snapshots.

This module re-exports all functions from the split modules:
- reservation_conflicts.py: Admission checks (time range, group size, seats, double booking)
- reservation_crud.py: Create and read operations, serialization
- reservation_state.py: Cancellation and completion
- reservation_participants.py: Invitation tokens and participants
- reservation_queries.py: Listing, admin detail and statistics
- reservation_availability.py: Point-in-time and day-grid availability
"""

# =============================================================================
# RE-EXPORTS
# =============================================================================

# Admission checks
from .reservation_conflicts import (
    INDIVIDUAL,
    GROUP,
    RESERVATION_TYPES,
    intervals_overlap,
    count_occupied_seats,
    find_user_conflict,
    check_booking_admissible,
)

# CRUD operations
from .reservation_crud import (
    build_invitation_link,
    create_reservation,
    get_reservation_by_id,
    get_reservation,
)

# State transitions
from .reservation_state import (
    CONFIRMED,
    CANCELLED,
    COMPLETED,
    RESERVATION_STATUSES,
    cancel_reservation,
    admin_cancel_reservation,
    complete_finished_reservations,
)

# Invitations and participants
from .reservation_participants import (
    is_invitation_expired,
    validate_invitation,
    join_reservation,
    remove_participant,
)

# Query operations
from .reservation_queries import (
    list_reservations,
    admin_list_reservations,
    get_reservation_detail,
    get_space_reservation_stats,
    get_utilization_analytics,
)

# Availability
from .reservation_availability import (
    get_availability,
    get_space_day_availability,
)

# =============================================================================
# PUBLIC API
# =============================================================================

__all__ = [
    # Constants
    'INDIVIDUAL',
    'GROUP',
    'RESERVATION_TYPES',
    'CONFIRMED',
    'CANCELLED',
    'COMPLETED',
    'RESERVATION_STATUSES',

    # Admission
    'intervals_overlap',
    'count_occupied_seats',
    'find_user_conflict',
    'check_booking_admissible',

    # CRUD
    'build_invitation_link',
    'create_reservation',
    'get_reservation_by_id',
    'get_reservation',

    # State
    'cancel_reservation',
    'admin_cancel_reservation',
    'complete_finished_reservations',

    # Invitations
    'is_invitation_expired',
    'validate_invitation',
    'join_reservation',
    'remove_participant',

    # Queries
    'list_reservations',
    'admin_list_reservations',
    'get_reservation_detail',
    'get_space_reservation_stats',
    'get_utilization_analytics',

    # Availability
    'get_availability',
    'get_space_day_availability',
]
