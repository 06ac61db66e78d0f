"""
Admin routes for reservations, spaces, floors, statistics and the audit trail.
All endpoints are JSON and require an admin.* permission.
"""

from flask import request, Blueprint

from blueprints.admin.forms import (
    AdminCancelForm,
    SpaceForm,
    SpaceUpdateForm,
    UnavailabilityForm,
    FloorForm,
    FloorUpdateForm,
)
from models.audit_log import get_audit_logs, count_audit_logs
from models.floor import get_all_floors, get_floor_by_id, create_floor, update_floor, serialize_floor
from models.reservation import (
    admin_list_reservations,
    admin_cancel_reservation,
    get_reservation_detail,
    get_space_reservation_stats,
    get_utilization_analytics,
)
from models.space import (
    create_space,
    update_space,
    get_space_by_id,
    mark_space_unavailable,
    mark_space_available,
    serialize_space,
)
from utils.api_response import api_success, api_paginated
from utils.audit import log_audit
from utils.decorators import login_required, permission_required
from utils.forms import bind_json_form, form_error
from utils.messages import MESSAGES

admin_bp = Blueprint('admin', __name__)


# =============================================================================
# RESERVATIONS
# =============================================================================

@admin_bp.route('/reservations')
@login_required
@permission_required('admin.reservations.view')
def reservations():
    """
    List all reservations.

    Query params:
        page, limit, date_from, date_to (YYYY-MM-DD), space_id, user, status
    """
    result = admin_list_reservations(
        page=request.args.get('page', 1, type=int),
        limit=request.args.get('limit', type=int),
        date_from=request.args.get('date_from', '').strip() or None,
        date_to=request.args.get('date_to', '').strip() or None,
        space_id=request.args.get('space_id', type=int),
        user=request.args.get('user', '').strip() or None,
        status=request.args.get('status', '').strip() or None
    )
    return api_paginated(result['items'], result['page'], result['limit'], result['total'])


@admin_bp.route('/reservations/<int:reservation_id>')
@login_required
@permission_required('admin.reservations.view')
def reservation_detail(reservation_id):
    """Full reservation view with invitation and cancellation info."""
    return api_success(data=get_reservation_detail(reservation_id))


@admin_bp.route('/reservations/<int:reservation_id>/cancel', methods=['POST'])
@login_required
@permission_required('admin.reservations.manage')
def reservation_cancel(reservation_id):
    """
    Cancel any reservation.

    Body:
        reason (required), notes
    """
    form, _ = bind_json_form(AdminCancelForm)
    if not form.validate():
        return form_error(form)

    reservation = admin_cancel_reservation(reservation_id, form.reason.data, form.notes.data)

    log_audit('ADMIN_CANCELLED', 'reservation', reservation_id, details={
        'reason': form.reason.data,
        'notes': form.notes.data or None,
    })

    return api_success(data=reservation, message=MESSAGES['reservation_cancelled_by_admin'])


# =============================================================================
# STATISTICS & AUDIT
# =============================================================================

@admin_bp.route('/stats')
@login_required
@permission_required('admin.stats.view')
def stats():
    """Dashboard counters."""
    return api_success(data=get_space_reservation_stats())


@admin_bp.route('/analytics/utilization')
@login_required
@permission_required('admin.stats.view')
def utilization():
    """Confirmed reservations per space: popular and underutilized spaces."""
    return api_success(data=get_utilization_analytics())


@admin_bp.route('/audit')
@login_required
@permission_required('admin.audit.view')
def audit():
    """
    Search the audit trail.

    Query params:
        user_id, action, entity_type, user, start_date, end_date, page, limit
    """
    filters = {
        'user_id': request.args.get('user_id', type=int),
        'action': request.args.get('action', '').strip() or None,
        'entity_type': request.args.get('entity_type', '').strip() or None,
        'user': request.args.get('user', '').strip() or None,
        'start_date': request.args.get('start_date', '').strip() or None,
        'end_date': request.args.get('end_date', '').strip() or None,
    }

    page = max(request.args.get('page', 1, type=int), 1)
    limit = request.args.get('limit', 50, type=int)
    limit = min(max(limit, 1), 100)  # Cap at 100

    logs = get_audit_logs(limit=limit, offset=(page - 1) * limit, **filters)
    total = count_audit_logs(**filters)

    return api_paginated(logs, page, limit, total)


# =============================================================================
# SPACES
# =============================================================================

@admin_bp.route('/spaces', methods=['POST'])
@login_required
@permission_required('admin.spaces.manage')
def space_create():
    """
    Create a space.

    Body:
        name, capacity, min_capacity (default 1), space_type, floor_id, description
    """
    form, _ = bind_json_form(SpaceForm)
    if not form.validate():
        return form_error(form)

    space_id = create_space(
        name=form.name.data,
        capacity=form.capacity.data,
        min_capacity=form.min_capacity.data or 1,
        space_type=form.space_type.data or 'room',
        floor_id=form.floor_id.data,
        description=form.description.data or None
    )

    return api_success(
        data=serialize_space(get_space_by_id(space_id)),
        message=MESSAGES['space_created'],
        status=201
    )


@admin_bp.route('/spaces/<int:space_id>', methods=['PATCH'])
@login_required
@permission_required('admin.spaces.manage')
def space_update(space_id):
    """
    Edit a space. Only keys present in the body change.

    Body:
        name, space_type, capacity, min_capacity, floor_id, description
    """
    form, payload = bind_json_form(SpaceUpdateForm)
    if not form.validate():
        return form_error(form)

    changes = {
        field: form[field].data
        for field in ('name', 'space_type', 'capacity', 'min_capacity', 'floor_id', 'description')
        if field in payload
    }
    space = update_space(space_id, **changes)

    log_audit('SPACE_UPDATED', 'space', space_id, details=changes)

    return api_success(data=serialize_space(space), message=MESSAGES['space_updated'])


@admin_bp.route('/spaces/<int:space_id>/unavailable', methods=['POST'])
@login_required
@permission_required('admin.spaces.manage')
def space_unavailable(space_id):
    """
    Open a maintenance window.

    Body:
        reason, start_time, end_time (optional, open-ended when missing)
    """
    form, _ = bind_json_form(UnavailabilityForm)
    if not form.validate():
        return form_error(form)

    space = mark_space_unavailable(
        space_id,
        reason=form.reason.data,
        start=form.start_time.data,
        end=form.end_time.data or None
    )

    log_audit('SPACE_UNAVAILABLE', 'space', space_id, details={
        'reason': form.reason.data,
        'start_time': space['unavailability_start'],
        'end_time': space['unavailability_end'],
    })

    return api_success(data=serialize_space(space), message=MESSAGES['space_marked_unavailable'])


@admin_bp.route('/spaces/<int:space_id>/available', methods=['POST'])
@login_required
@permission_required('admin.spaces.manage')
def space_available(space_id):
    """Close the maintenance window of a space."""
    space = mark_space_available(space_id)

    log_audit('SPACE_AVAILABLE', 'space', space_id)

    return api_success(data=serialize_space(space), message=MESSAGES['space_marked_available'])


# =============================================================================
# FLOORS
# =============================================================================

@admin_bp.route('/floors')
@login_required
@permission_required('admin.spaces.manage')
def floors():
    """
    List floors.

    Query params:
        building
    """
    building = request.args.get('building', '').strip() or None
    items = [serialize_floor(floor) for floor in get_all_floors(building=building)]
    return api_success(data=items, meta={'total': len(items)})


@admin_bp.route('/floors', methods=['POST'])
@login_required
@permission_required('admin.spaces.manage')
def floor_create():
    """
    Create a floor.

    Body:
        name, building
    """
    form, _ = bind_json_form(FloorForm)
    if not form.validate():
        return form_error(form)

    floor_id = create_floor(form.name.data, building=form.building.data)

    log_audit('FLOOR_CREATED', 'floor', floor_id, details={'name': form.name.data})

    return api_success(
        data=serialize_floor(get_floor_by_id(floor_id)),
        message=MESSAGES['floor_created'],
        status=201
    )


@admin_bp.route('/floors/<int:floor_id>', methods=['PATCH'])
@login_required
@permission_required('admin.spaces.manage')
def floor_update(floor_id):
    """
    Edit a floor. Only keys present in the body change.

    Body:
        name, building
    """
    form, payload = bind_json_form(FloorUpdateForm)
    if not form.validate():
        return form_error(form)

    changes = {field: form[field].data for field in ('name', 'building') if field in payload}
    floor = update_floor(floor_id, **changes)

    log_audit('FLOOR_UPDATED', 'floor', floor_id, details=changes)

    return api_success(data=serialize_floor(floor), message=MESSAGES['floor_updated'])
