"""
Standardized API response helpers.

Provides consistent JSON response format across all API endpoints:

    Success:    {"success": true, "data": {...}, "message": "..."}
    Paginated:  {"success": true, "data": [...], "meta": {"page", "limit", "total"}}
    Error:      {"success": false, "error": "message", "code": "MACHINE_CODE"}

Usage:
    from utils.api_response import api_success, api_error

    return api_success(data=reservation, message='Reservation created', status=201)
    return api_error('Space not found', status=404, code='SPACE_NOT_FOUND')
"""

from flask import jsonify
from typing import Any


def api_success(
    data: Any = None,
    message: str | None = None,
    status: int = 200,
    **extra_fields: Any
) -> tuple:
    """
    Build a standardized success JSON response.

    Args:
        data: Optional payload to include as 'data' key.
        message: Optional success message.
        status: HTTP status code (default 200).
        **extra_fields: Additional top-level fields (e.g., meta).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': True}

    if data is not None:
        response['data'] = data

    if message:
        response['message'] = message

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_paginated(items: list, page: int, limit: int, total: int) -> tuple:
    """Build a success response for one page of a listing."""
    return api_success(data=items, meta={'page': page, 'limit': limit, 'total': total})


def api_error(error: str, status: int = 400, code: str | None = None, **extra_fields: Any) -> tuple:
    """
    Build a standardized error JSON response.

    Args:
        error: Error message.
        status: HTTP status code (default 400).
        code: Machine-readable error code (e.g., BOOKING_CONFLICT).
        **extra_fields: Additional top-level fields (e.g., field errors).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': False, 'error': error}

    if code:
        response['code'] = code

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status
