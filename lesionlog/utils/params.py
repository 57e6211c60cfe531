# lesionlog/utils/params.py
import math
from datetime import date, datetime, time
from flask import current_app, request
from .exceptions import ValidationError

def parse_day(value, field):
    """'YYYY-MM-DD' or a full ISO timestamp -> date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        if len(value) == 10:
            return date.fromisoformat(value)
        # a full ISO timestamp is accepted, anything else after the day is not
        return datetime.fromisoformat(value.replace('Z', '+00:00')).date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field}. Use the YYYY-MM-DD format.")

def day_bounds(start_date, end_date=None):
    """Inclusive datetime bounds covering whole calendar days; end defaults to start."""
    if not start_date:
        raise ValidationError("Start date is required.")
    start_day = parse_day(start_date, 'startDate')
    end_day = parse_day(end_date, 'endDate') if end_date else start_day
    if end_day < start_day:
        raise ValidationError("End date must not be before start date.")
    return datetime.combine(start_day, time.min), datetime.combine(end_day, time.max)

def parse_page(page, page_size):
    defaults = current_app.config.get('DEFAULT_PAGE_SIZE', 10)
    limit = current_app.config.get('MAX_PAGE_SIZE', 100)
    try:
        page = int(page) if page not in (None, '') else 1
        page_size = int(page_size) if page_size not in (None, '') else defaults
    except (TypeError, ValueError):
        raise ValidationError("Page and limit must be integers.")
    if page < 1 or page_size < 1:
        raise ValidationError("Page and limit must be at least 1.")
    return page, min(page_size, limit)

def pagination_dict(pagination):
    """Envelope for a Flask-SQLAlchemy Pagination object."""
    total = pagination.total or 0
    total_pages = math.ceil(total / pagination.per_page) if total else 0
    return {
        "currentPage": pagination.page,
        "pageSize": pagination.per_page,
        "totalPages": total_pages,
        "totalResults": total,
        "hasNext": pagination.page < total_pages,
        "hasPrev": pagination.page > 1
    }

class JSONBody:
    """Request stand-in for reqparse: the JSON object body, or {} when it is missing or not JSON."""

    def __init__(self):
        body = request.get_json(silent=True)
        self.json = body if isinstance(body, dict) else {}

    def get_json(self, *args, **kwargs):
        return self.json
