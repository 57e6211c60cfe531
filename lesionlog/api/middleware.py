# lesionlog/api/middleware.py
from functools import wraps
from flask import g
from flask_jwt_extended import get_jwt, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt import ExpiredSignatureError, InvalidTokenError
from ..services.auth_service import RESET_PURPOSE
from ..utils.exceptions import AuthError, ForbiddenError

def authenticate():
    """Resolve the bearer token to a principal stored on flask.g"""
    try:
        verify_jwt_in_request()
    except ExpiredSignatureError:
        raise AuthError("Token has expired.")
    except (JWTExtendedException, InvalidTokenError):
        raise AuthError("Access denied. Invalid or missing token.")

    claims = get_jwt()
    if claims.get("purpose") == RESET_PURPOSE:
        raise AuthError("Access denied. Invalid or missing token.")

    g.principal = {
        "user_id": int(claims["sub"]),
        "email": claims.get("email"),
        "role": claims.get("role")
    }
    return g.principal

def authorize(required_role):
    principal = getattr(g, 'principal', None)
    if principal is None or principal["role"] != required_role:
        raise ForbiddenError("Access denied. Insufficient permissions.")
    return principal

def auth_required(role=None):
    """Decorator for resource methods: valid token, and the given role when one is named"""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            authenticate()
            if role is not None:
                authorize(role)
            return fn(*args, **kwargs)
        return wrapper
    return decorator
