# lesionlog/utils/exceptions.py
from flask import current_app
from werkzeug.exceptions import HTTPException
from .logger import setup_logger

class APIError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self):
        return {"success": False, "message": self.message}

class ValidationError(APIError):
    status_code = 400

class AuthError(APIError):
    status_code = 401

class ForbiddenError(APIError):
    status_code = 403

class NotFoundError(APIError):
    status_code = 404

class ConflictError(APIError):
    status_code = 409

class TokenExpiredError(APIError):
    status_code = 400

class InternalError(APIError):
    status_code = 500

def handle_api_error(error):
    if isinstance(error, APIError):
        return error.to_dict(), error.status_code

    if isinstance(error, HTTPException):
        message = "Route not found" if error.code == 404 else error.description
        return {"success": False, "message": message}, error.code

    setup_logger().exception(f"Unhandled error: {error}")
    response = {"success": False, "message": "Something went wrong!"}
    if current_app.debug:
        response["error"] = str(error)
    return response, 500
