# lesionlog/services/auth_service.py
import re
import bcrypt
from flask import current_app
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt import ExpiredSignatureError, InvalidTokenError
from ..core.database import ROLES
from ..repositories.user_repository import UserRepository
from ..utils.exceptions import (
    AuthError, ConflictError, InternalError, NotFoundError, TokenExpiredError, ValidationError
)
from ..utils.logger import setup_logger

PASSWORD_PATTERN = re.compile(r'^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$')
PASSWORD_POLICY = (
    "Password must be at least 8 characters long and include uppercase, "
    "lowercase, number, and special character."
)
RESET_PURPOSE = 'password_reset'

def is_strong_password(password):
    return bool(password) and PASSWORD_PATTERN.match(password) is not None

class AuthService:
    def __init__(self, mailer=None):
        self.user_repository = UserRepository()
        self.mailer = mailer
        self.logger = setup_logger()

    def _hash(self, password):
        rounds = current_app.config.get('BCRYPT_ROUNDS', 10)
        return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds))

    def register(self, username, password, confirm_password, email, role=None):
        """Service: Register a new user"""
        if not username or not password or not confirm_password or not email:
            raise ValidationError("All fields are required.")
        if password != confirm_password:
            raise ValidationError("Passwords do not match.")
        if not is_strong_password(password):
            raise ValidationError(PASSWORD_POLICY)
        role = (role or 'user').lower()
        if role not in ROLES:
            raise ValidationError("Invalid role. Role must be either 'admin' or 'user'.")

        if self.user_repository.get_user_by_username_or_email(username, email):
            raise ConflictError("Username or email already exists.")

        user = self.user_repository.create_user(username, email, self._hash(password), role)
        self.logger.info(f"Service: User registered: {username}")
        self._send_welcome(user)
        return user

    def _send_welcome(self, user):
        # Best effort, registration already succeeded
        if self.mailer is None:
            return
        try:
            self.mailer.send(
                user.email,
                "Signup Successful - Welcome!",
                text=(
                    f"Hi {user.username},\n\nYou have successfully signed up!\n\n"
                    "Please log in to your account.\n\nKeep your credentials safe.\n"
                )
            )
        except Exception as e:
            self.logger.warning(f"Service: Welcome email to {user.email} failed: {str(e)}")

    def login(self, email, password):
        """Service: Authenticate user and return JWT token with public profile"""
        if not email or not password:
            raise ValidationError("Email and password are required.")

        user = self.user_repository.get_user_by_email(email)
        if not user:
            raise NotFoundError("No account associated with this email exists.")
        if not bcrypt.checkpw(password.encode('utf-8'), user.password):
            self.logger.warning(f"Service: Failed login for {email}")
            raise AuthError("Invalid credentials.")

        token = create_access_token(
            identity=str(user.id),
            additional_claims={"email": user.email, "role": user.role},
            expires_delta=current_app.config['JWT_ACCESS_TOKEN_EXPIRES']
        )
        self.logger.info(f"Service: User logged in: {email}")
        return token, user.to_public_dict()

    def request_password_reset(self, email):
        """Service: Mail a short-lived reset link"""
        if not email:
            raise ValidationError("Email is required.")

        user = self.user_repository.get_user_by_email(email)
        if not user:
            raise NotFoundError("No account found with this email.")

        reset_token = create_access_token(
            identity=str(user.id),
            additional_claims={"purpose": RESET_PURPOSE},
            expires_delta=current_app.config['RESET_TOKEN_EXPIRES']
        )
        reset_link = f"{current_app.config['FRONTEND_URL']}/reset-password?token={reset_token}"

        if self.mailer is None:
            raise InternalError("Mail transport is not configured")
        self.mailer.send(
            email,
            "Password Reset Request",
            html=(
                "<p>You requested a password reset.</p>"
                "<p>Click the link below to reset your password (valid for 15 minutes):</p>"
                f'<a href="{reset_link}">Reset Password</a>'
            )
        )
        self.logger.info(f"Service: Password reset link sent to {email}")
        return reset_token

    def reset_password(self, token, new_password, confirm_new_password):
        """Service: Replace the password of the user named by a reset token"""
        if not token or not new_password or not confirm_new_password:
            raise ValidationError("All fields are required.")
        if new_password != confirm_new_password:
            raise ValidationError("Passwords do not match.")
        if not is_strong_password(new_password):
            raise ValidationError(PASSWORD_POLICY)

        try:
            claims = decode_token(token)
        except ExpiredSignatureError:
            raise TokenExpiredError("Reset token has expired.")
        except (InvalidTokenError, JWTExtendedException):
            raise ValidationError("Invalid reset token.")
        if claims.get("purpose") != RESET_PURPOSE:
            raise ValidationError("Invalid reset token.")

        user = self.user_repository.get_user_by_id(int(claims["sub"]))
        if not user:
            raise NotFoundError("User not found.")

        self.user_repository.update_password(user, self._hash(new_password))
        self.logger.info(f"Service: Password reset for user ID {user.id}")
        return user

    def get_profile(self, user_id):
        """Service: Public profile of one user"""
        user = self.user_repository.get_user_by_id(user_id)
        if not user:
            raise NotFoundError("User not found.")
        return user.to_public_dict()
