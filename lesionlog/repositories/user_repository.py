# lesionlog/repositories/user_repository.py
from sqlalchemy import or_
from ..core.database import User
from .. import db
from ..utils.logger import setup_logger

class UserRepository:
    def __init__(self):
        self.logger = setup_logger()

    def create_user(self, username, email, hashed_password, role='user'):
        """Repository: Create a new user"""
        try:
            user = User(username=username, email=email, password=hashed_password, role=role)
            db.session.add(user)
            db.session.commit()
            self.logger.info(f"Repository: Created user {username}")
            return user
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Repository: Failed to create user {username}: {str(e)}")
            raise

    def update_password(self, user, hashed_password):
        """Repository: Replace a user's password hash"""
        try:
            user.password = hashed_password
            db.session.commit()
            self.logger.info(f"Repository: Updated password for user ID {user.id}")
            return user
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Repository: Failed to update password for user ID {user.id}: {str(e)}")
            raise

    def get_user_by_username_or_email(self, username, email):
        try:
            return User.query.filter(or_(User.username == username, User.email == email)).first()
        except Exception as e:
            self.logger.error(f"Repository: Failed to look up user {username}/{email}: {str(e)}")
            raise

    def get_user_by_email(self, email):
        """Repository: Get user by email"""
        try:
            return User.query.filter_by(email=email).first()
        except Exception as e:
            self.logger.error(f"Repository: Failed to get user {email}: {str(e)}")
            raise

    def get_user_by_id(self, user_id):
        """Repository: Get user by ID"""
        try:
            return db.session.get(User, user_id)
        except Exception as e:
            self.logger.error(f"Repository: Failed to get user ID {user_id}: {str(e)}")
            raise

    def list_users(self, role=None):
        """Repository: List users, optionally restricted to one role"""
        try:
            query = User.query
            if role:
                query = query.filter_by(role=role)
            return query.order_by(User.created_at.asc(), User.id.asc()).all()
        except Exception as e:
            self.logger.error(f"Repository: Failed to list users (role={role}): {str(e)}")
            raise

    def count_by_role(self):
        """Repository: Count users per role"""
        try:
            rows = db.session.query(User.role, db.func.count(User.id)).group_by(User.role).all()
            return {role: count for role, count in rows}
        except Exception as e:
            self.logger.error(f"Repository: Failed to count users by role: {str(e)}")
            raise
