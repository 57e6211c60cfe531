# lesionlog/services/user_service.py
from ..core.database import ROLES
from ..repositories.user_repository import UserRepository
from ..utils.exceptions import ValidationError
from ..utils.logger import setup_logger

class UserService:
    def __init__(self):
        self.repository = UserRepository()
        self.logger = setup_logger()

    def list_all(self):
        """Service: Every user, password excluded"""
        users = [user.to_public_dict() for user in self.repository.list_users()]
        self.logger.info(f"Service: Listed {len(users)} users")
        return {"count": len(users), "users": users}

    def list_by_role(self, role):
        """Service: Users holding one role"""
        if not role:
            raise ValidationError("Role parameter is required.")
        role = role.lower()
        if role not in ROLES:
            raise ValidationError("Invalid role. Role must be either 'admin' or 'user'.")

        users = [user.to_public_dict() for user in self.repository.list_users(role=role)]
        self.logger.info(f"Service: Listed {len(users)} users with role {role}")
        return {"count": len(users), "role": role, "users": users}

    def role_statistics(self):
        counts = self.repository.count_by_role()
        admin_count = counts.get('admin', 0)
        user_count = counts.get('user', 0)
        total = sum(counts.values())
        return {
            "totalUsers": total,
            "adminCount": admin_count,
            "userCount": user_count,
            "userPercentage": round(user_count / total * 100) if total > 0 else 0,
            "adminPercentage": round(admin_count / total * 100) if total > 0 else 0
        }
