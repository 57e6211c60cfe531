# lesionlog/api/resources/users.py
from flask import g
from flask_restful import Resource, reqparse
from ..middleware import auth_required
from ...services.auth_service import AuthService
from ...services.user_service import UserService

class AllUsers(Resource):
    @auth_required(role='admin')
    def get(self):
        payload = UserService().list_all()
        return {"success": True, "message": "Users retrieved successfully.", **payload}, 200

class UsersByRole(Resource):
    @auth_required(role='admin')
    def get(self, role):
        payload = UserService().list_by_role(role)
        return {
            "success": True,
            "message": f"Users with role '{payload['role']}' retrieved successfully.",
            **payload
        }, 200

class Users(Resource):
    @auth_required(role='admin')
    def get(self):
        """Controller: All users, or those holding ?role="""
        parser = reqparse.RequestParser()
        parser.add_argument('role', type=str, location='args')
        args = parser.parse_args()

        if not args['role']:
            payload = UserService().list_all()
            return {"success": True, "message": "Users retrieved successfully.", **payload}, 200
        payload = UserService().list_by_role(args['role'])
        return {
            "success": True,
            "message": f"Users with role '{payload['role']}' retrieved successfully.",
            **payload
        }, 200

class Profile(Resource):
    @auth_required()
    def get(self):
        """Controller: Admins see every user, others their own profile"""
        if g.principal['role'] == 'admin':
            payload = UserService().list_all()
            return {"success": True, "message": "Users retrieved successfully.", **payload}, 200
        user = AuthService().get_profile(g.principal['user_id'])
        return {"success": True, "message": "User profile retrieved successfully.", "user": user}, 200

class UserStats(Resource):
    @auth_required(role='admin')
    def get(self):
        stats = UserService().role_statistics()
        return {"success": True, "message": "User statistics retrieved successfully.", "stats": stats}, 200
