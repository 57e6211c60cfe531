# lesionlog/api/resources/auth.py
from flask_restful import Resource, reqparse
from ...services.auth_service import AuthService
from ...utils.params import JSONBody

class SignUp(Resource):
    def __init__(self, mailer=None):
        self.mailer = mailer

    def post(self):
        """Controller: Register a new user"""
        parser = reqparse.RequestParser()
        parser.add_argument('username', type=str, location='json')
        parser.add_argument('password', type=str, location='json')
        parser.add_argument('confirmPassword', type=str, location='json')
        parser.add_argument('email', type=str, location='json')
        parser.add_argument('role', type=str, location='json')
        args = parser.parse_args(req=JSONBody())

        auth_service = AuthService(mailer=self.mailer)
        user = auth_service.register(
            args['username'], args['password'], args['confirmPassword'], args['email'], args['role']
        )
        return {"success": True, "message": "User signed up successfully.", "user": user.to_public_dict()}, 201

class SignIn(Resource):
    def post(self):
        """Controller: Login and return JWT token"""
        parser = reqparse.RequestParser()
        parser.add_argument('email', type=str, location='json')
        parser.add_argument('password', type=str, location='json')
        args = parser.parse_args(req=JSONBody())

        token, user = AuthService().login(args['email'], args['password'])
        return {"success": True, "message": "User signed in successfully", "token": token, "user": user}, 200

class ForgotPassword(Resource):
    def __init__(self, mailer=None):
        self.mailer = mailer

    def post(self):
        parser = reqparse.RequestParser()
        parser.add_argument('email', type=str, location='json')
        args = parser.parse_args(req=JSONBody())

        AuthService(mailer=self.mailer).request_password_reset(args['email'])
        return {"success": True, "message": "Password reset link sent to your email."}, 200

class ResetPassword(Resource):
    def post(self):
        parser = reqparse.RequestParser()
        parser.add_argument('token', type=str, location='json')
        parser.add_argument('newPassword', type=str, location='json')
        parser.add_argument('confirmNewPassword', type=str, location='json')
        args = parser.parse_args(req=JSONBody())

        AuthService().reset_password(args['token'], args['newPassword'], args['confirmNewPassword'])
        return {"success": True, "message": "Password reset successfully."}, 200
