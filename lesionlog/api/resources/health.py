from flask_restful import Resource

class HealthCheck(Resource):
    def get(self):
        """Controller: Check API health & list available routes"""
        routes = {
            "status": "healthy",
            "message": "Welcome to the LesionLog API",
            "routes": {
                "/": "Health check & list all routes",
                "/api/auth/signup": "Register new user",
                "/api/auth/signin": "Login user",
                "/api/auth/forgot-password": "Mail a password reset link",
                "/api/auth/reset-password": "Reset password with a reset token",
                "/api/results": "Submit a result / list all results (admin)",
                "/api/results/my-results": "Results of the current user",
                "/api/results/user/<user_id>": "Results of one user (admin)",
                "/api/results/stats": "Aggregate statistics (admin)",
                "/api/results/stats/<period>": "Daily, weekly, monthly or yearly trend (admin)",
                "/api/results/prediction/<text>": "Results whose label contains text (admin)",
                "/api/results/date": "Results within a date range (admin)",
                "/api/results/download-report": "PDF report download (admin)",
                "/api/results/email-report": "PDF report by email (admin)",
                "/api/users": "Users, optionally filtered by ?role= (admin)",
                "/api/users/all": "All users (admin)",
                "/api/users/role/<role>": "Users with a role (admin)",
                "/api/users/profile": "Current user's profile",
                "/api/users/stats": "User role statistics (admin)",
                "/api/upload/image": "Upload an image",
            }
        }
        return routes, 200
