from flask import Flask
from flask_restful import Api
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from .config.settings import Config
from .utils.logger import setup_logger
from .utils.exceptions import handle_api_error

db = SQLAlchemy()
jwt = JWTManager()

class LesionLogApi(Api):
    """Api whose werkzeug HTTP errors share the {success, message} envelope"""

    def handle_error(self, e):
        if isinstance(e, HTTPException):
            data, code = handle_api_error(e)
            return self.make_response(data, code)
        return super().handle_error(e)

def create_app(config_class=Config, mailer=None):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.config['MAX_CONTENT_LENGTH'] = app.config['MAX_UPLOAD_SIZE']

    # Initialize CORS
    CORS(app, resources={r"/*": {"origins": app.config['CORS_ORIGINS']}})

    # Initialize extensions
    db.init_app(app)
    jwt.init_app(app)
    api = LesionLogApi(app)

    # Setup logger
    logger = setup_logger()
    logger.info("Initializing backend application")

    # Register error handler
    app.errorhandler(Exception)(handle_api_error)

    # Mail sender, built once and shared by the resources that send mail
    if mailer is None:
        from .services.notification_service import NotificationService
        mailer = NotificationService(app.config['SENDGRID_API_KEY'], app.config['MAIL_FROM_EMAIL'])
    mail_kwargs = {'mailer': mailer}

    # Register API resources
    from .api.resources.health import HealthCheck
    from .api.resources.auth import SignUp, SignIn, ForgotPassword, ResetPassword
    from .api.resources.results import (
        Results, MyResults, UserResults, ResultsByPrediction, ResultsByDate,
        Statistics, TimeBasedStatistics, DownloadReport, EmailReport
    )
    from .api.resources.users import AllUsers, UsersByRole, Users, Profile, UserStats
    from .api.resources.upload import UploadImage

    api.add_resource(HealthCheck, '/')
    api.add_resource(SignUp, '/api/auth/signup', resource_class_kwargs=mail_kwargs)
    api.add_resource(SignIn, '/api/auth/signin')
    api.add_resource(ForgotPassword, '/api/auth/forgot-password', resource_class_kwargs=mail_kwargs)
    api.add_resource(ResetPassword, '/api/auth/reset-password')

    api.add_resource(Results, '/api/results')
    api.add_resource(MyResults, '/api/results/my-results')
    api.add_resource(UserResults, '/api/results/user/<int:user_id>')
    api.add_resource(Statistics, '/api/results/stats')
    api.add_resource(TimeBasedStatistics, '/api/results/stats/<string:period>')
    api.add_resource(ResultsByPrediction, '/api/results/prediction/<string:text>')
    api.add_resource(ResultsByDate, '/api/results/date')
    api.add_resource(DownloadReport, '/api/results/download-report')
    api.add_resource(EmailReport, '/api/results/email-report', resource_class_kwargs=mail_kwargs)

    api.add_resource(Users, '/api/users')
    api.add_resource(AllUsers, '/api/users/all')
    api.add_resource(UsersByRole, '/api/users/role/<string:role>')
    api.add_resource(Profile, '/api/users/profile')
    api.add_resource(UserStats, '/api/users/stats')

    api.add_resource(UploadImage, '/api/upload/image')

    # Initialize database
    with app.app_context():
        from .core import database  # noqa: F401  registers the models
        db.create_all()

    return app
