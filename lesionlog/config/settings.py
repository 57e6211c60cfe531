# lesionlog/config/settings.py
import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

class Config:
    BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    LOGS_PATH = os.getenv('LOGS_PATH', os.path.join(BASE_DIR, '../../logs'))

    # MySQL configuration from .env, DATABASE_URL wins when set
    MYSQL_HOST = os.getenv('MYSQL_HOST', 'localhost')
    MYSQL_PORT = os.getenv('MYSQL_PORT', '3306')
    MYSQL_USER = os.getenv('MYSQL_USER', 'root')
    MYSQL_PASSWORD = os.getenv('MYSQL_PASSWORD', '')
    MYSQL_DATABASE = os.getenv('MYSQL_DATABASE', 'lesionlog_db')

    SQLALCHEMY_DATABASE_URI = os.getenv(
        'DATABASE_URL',
        f"mysql+pymysql://{MYSQL_USER}:{MYSQL_PASSWORD}@{MYSQL_HOST}:{MYSQL_PORT}/{MYSQL_DATABASE}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SECRET_KEY = os.getenv('SECRET_KEY', 'your-secret-key')
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'your-jwt-secret-key')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)
    RESET_TOKEN_EXPIRES = timedelta(minutes=15)
    BCRYPT_ROUNDS = int(os.getenv('BCRYPT_ROUNDS', 10))
    DEBUG = os.getenv('FLASK_DEBUG', 'False') == 'True'
    PORT = int(os.getenv('PORT', 5001))
    # Hand every non-HTTP error to handle_api_error instead of Flask-RESTful's generic 500
    PROPAGATE_EXCEPTIONS = True

    CORS_ORIGINS = os.getenv(
        'CORS_ORIGINS', 'http://localhost:3000,http://localhost:5173,http://localhost:8080'
    ).split(',')
    FRONTEND_URL = os.getenv('FRONTEND_URL', 'http://localhost:5173')

    # SendGrid mail transport
    SENDGRID_API_KEY = os.getenv('SENDGRID_API_KEY')
    MAIL_FROM_EMAIL = os.getenv('MAIL_FROM_EMAIL')

    UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
    MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", 5 * 1024 * 1024))  # 5MB

    DEFAULT_PAGE_SIZE = 10
    MAX_PAGE_SIZE = 100
    REPORT_FETCH_LIMIT = 1000
    REPORT_TABLE_ROWS = 100
