import os
from datetime import timedelta

from celery.schedules import crontab
from dotenv import load_dotenv

load_dotenv()

DEFAULT_SECRET_KEY = 'dev-secret-key-change-in-production'


class Config:
    """Base configuration"""
    SECRET_KEY = os.getenv('SECRET_KEY') or DEFAULT_SECRET_KEY
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY') or SECRET_KEY
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.getenv('JWT_ACCESS_HOURS', '8')))

    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///siddha_savor.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }

    # Public URL used in invite, login and reminder links
    APP_BASE_URL = os.getenv('APP_BASE_URL', 'http://localhost:3000')
    SUPPORT_EMAIL = os.getenv('SUPPORT_EMAIL', 'support@siddhasavor.com')
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    # Token lifetimes
    INVITE_TTL_HOURS = int(os.getenv('INVITE_TTL_HOURS', '168'))  # 7 days
    PASSWORD_RESET_TTL_MINUTES = int(os.getenv('PASSWORD_RESET_TTL_MINUTES', '15'))
    PASSWORD_MIN_LENGTH = 6

    # Meal reminder delivery
    MEAL_REMINDER_MAX_ATTEMPTS = int(os.getenv('MEAL_REMINDER_MAX_ATTEMPTS', '3'))
    MEAL_REMINDER_RETRY_DELAY = float(os.getenv('MEAL_REMINDER_RETRY_DELAY', '1'))  # seconds

    # Operations slower than this are logged as warnings
    SLOW_OPERATION_MS = int(os.getenv('SLOW_OPERATION_MS', '1000'))

    # Shared secret for external cron callers (empty = open)
    CRON_SECRET = os.getenv('CRON_SECRET', '')

    # Celery Configuration
    CELERY_BROKER_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')
    CELERY_RESULT_BACKEND = os.getenv('REDIS_URL', 'redis://localhost:6379/0')
    CELERY_ACCEPT_CONTENT = ['json']
    CELERY_TASK_SERIALIZER = 'json'
    CELERY_RESULT_SERIALIZER = 'json'
    CELERY_TIMEZONE = os.getenv('CELERY_TIMEZONE', 'Asia/Kolkata')
    CELERY_ENABLE_UTC = True
    CELERY_TASK_ALWAYS_EAGER = False
    CELERY_BEAT_SCHEDULE = {
        'breakfast-reminders': {
            'task': 'tasks.send_meal_reminders',
            'schedule': crontab(hour=8, minute=0),
            'args': ('breakfast',),
        },
        'lunch-reminders': {
            'task': 'tasks.send_meal_reminders',
            'schedule': crontab(hour=12, minute=30),
            'args': ('lunch',),
        },
        'dinner-reminders': {
            'task': 'tasks.send_meal_reminders',
            'schedule': crontab(hour=20, minute=0),
            'args': ('dinner',),
        },
        'password-reset-cleanup': {
            'task': 'tasks.cleanup_password_resets',
            'schedule': crontab(minute=0),
        },
    }

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE = os.getenv('LOG_FILE', 'logs/app.log')

    # Email Configuration
    MAIL_SERVER = os.getenv('MAIL_SERVER', 'smtp.gmail.com')
    MAIL_PORT = int(os.getenv('MAIL_PORT', '587'))
    MAIL_USE_TLS = os.getenv('MAIL_USE_TLS', 'true').lower() == 'true'
    MAIL_USERNAME = os.getenv('MAIL_USERNAME')
    MAIL_PASSWORD = os.getenv('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.getenv('MAIL_DEFAULT_SENDER', 'Siddha Savor <noreply@siddhasavor.com>')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 3600,
        'pool_size': 20,
        'max_overflow': 40,
    }

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')

    @classmethod
    def validate(cls):
        """Refuse to boot with the development secret key"""
        if not os.getenv('SECRET_KEY') or os.getenv('SECRET_KEY') == DEFAULT_SECRET_KEY:
            raise ValueError("SECRET_KEY environment variable must be set in production and must not be the default value")


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv('TEST_DATABASE_URL', 'sqlite:///:memory:')
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = 'test-jwt-secret-key-with-enough-length'
    CELERY_TASK_ALWAYS_EAGER = True
    CELERY_BROKER_URL = 'memory://'
    CELERY_RESULT_BACKEND = 'cache+memory://'
    MEAL_REMINDER_RETRY_DELAY = 0
    CRON_SECRET = ''
    MAIL_USERNAME = 'mailer@test.local'
    MAIL_PASSWORD = 'secret'
    BCRYPT_LOG_ROUNDS = 4


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config():
    """Get configuration based on FLASK_ENV"""
    env = os.getenv('FLASK_ENV', 'development')
    return config.get(env, config['default'])
