"""
Flask application configuration classes.
Provides configuration for development, production, and testing environments.
"""

import os

class Config:
    """Base configuration class with common settings."""

    # Secret key (Flask internals; the API itself is stateless)
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database configuration
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or 'instance/shareit.db'

    # Caller identity is forwarded by the edge tier in this header
    USER_ID_HEADER = os.environ.get('USER_ID_HEADER') or 'X-Sharer-User-Id'

    # Timezone used to capture "now" for booking classification
    TIMEZONE = os.environ.get('TIMEZONE') or 'Europe/Moscow'

    # Application settings
    APP_NAME = 'ShareIt'
    APP_VERSION = '1.0.0'

class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    TESTING = False

class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    TESTING = False

    SECRET_KEY = os.environ.get('SECRET_KEY') or Config.SECRET_KEY
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or Config.DATABASE_PATH

    @classmethod
    def validate(cls) -> None:
        """Validate that required production environment variables are set."""
        secret_key = os.environ.get('SECRET_KEY')
        if not secret_key:
            raise ValueError("SECRET_KEY environment variable must be set in production")
        if len(secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters in production")
        if not os.environ.get('DATABASE_PATH'):
            raise ValueError("DATABASE_PATH environment variable must be set in production")

class TestConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    DEBUG = True
    DATABASE_PATH = os.environ.get('DATABASE_PATH', 'instance/shareit_test.db')
    SECRET_KEY = 'test-secret-key'

# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'test': TestConfig,
    'default': DevelopmentConfig
}
