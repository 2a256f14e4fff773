"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv
from . import game_settings

# Load environment variables from config.env next to this module
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    TESTING = False

    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 5000))

    # Storage Settings ("memory", "file" or "mongo")
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'file')
    STORAGE_DIR = os.getenv('STORAGE_DIR', 'data/players')
    MONGO_URI = os.getenv('MONGO_URI')
    MONGO_DB = os.getenv('MONGO_DB', 'sunsar')

    # Word Provider Settings
    GEMINI_API_KEY = os.getenv('GEMINI_API_KEY', os.getenv('API_KEY'))
    LLM_MODEL = os.getenv('LLM_MODEL', 'gemini/gemini-2.5-flash')
    LLM_TIMEOUT_SECONDS = float(os.getenv('LLM_TIMEOUT_SECONDS', 10))

    # Puzzle Settings
    REFERENCE_TIMEZONE = os.getenv('REFERENCE_TIMEZONE', game_settings.REFERENCE_TIMEZONE)
    ROLLOVER_HOUR = int(os.getenv('ROLLOVER_HOUR', game_settings.ROLLOVER_HOUR))
    MAX_ATTEMPTS = int(os.getenv('MAX_ATTEMPTS', game_settings.MAX_ATTEMPTS))
    VALIDATE_WORDS = os.getenv('VALIDATE_WORDS', 'False').lower() == 'true'
    REJECT_DUPLICATE_GUESSES = os.getenv('REJECT_DUPLICATE_GUESSES', 'True').lower() == 'true'
    COUNTDOWN_INTERVAL_SECONDS = float(os.getenv('COUNTDOWN_INTERVAL_SECONDS', 1))
    SESSION_CLEANUP_INTERVAL_SECONDS = float(os.getenv('SESSION_CLEANUP_INTERVAL_SECONDS', 300))
    SHARE_TITLE = os.getenv('SHARE_TITLE', 'SunSar')

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    STORAGE_BACKEND = 'memory'
    GEMINI_API_KEY = None


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
