"""
Configuration module with fail-fast validation.

All configuration values are validated at startup. Production environments
(FLASK_ENV=production) must provide every required environment variable.
"""
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from .config_validator import validate_production_config

class Config:
    """Production-ready configuration with fail-fast validation."""

    # Validate configuration and get safe values
    _validated_config = validate_production_config()

    # Flask Debug Mode - Validated and secure
    DEBUG = _validated_config['DEBUG']
    TESTING = False

    # Security Headers (flask-talisman)
    FORCE_HTTPS = _validated_config['FORCE_HTTPS']

    # CORS Configuration - Validated for production
    CORS_ORIGINS_LIST = _validated_config['CORS_ORIGINS']

    # Rate Limiter Storage URI - Validated for production
    RATELIMIT_STORAGE_URI = _validated_config['RATELIMIT_STORAGE_URI']
    SPIN_RATE_LIMIT = _validated_config['SPIN_RATE_LIMIT']

    # Round engine
    MAX_TUMBLE_STEPS = _validated_config['MAX_TUMBLE_STEPS'] # 0 disables the bound
    ENGINE_RNG_SEED = _validated_config['ENGINE_RNG_SEED'] # Development only


class TestingConfig(Config):
    TESTING = True
    DEBUG = False
    FORCE_HTTPS = False
    # Disable rate limiting for tests
    RATELIMIT_ENABLED = False
    RATELIMIT_DEFAULT_LIMITS_ENABLED = False
    RATELIMIT_STORAGE_URI = 'memory://'
    CORS_ORIGINS_LIST = []
    MAX_TUMBLE_STEPS = 1000
    ENGINE_RNG_SEED = None
