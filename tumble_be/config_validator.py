"""
Configuration validation and startup checks.

This module implements fail-fast validation so that a production deployment
never starts with development settings such as an in-memory rate limiter,
debug mode, or a deterministic RNG seed.
"""

import os
import sys
import warnings
from typing import List, Optional


class ConfigValidationError(Exception):
    """Raised when critical configuration is missing or invalid."""
    pass


def _env_flag(var_name: str, default: str) -> bool:
    return os.getenv(var_name, default).lower() in ('true', '1', 't')


class ConfigValidator:
    """Validates application configuration and enforces production safety."""

    DEFAULT_MAX_TUMBLE_STEPS = 1000
    DEFAULT_SPIN_RATE_LIMIT = "30 per minute"

    def __init__(self, is_production: bool = None):
        """
        Initialize the configuration validator.

        Args:
            is_production: If None, auto-detect from FLASK_ENV
        """
        if is_production is None:
            is_production = os.getenv('FLASK_ENV', '').lower() == 'production'

        self.is_production = is_production
        self.is_testing = _env_flag('TESTING', 'False')
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate_rate_limiting_config(self) -> str:
        """Validate rate limiting configuration."""
        rate_limit_uri = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')

        if rate_limit_uri == 'memory://' and self.is_production:
            self.errors.append(
                "CRITICAL: Rate limiting uses memory:// storage in production. "
                "This is not suitable for multi-process deployments. "
                "Set RATELIMIT_STORAGE_URI to a Redis URL (e.g., redis://localhost:6379/0)"
            )
        elif rate_limit_uri == 'memory://' and not self.is_production and not self.is_testing:
            self.warnings.append(
                "Rate limiting uses memory:// storage in development. "
                "Consider using Redis for production."
            )

        return rate_limit_uri

    def validate_spin_rate_limit(self) -> str:
        """Validate the flask-limiter string applied to the spin endpoint."""
        spin_limit = os.getenv('SPIN_RATE_LIMIT', self.DEFAULT_SPIN_RATE_LIMIT).strip()
        if not spin_limit or (' per ' not in spin_limit and '/' not in spin_limit):
            self.errors.append(f"SPIN_RATE_LIMIT '{spin_limit}' is not a valid rate limit (e.g. '30 per minute')")
            return self.DEFAULT_SPIN_RATE_LIMIT
        return spin_limit

    def validate_cors_config(self) -> List[str]:
        """Validate CORS configuration."""
        cors_origins = os.getenv('CORS_ORIGINS', '')

        if not cors_origins and self.is_production:
            self.errors.append(
                "CRITICAL: CORS_ORIGINS must be set in production to specify allowed frontend domains"
            )
            return []

        if cors_origins:
            origins = [origin.strip() for origin in cors_origins.split(',') if origin.strip()]
            # Validate origin formats
            for origin in origins:
                if not origin.startswith(('http://', 'https://')):
                    self.warnings.append(f"CORS origin '{origin}' should include protocol (http:// or https://)")
            return origins

        return []

    def validate_engine_config(self):
        """Validate round engine settings. Returns (max_tumble_steps, rng_seed)."""
        raw_max_steps = os.getenv('MAX_TUMBLE_STEPS', str(self.DEFAULT_MAX_TUMBLE_STEPS))
        try:
            max_tumble_steps = int(raw_max_steps)
        except ValueError:
            raise ConfigValidationError(f"MAX_TUMBLE_STEPS must be an integer, got '{raw_max_steps}'")
        if max_tumble_steps < 0:
            raise ConfigValidationError("MAX_TUMBLE_STEPS must be zero (unbounded) or a positive integer")
        if max_tumble_steps == 0:
            self.warnings.append("MAX_TUMBLE_STEPS is 0 - tumble loop is unbounded")

        rng_seed: Optional[int] = None
        raw_seed = os.getenv('ENGINE_RNG_SEED')
        if raw_seed:
            if self.is_production:
                self.errors.append("CRITICAL: ENGINE_RNG_SEED must not be set in production (rounds would be predictable)")
            else:
                try:
                    rng_seed = int(raw_seed)
                except ValueError:
                    raise ConfigValidationError(f"ENGINE_RNG_SEED must be an integer, got '{raw_seed}'")
                self.warnings.append(f"ENGINE_RNG_SEED={rng_seed} - rounds are deterministic (development only)")

        return max_tumble_steps, rng_seed

    def validate_all(self) -> dict:
        """
        Validate all configuration settings.

        Returns:
            Dictionary containing validated configuration values

        Raises:
            ConfigValidationError: If critical configuration is missing in production
        """
        config = {}

        try:
            config['RATELIMIT_STORAGE_URI'] = self.validate_rate_limiting_config()
            config['SPIN_RATE_LIMIT'] = self.validate_spin_rate_limit()
            config['CORS_ORIGINS'] = self.validate_cors_config()
            config['MAX_TUMBLE_STEPS'], config['ENGINE_RNG_SEED'] = self.validate_engine_config()

            # Additional configuration
            config['DEBUG'] = _env_flag('FLASK_DEBUG', 'False')
            config['FORCE_HTTPS'] = _env_flag('FORCE_HTTPS', 'True' if self.is_production else 'False')

            # Production-specific validations
            if self.is_production:
                if config['DEBUG']:
                    self.errors.append("CRITICAL: DEBUG mode must be disabled in production (set FLASK_DEBUG=False)")

            # Check for critical errors
            if self.errors:
                error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in self.errors)
                if self.warnings:
                    error_msg += "\n\nWarnings:\n" + "\n".join(f"  - {warning}" for warning in self.warnings)
                raise ConfigValidationError(error_msg)

            # Log warnings if any
            if self.warnings:
                for warning in self.warnings:
                    warnings.warn(warning, UserWarning)

            return config

        except Exception as e:
            if isinstance(e, ConfigValidationError):
                raise
            else:
                raise ConfigValidationError(f"Configuration validation error: {str(e)}") from e


def validate_production_config() -> dict:
    """
    Validate configuration with fail-fast behavior.

    Returns:
        Dictionary of validated configuration values

    Raises:
        SystemExit: If validation fails during startup
    """
    try:
        validator = ConfigValidator()
        return validator.validate_all()
    except ConfigValidationError as e:
        print("\nCONFIGURATION VALIDATION FAILED\n", file=sys.stderr)
        print(str(e), file=sys.stderr)
        print("\nHow to fix:", file=sys.stderr)
        print("1. Set required environment variables (CORS_ORIGINS, RATELIMIT_STORAGE_URI)", file=sys.stderr)
        print("2. Unset ENGINE_RNG_SEED and FLASK_DEBUG in production", file=sys.stderr)
        print("\nApplication startup ABORTED\n", file=sys.stderr)

        # Exit with error code to prevent unsafe startup
        sys.exit(1)
