from flask import Flask, request, jsonify, current_app, g
import uuid
from flask_cors import CORS
from flask_talisman import Talisman
from werkzeug.exceptions import HTTPException as WerkzeugHTTPException # Renamed to avoid conflict
from http import HTTPStatus
import logging
from pythonjsonlogger import jsonlogger
from marshmallow import ValidationError

from .config import Config
from .error_codes import ErrorCodes
from .exceptions import AppException
from .extensions import limiter
from .utils.rng import build_rng
from .routes.spin import spin_bp

# Custom Logging Filter for Request ID
class RequestIdFilter(logging.Filter):
    def filter(self, record):
        try:
            record.request_id = g.get('request_id', 'N/A')
        except RuntimeError:
            # Outside application context (startup, CLI)
            record.request_id = 'N/A'
        return True


def _error_response(request_id, error_code, status_message, details=None, action_button=None):
    return {
        'request_id': request_id,
        'status': False,
        'error_code': error_code,
        'status_message': status_message,
        'details': details if details is not None else {},
        'action_button': action_button
    }


def create_app(config_class=Config):
    """Application factory for the tumble round API."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.json.ensure_ascii = False # Symbols are emoji

    # --- Security Headers with Talisman ---
    csp = {
        'default-src': "'self'",
        'img-src': "'self' data:",
        'connect-src': "'self'",
        'frame-ancestors': "'none'"
    }
    Talisman(app,
             force_https=app.config.get('FORCE_HTTPS', False),
             strict_transport_security=True,
             frame_options='DENY',
             content_security_policy=csp)

    # --- CORS Setup ---
    allowed_origins = []

    # Development origins
    if app.debug:
        allowed_origins.extend([
            "http://localhost:8080",
            "http://127.0.0.1:8080",
        ])

    # Production origins from validated configuration
    allowed_origins.extend(app.config.get('CORS_ORIGINS_LIST') or [])

    if allowed_origins:
        CORS(app,
             origins=allowed_origins,
             methods=['GET', 'POST', 'OPTIONS'],
             allow_headers=['Content-Type'],
             expose_headers=['X-RateLimit-Limit', 'X-RateLimit-Remaining'],
             max_age=86400)
        app.logger.info(f"CORS configured for origins: {allowed_origins}")
    else:
        app.logger.warning("No CORS origins configured - API will reject cross-origin requests")

    # --- Logging Configuration ---
    if not app.debug:
        logger = app.logger
        handler = logging.StreamHandler()
        formatter = jsonlogger.JsonFormatter(
            '%(asctime)s %(levelname)s %(request_id)s %(module)s %(funcName)s %(lineno)d %(message)s'
        )
        handler.setFormatter(formatter)
        handler.addFilter(RequestIdFilter())
        if logger.hasHandlers():
            logger.handlers.clear()
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    else:
        # Basic logging for debug mode if not already configured
        if not app.logger.handlers:
            logging.basicConfig(level=logging.DEBUG)

    # --- Request ID Middleware ---
    @app.before_request
    def assign_request_id():
        g.request_id = str(uuid.uuid4())

    # --- Rate Limiter Setup ---
    if app.config.get("TESTING"):
        app.config['RATELIMIT_ENABLED'] = False
        app.config['RATELIMIT_DEFAULT_LIMITS_ENABLED'] = False
    else:
        app.config.setdefault('RATELIMIT_ENABLED', True)
    limiter.init_app(app) # Relies entirely on app.config values set above

    # --- Round engine random source ---
    seed = app.config.get('ENGINE_RNG_SEED')
    app.extensions['tumble_rng'] = build_rng(seed)
    if seed is not None:
        app.logger.warning(f"ENGINE_RNG_SEED is set ({seed}); rounds are reproducible. Development use only.")

    # --- Error Handlers ---
    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        # Marshmallow's ValidationError, rendered in the common error format
        request_id = g.get('request_id', 'N/A')
        errors = e.normalized_messages() # Always keyed by field, also for bare field-level raises
        current_app.logger.warning(
            f"Request ID: {request_id} - Validation error: {errors} - Error Code: {ErrorCodes.VALIDATION_ERROR}"
        )
        return jsonify(_error_response(
            request_id, ErrorCodes.VALIDATION_ERROR, 'Input validation failed.', {'errors': errors}
        )), HTTPStatus.UNPROCESSABLE_ENTITY

    @app.errorhandler(WerkzeugHTTPException)
    def handle_werkzeug_http_exception(e):
        request_id = g.get('request_id', 'N/A')
        # Determine appropriate error code based on HTTP status
        error_code = ErrorCodes.GENERIC_ERROR # Default
        if e.code == 404:
            error_code = ErrorCodes.NOT_FOUND
        elif e.code == 405:
            error_code = ErrorCodes.METHOD_NOT_ALLOWED
        elif e.code == 429:
            error_code = ErrorCodes.RATE_LIMITED
        elif e.code >= 500:
            error_code = ErrorCodes.INTERNAL_SERVER_ERROR

        current_app.logger.warning(
            f"Request ID: {request_id} - Werkzeug HTTPException: {e.code} - {e.name}: {e.description} - Error Code: {error_code}"
        )
        details = {'description': e.description}
        if e.code == 404:
            details['path'] = request.path

        # Keep the status code and headers (Allow, Retry-After) from Werkzeug's response
        response = e.get_response()
        response.data = jsonify(_error_response(request_id, error_code, e.name, details)).data
        response.content_type = "application/json"
        return response

    # --- Global Error Handler (catch-all for general exceptions) ---
    @app.errorhandler(Exception)
    def handle_global_exception(e):
        request_id = g.get('request_id', 'N/A')

        if isinstance(e, AppException):
            current_app.logger.error(
                f"Request ID: {request_id} - AppException: {e.error_code} - {e.status_message} - Details: {e.details}",
                exc_info=True if e.status_code >= 500 else False # Log stack trace for server errors
            )
            return jsonify(_error_response(
                request_id, e.error_code, e.status_message, e.details, e.action_button
            )), e.status_code

        if isinstance(e, WerkzeugHTTPException):
            return handle_werkzeug_http_exception(e)

        # For other unhandled exceptions
        current_app.logger.critical(
            f"Request ID: {request_id} - Unhandled Critical Exception. Error Code: {ErrorCodes.INTERNAL_SERVER_ERROR}",
            exc_info=True
        )
        return jsonify(_error_response(
            request_id, ErrorCodes.INTERNAL_SERVER_ERROR,
            'An unexpected internal server error occurred. Please try again later.'
        )), HTTPStatus.INTERNAL_SERVER_ERROR

    # --- Response Security Headers ---
    @app.after_request
    def add_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Cache-Control'] = 'no-store'
        return response

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({'status': True}), 200

    # --- Register Blueprints ---
    app.register_blueprint(spin_bp)

    log_production_warnings(app)

    return app


def log_production_warnings(app):
    """Logs warnings for settings that are unsafe outside development."""
    if app.debug or app.config.get('TESTING'):
        return

    if app.config.get('RATELIMIT_STORAGE_URI') == 'memory://':
        app.logger.warning(
            "PERFORMANCE/SCALABILITY WARNING: RATELIMIT_STORAGE_URI is set to 'memory://'. "
            "This is not suitable for multi-process or multi-instance deployments. "
            "Consider using a persistent store like Redis (e.g., 'redis://localhost:6379/0')."
        )

    if not app.config.get('MAX_TUMBLE_STEPS'):
        app.logger.warning(
            "MAX_TUMBLE_STEPS is disabled. A pathological random sequence can keep a round tumbling indefinitely."
        )


# Add main section to run the app
if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=5000, debug=app.debug)
