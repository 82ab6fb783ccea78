"""
Game Event Logging
Structured audit lines for rounds played through the API
"""

import logging
from datetime import datetime, timezone
from flask import current_app, g, request
import json


class GameEventLogger:
    """Centralized game event logging"""

    @staticmethod
    def _request_context():
        # Safely get request context information
        try:
            request_id = g.get('request_id', 'N/A')
            ip_address = request.remote_addr if request else None
        except RuntimeError:
            # Outside application context
            request_id = 'N/A'
            ip_address = None
        return request_id, ip_address

    @staticmethod
    def log_game_event(event_type: str, bet_amount: float = None, win_amount: float = None,
                       is_bonus: bool = None, details: dict = None):
        """Log round-related events"""
        request_id, ip_address = GameEventLogger._request_context()

        event_data = {
            'event_type': 'game',
            'sub_type': event_type,
            'bet_amount': bet_amount,
            'win_amount': win_amount,
            'is_bonus': is_bonus,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'request_id': request_id,
            'ip_address': ip_address,
            'details': details or {}
        }

        current_app.logger.info(f"GAME_EVENT: {json.dumps(event_data, ensure_ascii=False)}")

    @staticmethod
    def log_validation_event(event_type: str, severity: str = 'medium', details: dict = None):
        """Log rejected or aborted requests"""
        request_id, ip_address = GameEventLogger._request_context()

        event_data = {
            'event_type': 'validation',
            'sub_type': event_type,
            'severity': severity,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'request_id': request_id,
            'ip_address': ip_address,
            'details': details or {}
        }

        level = logging.ERROR if severity == 'high' else logging.WARNING
        current_app.logger.log(level, f"VALIDATION_EVENT: {json.dumps(event_data, ensure_ascii=False)}")
