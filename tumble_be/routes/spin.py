from flask import Blueprint, request, jsonify, current_app

from ..extensions import limiter
from ..schemas import SpinRequestSchema, RoundResultSchema
from ..utils.spin_handler import handle_spin
from ..utils.game_config_manager import GameConfigManager
from ..utils.game_logger import GameEventLogger
from ..exceptions import ValidationException, RoundAbortedException
from ..error_codes import ErrorCodes

spin_bp = Blueprint('spin', __name__, url_prefix='/api/spin')


def _spin_rate_limit():
    return current_app.config.get('SPIN_RATE_LIMIT', '30 per minute')


@spin_bp.route('/config', methods=['GET'])
def get_game_config():
    """
    Get sanitized game configuration for client-side use:
    layout, symbols and pay table. Weights are server-side only.
    """
    return jsonify({
        'status': True,
        'config': GameConfigManager.get_client_config()
    }), 200


@spin_bp.route('', methods=['POST'])
@spin_bp.route('/', methods=['POST'])
@limiter.limit(_spin_rate_limit)
def spin():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationException("Invalid request format: body must be a JSON object.")

    # Marshmallow errors handled by the app-level ValidationError handler
    params = SpinRequestSchema().load(data)

    balance = params['balance']
    bet = params['bet']
    is_bonus = params['is_bonus']

    max_steps = current_app.config.get('MAX_TUMBLE_STEPS') or None
    rng = current_app.extensions.get('tumble_rng')

    try:
        round_result = handle_spin(balance, bet, is_bonus=is_bonus, rng=rng, max_tumble_steps=max_steps)
    except ValueError as ve: # Validation errors from the engine
        GameEventLogger.log_validation_event(
            event_type='spin_validation_error',
            details={'bet': bet, 'balance': balance, 'error': str(ve)}
        )
        raise ValidationException(str(ve), error_code=ErrorCodes.INVALID_BET)
    except RoundAbortedException as rae:
        GameEventLogger.log_validation_event(
            event_type='round_aborted',
            severity='high',
            details={'bet': bet, 'is_bonus': is_bonus, **rae.details}
        )
        raise # Global handler renders it

    GameEventLogger.log_game_event(
        event_type='round_played',
        bet_amount=bet,
        win_amount=round_result['total_win'],
        is_bonus=is_bonus,
        details={
            'tumbles': len(round_result['tumble_history']),
            'total_multiplier': round_result['total_multiplier'],
            'bonus_triggered': round_result['bonus_triggered'],
            'max_win_reached': round_result['max_win_reached'],
        }
    )

    response = RoundResultSchema().dump(round_result)
    response['status'] = True
    return jsonify(response), 200
