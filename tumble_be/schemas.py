from marshmallow import Schema, fields, ValidationError, EXCLUDE
from marshmallow.validate import Range

# Upper bound on any monetary amount accepted by the API
MAX_AMOUNT = 10 ** 12

# --- Validators ---
def validate_amount(amount):
    """Validate monetary amounts"""
    if amount < 0:
        raise ValidationError('Amount cannot be negative.')

    if amount > MAX_AMOUNT:
        raise ValidationError('Amount exceeds maximum allowed value.')

    return amount

# --- Request Schemas ---
class SpinRequestSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    balance = fields.Float(
        required=True,
        allow_nan=False,
        validate=[validate_amount]
    )
    bet = fields.Float(
        required=True,
        allow_nan=False,
        validate=[
            validate_amount,
            Range(min=0, min_inclusive=False, error="Bet amount must be greater than zero.")
        ]
    )
    is_bonus = fields.Bool(data_key='isBonus', load_default=False)

# --- Response Schemas ---
class TumbleStepSchema(Schema):
    grid = fields.List(fields.List(fields.String()))
    winners = fields.List(fields.String())
    bomb = fields.Int()
    win = fields.Float()

class RoundResultSchema(Schema):
    grid = fields.List(fields.List(fields.String()))
    total_win = fields.Float(data_key='totalWin')
    tumble_history = fields.List(fields.Nested(TumbleStepSchema), data_key='tumbleHistory')
    bonus_triggered = fields.Bool(data_key='bonusTriggered')
    total_multiplier = fields.Int(data_key='totalMultiplier')
    max_win_reached = fields.Bool(data_key='maxWinReached')
