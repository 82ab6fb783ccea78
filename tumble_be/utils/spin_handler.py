# tumble_be/utils/spin_handler.py
import logging
import math
import secrets

from ..exceptions import RoundAbortedException
from .game_tables import (
    DEFAULT_TABLES,
    HIGH_BANKROLL_RATIO, LOW_BANKROLL_RATIO,
    HIGH_BANKROLL_DEAD_SPIN_CHANCE, LOW_BANKROLL_DEAD_SPIN_CHANCE, DEFAULT_DEAD_SPIN_CHANCE,
)
from .tumble_helper import (
    generate_grid, count_symbols, find_winners, get_payout,
    remove_winning, tumble, maybe_roll_bomb,
)

logger = logging.getLogger(__name__)


# --- Helper Functions for handle_spin ---

def validate_spin_params(balance, bet):
    """
    Validates the wager and balance supplied by the caller.

    Args:
        balance (int | float): The player's balance.
        bet (int | float): The wager for this round.

    Raises:
        ValueError: If either value is missing, non-numeric, non-finite, or out of range.
    """
    for name, value in (("bet", bet), ("balance", balance)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Invalid {name}. Must be a number.")
        if not math.isfinite(value):
            raise ValueError(f"Invalid {name}. Must be a finite number.")
    if bet <= 0:
        raise ValueError("Invalid bet amount. Must be greater than zero.")
    if balance < 0:
        raise ValueError("Invalid balance. Must not be negative.")


def get_volatility(balance, bet):
    """
    Picks the dead spin probability from the balance-to-bet ratio.

    Large bankrolls relative to the bet see more dead spins, small ones fewer.

    Returns:
        float: Probability in (0, 1).
    """
    ratio = balance / bet
    if ratio > HIGH_BANKROLL_RATIO:
        return HIGH_BANKROLL_DEAD_SPIN_CHANCE
    if ratio < LOW_BANKROLL_RATIO:
        return LOW_BANKROLL_DEAD_SPIN_CHANCE
    return DEFAULT_DEAD_SPIN_CHANCE


def is_dead_spin(probability, rng):
    """Single Bernoulli draw deciding whether the initial grid is low-tier only."""
    return rng.random() < probability


def _resolve_tumble_step(grid, bet, is_bonus, total_multiplier, rng, tables):
    """
    Resolves one RESOLVING state on a grid snapshot.

    Returns:
        tuple: (step, total_multiplier). step is None when the grid holds no
               winners; otherwise a dict with the pre-cascade grid, winners,
               bomb value and multiplied win for this step.
    """
    counts = count_symbols(grid)
    winners = find_winners(counts, tables)
    if not winners:
        return None, total_multiplier

    raw_win = sum(get_payout(symbol, counts[symbol], bet, tables) for symbol in winners)

    bomb = maybe_roll_bomb(is_bonus, rng, tables)
    if bomb:
        total_multiplier += bomb

    step = {
        "grid": [row[:] for row in grid],
        "winners": winners,
        "bomb": bomb,
        "win": raw_win * total_multiplier,
    }
    return step, total_multiplier


def _check_bonus_trigger(grid, is_bonus, tables):
    """Counts scatters on the final grid. Bonus rounds cannot retrigger."""
    if is_bonus:
        return False
    scatter_count = count_symbols(grid).get(tables.scatter_symbol, 0)
    return scatter_count >= tables.scatter_trigger_count


def resolve_round(initial_grid, bet, is_bonus=False, rng=None, tables=DEFAULT_TABLES, max_tumble_steps=None):
    """
    Runs the resolve / cascade loop from a given grid until no winners remain.

    Args:
        initial_grid (list[list[str]]): Fully occupied starting grid.
        bet (float): Wager for the round.
        is_bonus (bool): Bonus mode (bomb multipliers, bonus refill weights).
        rng: Random source for refills and bombs.
        tables (GameTables): Table source.
        max_tumble_steps (int | None): Optional bound on winning steps. None or 0 means unbounded.

    Returns:
        dict: Round result (grid, total_win, tumble_history, bonus_triggered,
              total_multiplier, max_win_reached).

    Raises:
        RoundAbortedException: If max_tumble_steps is exceeded.
    """
    rng = rng or secrets.SystemRandom()
    grid = [row[:] for row in initial_grid]
    total_win = 0
    total_multiplier = 1
    history = []

    while True:
        step, total_multiplier = _resolve_tumble_step(grid, bet, is_bonus, total_multiplier, rng, tables)
        if step is None:
            break

        if max_tumble_steps and len(history) >= max_tumble_steps:
            logger.warning(
                f"Round aborted after {len(history)} tumble steps (limit {max_tumble_steps}). "
                f"Bet: {bet}, bonus: {is_bonus}, uncapped win so far: {total_win}"
            )
            raise RoundAbortedException(details={
                "max_tumble_steps": max_tumble_steps,
                "steps_resolved": len(history),
            })

        total_win += step["win"]
        history.append(step)
        logger.debug(
            f"Tumble step {len(history)}: winners={step['winners']} bomb={step['bomb']} "
            f"multiplier={total_multiplier} win={step['win']}"
        )
        grid = tumble(remove_winning(grid, step["winners"]), is_bonus, rng, tables)

    max_win = bet * tables.max_payout_multiplier
    max_win_reached = total_win > max_win
    total_win = min(total_win, max_win)

    return {
        "grid": grid,
        "total_win": total_win,
        "tumble_history": history,
        "bonus_triggered": _check_bonus_trigger(grid, is_bonus, tables),
        "total_multiplier": total_multiplier,
        "max_win_reached": max_win_reached,
    }


# --- Main Spin Handler ---
def handle_spin(balance, bet, is_bonus=False, rng=None, tables=DEFAULT_TABLES, max_tumble_steps=None):
    """
    Plays one complete round: volatility decision, initial grid, tumbles, cap and bonus trigger.

    The engine is stateless: balance is only read to pick the volatility level
    and is never debited or credited here.

    Args:
        balance (int | float): Player balance supplied by the caller.
        bet (int | float): Wager for the round.
        is_bonus (bool): True while the player is in a bonus (free spins) round.
        rng: Random source; defaults to secrets.SystemRandom().
        tables (GameTables): Table source.
        max_tumble_steps (int | None): Optional safety bound, see resolve_round.

    Returns:
        dict: Round result, see resolve_round.

    Raises:
        ValueError: If bet or balance is invalid.
        RoundAbortedException: If the tumble step bound is exceeded.
    """
    validate_spin_params(balance, bet)
    rng = rng or secrets.SystemRandom()

    dead = is_dead_spin(get_volatility(balance, bet), rng)
    initial_grid = generate_grid(is_bonus, dead, rng, tables)

    result = resolve_round(initial_grid, bet, is_bonus, rng, tables, max_tumble_steps)
    logger.info(
        f"Round complete. Bet: {bet}, bonus: {is_bonus}, dead spin: {dead}, "
        f"tumbles: {len(result['tumble_history'])}, total win: {result['total_win']}, "
        f"multiplier: {result['total_multiplier']}, bonus triggered: {result['bonus_triggered']}"
    )
    return result
