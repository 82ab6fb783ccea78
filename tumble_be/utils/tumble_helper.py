# tumble_be/utils/tumble_helper.py
"""
Grid primitives for the tumble round engine: symbol draws, grid generation,
cluster counting, payouts, cascade fill and bomb multipliers.

Every function is pure with respect to its inputs (grids are copied, never
mutated in place) and draws randomness only from the `rng` argument.
"""
import logging
import secrets

from .game_tables import DEFAULT_TABLES

logger = logging.getLogger(__name__)

_system_random = secrets.SystemRandom()


def weighted_random(weights, rng=None):
    """
    Draws one key from a {key: weight} mapping, weighted by relative magnitude.

    A uniform value in [0, total) is drawn and each key's weight subtracted in
    mapping order until the remainder is <= 0. Zero-weight keys are never
    returned.

    Args:
        weights (Mapping): Key -> non-negative weight.
        rng: Random source exposing random().

    Returns:
        The selected key.

    Raises:
        ValueError: If no key carries a positive weight.
    """
    rng = rng or _system_random
    total = sum(weights.values())
    if total <= 0:
        raise ValueError("Cannot draw from a weight table with no positive weights.")

    remainder = rng.random() * total
    last_positive_key = None
    for key, weight in weights.items():
        if weight <= 0:
            continue
        last_positive_key = key
        remainder -= weight
        if remainder <= 0:
            return key
    # Floating point fall-through
    return last_positive_key


def generate_symbol(is_bonus, dead, rng=None, tables=DEFAULT_TABLES):
    """Draws one symbol. A dead draw picks uniformly among the low-tier symbols and ignores the weight tables."""
    rng = rng or _system_random
    if dead:
        low_tier = tables.low_tier_symbols
        return low_tier[rng.randrange(len(low_tier))]
    return weighted_random(tables.weights_for(is_bonus), rng)


def generate_grid(is_bonus, dead, rng=None, tables=DEFAULT_TABLES):
    """
    Generates a rows x columns grid, every cell drawn independently.

    Returns:
        list[list[str]]: Row-major grid.
    """
    rng = rng or _system_random
    return [
        [generate_symbol(is_bonus, dead, rng, tables) for _ in range(tables.columns)]
        for _ in range(tables.rows)
    ]


def count_symbols(grid):
    """Counts occurrences of each symbol across the grid. Empty cells (None) are skipped."""
    counts = {}
    for row in grid:
        for symbol in row:
            if symbol is None:
                continue
            counts[symbol] = counts.get(symbol, 0) + 1
    return counts


def find_winners(counts, tables=DEFAULT_TABLES):
    """Symbols whose count reaches the cluster threshold, in first-appearance order."""
    return [symbol for symbol, count in counts.items() if count >= tables.cluster_min_count]


def get_payout(symbol, count, bet, tables=DEFAULT_TABLES):
    """
    Maps a winning symbol and its grid count to a win amount.

    Thresholds are inclusive floors checked highest first (12, 10, 8). Low-tier
    symbols pay a flat share of the bet whatever the count. Symbols without a
    pay table entry (the scatter) pay nothing.

    Args:
        symbol (str): The symbol.
        count (int): Number of occurrences in the grid snapshot.
        bet (float): Wager for the round.
        tables (GameTables): Pay table source.

    Returns:
        float: Win amount, 0 when nothing pays.
    """
    if count < tables.cluster_min_count:
        return 0

    if symbol in tables.low_tier_symbols:
        return bet * tables.low_tier_payout

    symbol_table = tables.paytable.get(symbol)
    if not symbol_table:
        return 0

    for threshold in sorted(symbol_table, reverse=True):
        if count >= threshold:
            return bet * symbol_table[threshold]
    return 0


def remove_winning(grid, winners):
    """Returns a copy of the grid with every winning symbol replaced by None."""
    winners = set(winners)
    return [[None if symbol in winners else symbol for symbol in row] for row in grid]


def tumble(grid, is_bonus, rng=None, tables=DEFAULT_TABLES):
    """
    Drops surviving symbols to the bottom of each column and refills the gaps.

    Expects winning cells to be None already (see remove_winning). Each column
    is handled independently: survivors keep their relative order from the
    bottom up, and vacated cells above them are filled with fresh symbols.
    Refills are never dead draws.

    Args:
        grid (list[list[str | None]]): Grid with cleared cells.
        is_bonus (bool): Selects the weight table for refills.
        rng: Random source.
        tables (GameTables): Table source.

    Returns:
        list[list[str]]: A new, fully occupied grid.
    """
    rng = rng or _system_random
    rows = len(grid)
    new_grid = [row[:] for row in grid]

    for c_idx in range(len(grid[0]) if rows else 0):
        survivors = [grid[r_idx][c_idx] for r_idx in range(rows - 1, -1, -1) if grid[r_idx][c_idx] is not None]
        refilled = 0
        for offset, r_idx in enumerate(range(rows - 1, -1, -1)):
            if offset < len(survivors):
                new_grid[r_idx][c_idx] = survivors[offset]
            else:
                new_grid[r_idx][c_idx] = generate_symbol(is_bonus, False, rng, tables)
                refilled += 1
        if refilled:
            logger.debug(f"Column {c_idx}: {len(survivors)} survivors, {refilled} refilled.")

    return new_grid


def roll_bomb(rng=None, tables=DEFAULT_TABLES):
    """Draws a bomb multiplier value from the bomb weight table."""
    return int(weighted_random(tables.bomb_weights, rng))


def maybe_roll_bomb(is_bonus, rng=None, tables=DEFAULT_TABLES):
    """
    Rolls for a bomb on a winning tumble step.

    Returns:
        int: The bomb value, or 0 outside bonus mode or when the chance roll misses.
    """
    if not is_bonus:
        return 0
    rng = rng or _system_random
    if rng.random() < tables.bomb_chance:
        return roll_bomb(rng, tables)
    return 0
