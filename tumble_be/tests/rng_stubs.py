"""Deterministic random sources for engine tests."""
import itertools

from tumble_be.utils.game_tables import ITEMS_NORMAL, ITEMS_BONUS


def _midpoints(weights):
    # One value per positive-weight key that lands squarely inside that key's band
    total = sum(weights.values())
    values = []
    cumulative = 0
    for weight in weights.values():
        if weight <= 0:
            continue
        values.append((cumulative + weight / 2) / total)
        cumulative += weight
    return values


# random() values drawing each symbol once, in table order (zero-weight scatter skipped in bonus)
NORMAL_SYMBOL_CYCLE = _midpoints(ITEMS_NORMAL)
BONUS_SYMBOL_CYCLE = _midpoints(ITEMS_BONUS)


class ScriptedRandom:
    """
    Replays a fixed prefix of random() values, then repeats a cycle forever.

    randrange(n) consumes one random() value.
    """

    def __init__(self, prefix=(), cycle=(0.0,)):
        self._values = itertools.chain(prefix, itertools.cycle(cycle))
        self.calls = 0

    def random(self):
        self.calls += 1
        return next(self._values)

    def randrange(self, n):
        return int(self.random() * n)
