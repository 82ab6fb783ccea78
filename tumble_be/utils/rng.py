import random
import secrets


def build_rng(seed=None):
    """
    Returns the random source used by the round engine.

    Production rounds draw from the OS entropy pool (secrets.SystemRandom).
    A seed gives a reproducible random.Random, intended for simulations and
    local debugging only; the config validator rejects seeds in production.

    Any object exposing random() -> float in [0, 1) and randrange(n) -> int can
    stand in for the returned value.
    """
    if seed is None:
        return secrets.SystemRandom()
    return random.Random(seed)
