# tumble_be/utils/game_tables.py

from types import MappingProxyType

# --- Symbols ---
APPLE = "🍎"
GRAPES = "🍇"
WATERMELON = "🍉"
PEACH = "🍑"
CHERRIES = "🍒"
CANDY = "🍬"
LOLLIPOP = "🍭"  # Scatter, only used for the bonus trigger
BANANA = "🍌"
LEMON = "🍋"
PINEAPPLE = "🍍"

ALL_SYMBOLS = (APPLE, GRAPES, WATERMELON, PEACH, CHERRIES, CANDY, LOLLIPOP, BANANA, LEMON, PINEAPPLE)
LOW_TIER_SYMBOLS = (BANANA, LEMON, PINEAPPLE)
SCATTER_SYMBOL = LOLLIPOP

# --- Layout and limits ---
GRID_COLUMNS = 6
GRID_ROWS = 5
CLUSTER_MIN_COUNT = 8
MAX_PAYOUT_MULTIPLIER = 21000
LOW_TIER_PAYOUT_MULTIPLIER = 0.2
SCATTER_TRIGGER_COUNT = 4
BOMB_CHANCE = 0.4

# Client-side bonus round constants, exposed read-only via the config endpoint
FREE_SPINS_AWARDED = 10
BONUS_BUY_COST_MULTIPLIER = 100

# --- Weight tables ---
ITEMS_NORMAL = MappingProxyType({
    APPLE: 12, GRAPES: 15, WATERMELON: 15, PEACH: 16, CHERRIES: 17,
    CANDY: 11, LOLLIPOP: 2, BANANA: 3, LEMON: 3, PINEAPPLE: 3,
})

# Scatter weight is zero: scatters never land during a bonus round.
ITEMS_BONUS = MappingProxyType({
    APPLE: 22, GRAPES: 24, WATERMELON: 24, PEACH: 24, CHERRIES: 25,
    CANDY: 16, LOLLIPOP: 0, BANANA: 2, LEMON: 4, PINEAPPLE: 2,
})

# --- Pay table: symbol -> {count threshold: bet multiple} ---
PAYTABLE = MappingProxyType({
    CANDY: MappingProxyType({8: 4, 10: 10, 12: 20}),
    APPLE: MappingProxyType({8: 1.5, 10: 5, 12: 10}),
    GRAPES: MappingProxyType({8: 0.8, 10: 4, 12: 8}),
    WATERMELON: MappingProxyType({8: 0.5, 10: 3, 12: 5}),
    PEACH: MappingProxyType({8: 0.4, 10: 2, 12: 4}),
    CHERRIES: MappingProxyType({8: 0.25, 10: 1, 12: 2}),
})

# --- Bomb multiplier values -> weights ---
BOMB_WEIGHTS = MappingProxyType({2: 400, 5: 250, 10: 120, 25: 40, 50: 8, 100: 2})

# --- Volatility levers (balance / bet ratio -> dead spin probability) ---
HIGH_BANKROLL_RATIO = 1000
LOW_BANKROLL_RATIO = 50
HIGH_BANKROLL_DEAD_SPIN_CHANCE = 0.38
LOW_BANKROLL_DEAD_SPIN_CHANCE = 0.07
DEFAULT_DEAD_SPIN_CHANCE = 0.18


class GameTables:
    """
    Read-only bundle of every table and constant the round engine consults.

    Engine functions receive an instance of this class instead of reaching for
    module globals, so alternative tables (tests, simulations) can be passed in.
    All mappings are wrapped in MappingProxyType and must not be mutated.
    """

    def __init__(self, normal_weights=ITEMS_NORMAL, bonus_weights=ITEMS_BONUS, paytable=PAYTABLE,
                 bomb_weights=BOMB_WEIGHTS, low_tier_symbols=LOW_TIER_SYMBOLS, scatter_symbol=SCATTER_SYMBOL,
                 rows=GRID_ROWS, columns=GRID_COLUMNS, cluster_min_count=CLUSTER_MIN_COUNT,
                 max_payout_multiplier=MAX_PAYOUT_MULTIPLIER, low_tier_payout=LOW_TIER_PAYOUT_MULTIPLIER,
                 scatter_trigger_count=SCATTER_TRIGGER_COUNT, bomb_chance=BOMB_CHANCE):
        self.normal_weights = MappingProxyType(dict(normal_weights))
        self.bonus_weights = MappingProxyType(dict(bonus_weights))
        self.paytable = MappingProxyType({s: MappingProxyType(dict(t)) for s, t in paytable.items()})
        self.bomb_weights = MappingProxyType(dict(bomb_weights))
        self.low_tier_symbols = tuple(low_tier_symbols)
        self.scatter_symbol = scatter_symbol
        self.rows = rows
        self.columns = columns
        self.cluster_min_count = cluster_min_count
        self.max_payout_multiplier = max_payout_multiplier
        self.low_tier_payout = low_tier_payout
        self.scatter_trigger_count = scatter_trigger_count
        self.bomb_chance = bomb_chance

    def weights_for(self, is_bonus):
        return self.bonus_weights if is_bonus else self.normal_weights

    @property
    def symbols(self):
        return tuple(self.normal_weights.keys())

    def __repr__(self):
        return f"<GameTables {self.columns}x{self.rows} symbols={len(self.normal_weights)} cap={self.max_payout_multiplier}x>"


DEFAULT_TABLES = GameTables()
