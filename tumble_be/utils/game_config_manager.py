"""
Game Configuration Manager
Builds the client-facing view of the game tables
"""

from typing import Dict, Any

from .game_tables import DEFAULT_TABLES, GameTables, FREE_SPINS_AWARDED, BONUS_BUY_COST_MULTIPLIER


class GameConfigManager:
    """Serves read-only game configuration to clients"""

    # Built once at import; only the default tables are served over HTTP
    _default_client_config = None

    @classmethod
    def get_client_config(cls, tables: GameTables = DEFAULT_TABLES) -> Dict[str, Any]:
        """
        Get sanitized configuration for client-side use.
        Pay table and layout are public; symbol weights and volatility levers are not.
        Custom tables are built on every call and never cached.
        """
        if tables is not DEFAULT_TABLES:
            return cls._build_client_config(tables)
        # Callers get their own copy so the cached dict stays untouched
        return cls._copy_config(cls._default_client_config)

    @classmethod
    def _build_client_config(cls, tables: GameTables) -> Dict[str, Any]:
        paytable = {
            symbol: {str(threshold): multiple for threshold, multiple in sorted(thresholds.items())}
            for symbol, thresholds in tables.paytable.items()
        }
        return {
            "game": {
                "layout": {
                    "rows": tables.rows,
                    "columns": tables.columns,
                },
                "symbols": list(tables.symbols),
                "low_tier_symbols": list(tables.low_tier_symbols),
                "low_tier_payout": tables.low_tier_payout,
                "scatter_symbol": tables.scatter_symbol,
                "scatter_trigger_count": tables.scatter_trigger_count,
                "min_symbols_to_match": tables.cluster_min_count,
                "paytable": paytable,
                "bomb_values": sorted(tables.bomb_weights.keys()),
                "max_payout_multiplier": tables.max_payout_multiplier,
                "bonus_features": {
                    "free_spins": {
                        "spins_awarded": FREE_SPINS_AWARDED,
                        "buy_cost_multiplier": BONUS_BUY_COST_MULTIPLIER,
                    }
                },
            }
        }

    @staticmethod
    def _copy_config(config):
        if isinstance(config, dict):
            return {k: GameConfigManager._copy_config(v) for k, v in config.items()}
        if isinstance(config, list):
            return [GameConfigManager._copy_config(v) for v in config]
        return config


GameConfigManager._default_client_config = GameConfigManager._build_client_config(DEFAULT_TABLES)
