import logging

import numpy as np

from .game_tables import DEFAULT_TABLES
from .rng import build_rng
from .spin_handler import handle_spin

logger = logging.getLogger(__name__)


class SlotTester:
    """
    Monte Carlo harness for the tumble round engine.

    Plays num_spins independent rounds at a fixed bet and balance and collects
    RTP, hit frequency, bonus trigger frequency and win distribution figures.
    The balance is never debited: each round sees the same bankroll, so the
    volatility level stays fixed for the whole run.
    """

    # Upper edges (in bet multiples) of the win distribution buckets
    WIN_BUCKETS = (0.5, 1, 2, 5, 10, 50, 100, 1000)

    def __init__(self, num_spins, bet_amount, balance, is_bonus=False, seed=None, tables=DEFAULT_TABLES,
                 max_tumble_steps=None):
        self.num_spins = num_spins
        self.bet_amount = bet_amount
        self.balance = balance
        self.is_bonus = is_bonus
        self.seed = seed
        self.tables = tables
        self.max_tumble_steps = max_tumble_steps
        self.rng = build_rng(seed)

        # Statistics to be collected
        self.total_bet = 0
        self.total_win = 0
        self.hit_count = 0
        self.bonus_triggers = 0
        self.max_win_hits = 0
        self.total_tumbles = 0
        self.bomb_count = 0
        self.max_win = 0
        self.win_multiples = []
        self.wins_by_multiplier = {}
        self.rtp_over_time = []

        # Derived statistics
        self.overall_rtp = 0
        self.hit_frequency = 0
        self.bonus_frequency = 0
        self.avg_tumbles = 0
        self.volatility_index = 0

    def run_simulation(self, progress_every=None):
        logger.info(
            f"Starting simulation: {self.num_spins} rounds at bet {self.bet_amount}, "
            f"balance {self.balance}, bonus mode {self.is_bonus}, seed {self.seed}"
        )
        for i in range(self.num_spins):
            round_result = handle_spin(
                self.balance, self.bet_amount, is_bonus=self.is_bonus, rng=self.rng,
                tables=self.tables, max_tumble_steps=self.max_tumble_steps
            )
            self._collect_spin_statistics(round_result)
            if progress_every and (i + 1) % progress_every == 0:
                self.rtp_over_time.append({'spin_count': i + 1, 'rtp': self.total_win / self.total_bet * 100})
                logger.info(f"Completed {i + 1}/{self.num_spins} rounds...")
        self.calculate_derived_statistics()
        return self.summary()

    def _collect_spin_statistics(self, round_result):
        win = round_result['total_win']
        self.total_bet += self.bet_amount
        self.total_win += win
        self.total_tumbles += len(round_result['tumble_history'])
        self.bomb_count += sum(1 for step in round_result['tumble_history'] if step['bomb'])

        if win > 0:
            self.hit_count += 1
        if round_result['bonus_triggered']:
            self.bonus_triggers += 1
        if round_result['max_win_reached']:
            self.max_win_hits += 1
        self.max_win = max(self.max_win, win)

        multiple = win / self.bet_amount
        self.win_multiples.append(multiple)
        if win > 0:
            bucket = self._bucket_label(multiple)
            self.wins_by_multiplier[bucket] = self.wins_by_multiplier.get(bucket, 0) + 1

    def _bucket_label(self, multiple):
        lower = 0
        for upper in self.WIN_BUCKETS:
            if multiple < upper:
                return f"{lower}-{upper}x"
            lower = upper
        return f"{lower}x+"

    def calculate_derived_statistics(self):
        if self.num_spins <= 0 or self.total_bet <= 0:
            return
        self.overall_rtp = self.total_win / self.total_bet * 100
        self.hit_frequency = self.hit_count / self.num_spins * 100
        self.bonus_frequency = self.bonus_triggers / self.num_spins * 100
        self.avg_tumbles = self.total_tumbles / self.num_spins
        # Volatility index: standard deviation of the per-round win in bet multiples
        self.volatility_index = float(np.std(np.asarray(self.win_multiples, dtype=float)))

    def summary(self):
        return {
            'num_spins': self.num_spins,
            'bet_amount': self.bet_amount,
            'balance': self.balance,
            'is_bonus': self.is_bonus,
            'total_bet': self.total_bet,
            'total_win': self.total_win,
            'rtp_percent': self.overall_rtp,
            'hit_frequency_percent': self.hit_frequency,
            'bonus_frequency_percent': self.bonus_frequency,
            'bonus_triggers': self.bonus_triggers,
            'max_win': self.max_win,
            'max_win_hits': self.max_win_hits,
            'avg_tumbles': self.avg_tumbles,
            'bomb_count': self.bomb_count,
            'volatility_index': self.volatility_index,
            'wins_by_multiplier': dict(self.wins_by_multiplier),
            'rtp_over_time': list(self.rtp_over_time),
        }

    def format_summary(self):
        mode = "bonus" if self.is_bonus else "base"
        lines = [
            "--- Tumble Slot Simulation Summary ---",
            f"Rounds Simulated: {self.num_spins} ({mode} game)",
            f"Bet Per Round: {self.bet_amount} (balance {self.balance})",
            f"Total Wagered: {self.total_bet:.2f}",
            f"Total Won: {self.total_win:.2f}",
            f"Overall RTP: {self.overall_rtp:.2f}%",
            f"Hit Frequency: {self.hit_frequency:.2f}% ({self.hit_count} wins out of {self.num_spins} rounds)",
            f"Bonus Trigger Frequency: {self.bonus_frequency:.2f}% ({self.bonus_triggers} triggers)",
            f"Max Win: {self.max_win:.2f} ({self.max_win_hits} rounds hit the cap)",
            f"Average Tumbles Per Round: {self.avg_tumbles:.3f}",
            f"Bombs Landed: {self.bomb_count}",
            f"Volatility Index (Win StdDev / Bet): {self.volatility_index:.3f}",
            "Win Distribution (by bet multiple):",
        ]
        for bucket, count in sorted(self.wins_by_multiplier.items(), key=lambda item: float(item[0].split('-')[0].rstrip('x+'))):
            lines.append(f"  {bucket}: {count} times ({count / self.num_spins * 100:.2f}%)")
        return "\n".join(lines)
