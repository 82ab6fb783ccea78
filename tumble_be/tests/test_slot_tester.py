import json
import unittest

from click.testing import CliRunner

from tumble_be.manage import cli
from tumble_be.utils.slot_tester import SlotTester
from tumble_be.utils.game_tables import GameTables


class TestSlotTester(unittest.TestCase):

    def test_simulation_totals(self):
        tester = SlotTester(num_spins=300, bet_amount=2, balance=1000, seed=42)
        summary = tester.run_simulation()

        self.assertEqual(summary['num_spins'], 300)
        self.assertEqual(summary['total_bet'], 600)
        self.assertAlmostEqual(summary['rtp_percent'], summary['total_win'] / 600 * 100)
        self.assertGreaterEqual(summary['hit_frequency_percent'], 0)
        self.assertLessEqual(summary['hit_frequency_percent'], 100)
        self.assertLessEqual(summary['max_win'], 2 * 21000)
        self.assertGreaterEqual(summary['volatility_index'], 0)
        self.assertEqual(sum(summary['wins_by_multiplier'].values()), tester.hit_count)

    def test_same_seed_is_reproducible(self):
        first = SlotTester(num_spins=100, bet_amount=1, balance=100, is_bonus=True, seed=7).run_simulation()
        second = SlotTester(num_spins=100, bet_amount=1, balance=100, is_bonus=True, seed=7).run_simulation()
        self.assertEqual(first, second)

    def test_bonus_mode_never_retriggers(self):
        summary = SlotTester(num_spins=200, bet_amount=1, balance=1000, is_bonus=True, seed=3).run_simulation()
        self.assertEqual(summary['bonus_triggers'], 0)
        self.assertEqual(summary['bonus_frequency_percent'], 0)

    def test_base_mode_has_no_bombs(self):
        summary = SlotTester(num_spins=200, bet_amount=1, balance=1000, seed=3).run_simulation()
        self.assertEqual(summary['bomb_count'], 0)

    def test_cap_hits_counted_with_small_cap(self):
        tables = GameTables(max_payout_multiplier=0.1)
        tester = SlotTester(num_spins=200, bet_amount=1, balance=1000, seed=9, tables=tables)
        summary = tester.run_simulation()
        self.assertEqual(summary['max_win_hits'], tester.hit_count)
        self.assertLessEqual(summary['max_win'], 0.1)

    def test_progress_snapshots(self):
        summary = SlotTester(num_spins=50, bet_amount=1, balance=1000, seed=1).run_simulation(progress_every=10)
        self.assertEqual([point['spin_count'] for point in summary['rtp_over_time']], [10, 20, 30, 40, 50])

    def test_bucket_labels(self):
        tester = SlotTester(num_spins=1, bet_amount=1, balance=1000)
        self.assertEqual(tester._bucket_label(0.2), "0-0.5x")
        self.assertEqual(tester._bucket_label(1), "1-2x")
        self.assertEqual(tester._bucket_label(20000), "1000x+")

    def test_format_summary(self):
        tester = SlotTester(num_spins=20, bet_amount=1, balance=1000, seed=5)
        tester.run_simulation()
        text = tester.format_summary()
        self.assertIn("Overall RTP", text)
        self.assertIn("Rounds Simulated: 20 (base game)", text)


class TestManageCli(unittest.TestCase):

    def test_simulate_json(self):
        runner = CliRunner()
        result = runner.invoke(cli, ['simulate', '--spins', '40', '--bet', '1', '--balance', '500', '--seed', '11', '--json'])
        self.assertEqual(result.exit_code, 0, result.output)
        summary = json.loads(result.output)
        self.assertEqual(summary['num_spins'], 40)
        self.assertEqual(summary['total_bet'], 40)

    def test_simulate_text(self):
        runner = CliRunner()
        result = runner.invoke(cli, ['simulate', '--spins', '10', '--seed', '2', '--bonus'])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("bonus game", result.output)

    def test_simulate_rejects_zero_bet(self):
        runner = CliRunner()
        result = runner.invoke(cli, ['simulate', '--bet', '0'])
        self.assertNotEqual(result.exit_code, 0)


if __name__ == '__main__':
    unittest.main()
