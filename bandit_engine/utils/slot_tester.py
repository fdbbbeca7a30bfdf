"""
Return-to-player analysis for a reel configuration.

``calculate_theoretical_rtp`` enumerates every payline the weight table can
produce; ``SlotTester`` plays a configuration through a PayoutEngine and
collects the same statistics empirically.
"""
import itertools
import logging
from collections import Counter
from fractions import Fraction

from bandit_engine.exceptions import InvalidInputException
from bandit_engine.models import NUM_REELS
from bandit_engine.utils.payout_engine import MAX_BET, PayoutEngine

logger = logging.getLogger(__name__)


def _reel_probabilities(row):
    counts = Counter(row)
    total = len(row)
    return {symbol: Fraction(count, total) for symbol, count in counts.items()}


def calculate_theoretical_rtp(configuration):
    """
    Exact payline statistics for a configuration.

    Payouts scale linearly with the bet, so the RTP per coin is the same for
    every bet of 1 to 3 coins.

    Returns:
        dict: {
            "rtp": float,                   # expected payout per coin wagered
            "hit_frequency": float,         # probability that any rule matches
            "rule_probabilities": dict,     # rule index -> probability of being the match
            "expected_bonus_per_spin": dict # lucky coin bet (1-3) -> expected bonus coins
        }
    """
    rules = configuration.paytable
    reel_probs = [_reel_probabilities(row) for row in configuration.weight_table]

    rtp = Fraction(0)
    hit = Fraction(0)
    rule_probabilities = {}
    for payline in itertools.product(*(sorted(p) for p in reel_probs)):
        probability = reel_probs[0][payline[0]] * reel_probs[1][payline[1]] * reel_probs[2][payline[2]]
        for index, rule in enumerate(rules):
            if rule.matches(payline):
                hit += probability
                rtp += probability * rule.payout_per_coin
                rule_probabilities[index] = rule_probabilities.get(index, Fraction(0)) + probability
                break

    if configuration.lucky_coin_enabled:
        expected_bonus = {
            bet: configuration.lucky_coin_chance[bet - 1] * configuration.lucky_coin_bonus
            for bet in range(1, MAX_BET + 1)
        }
    else:
        expected_bonus = {bet: 0.0 for bet in range(1, MAX_BET + 1)}

    return {
        "rtp": float(rtp),
        "hit_frequency": float(hit),
        "rule_probabilities": {index: float(p) for index, p in sorted(rule_probabilities.items())},
        "expected_bonus_per_spin": expected_bonus,
    }


class SlotTester:
    def __init__(self, configuration, num_spins=None, bet=1, lucky_coin_bet=0, random_source=None):
        if num_spins is None:
            from bandit_engine.config import Config
            num_spins = Config.SIMULATION_SPINS
        if not isinstance(num_spins, int) or isinstance(num_spins, bool) or num_spins <= 0:
            raise InvalidInputException(f"num_spins must be a positive integer, got {num_spins!r}.")
        if not isinstance(bet, int) or isinstance(bet, bool) or not 1 <= bet <= MAX_BET:
            raise InvalidInputException(f"Simulation bet must be between 1 and {MAX_BET}, got {bet!r}.")
        if not isinstance(lucky_coin_bet, int) or isinstance(lucky_coin_bet, bool) or not 0 <= lucky_coin_bet <= MAX_BET:
            raise InvalidInputException(f"lucky_coin_bet must be between 0 and {MAX_BET}, got {lucky_coin_bet!r}.")

        self.configuration = configuration
        self.num_spins = num_spins
        self.bet = bet
        self.lucky_coin_bet = lucky_coin_bet
        self.engine = PayoutEngine(configuration, random_source=random_source, session_id="slot-tester")

        # Statistics to be collected
        self.total_bet = 0
        self.total_win = 0
        self.total_bonus = 0
        self.hit_count = 0
        self.bonus_triggers = 0
        self.wins_by_rule = {}
        self.symbol_counts = [Counter() for _ in range(NUM_REELS)]

        # Derived statistics
        self.overall_rtp = 0.0
        self.hit_frequency = 0.0

    def run(self):
        logger.info(f"Simulating {self.num_spins} spins of '{self.configuration.machine_name}' at bet {self.bet}")
        for _ in range(self.num_spins):
            payline = self.engine.spin()
            for reel, symbol in enumerate(payline):
                self.symbol_counts[reel][symbol] += 1

            self.total_bet += self.bet
            result = self.engine.get_payout(self.bet, payline)
            if not result.is_loss:
                self.hit_count += 1
                self.total_win += result.amount
                self.wins_by_rule[result.rule_index] = self.wins_by_rule.get(result.rule_index, 0) + 1

            if self.lucky_coin_bet:
                bonus = self.engine.get_bonus(self.lucky_coin_bet)
                if bonus > 0:
                    self.bonus_triggers += 1
                    self.total_bonus += bonus

        self.overall_rtp = self.total_win / self.total_bet if self.total_bet else 0.0
        self.hit_frequency = self.hit_count / self.num_spins
        return self.get_statistics()

    def get_statistics(self):
        return {
            "num_spins": self.num_spins,
            "total_bet": self.total_bet,
            "total_win": self.total_win,
            "total_bonus": self.total_bonus,
            "hit_count": self.hit_count,
            "hit_frequency": self.hit_frequency,
            "overall_rtp": self.overall_rtp,
            "bonus_triggers": self.bonus_triggers,
            "wins_by_rule": dict(sorted(self.wins_by_rule.items())),
            "symbol_counts": [dict(sorted(counts.items())) for counts in self.symbol_counts],
        }

    def log_summary(self):
        stats = self.get_statistics()
        theoretical = calculate_theoretical_rtp(self.configuration)
        logger.info(
            f"RTP {stats['overall_rtp']:.4f} (theoretical {theoretical['rtp']:.4f}), "
            f"hit frequency {stats['hit_frequency']:.4f} (theoretical {theoretical['hit_frequency']:.4f})"
        )
        logger.info(f"Total bet {stats['total_bet']}, total win {stats['total_win']}, "
                    f"bonus triggers {stats['bonus_triggers']} ({stats['total_bonus']} coins)")
        for rule_index, count in stats['wins_by_rule'].items():
            logger.info(f"  rule {rule_index} {self.configuration.paytable[rule_index].to_row()}: {count} hits")
        return stats
