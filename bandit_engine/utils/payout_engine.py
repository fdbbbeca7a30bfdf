"""
Payout engine for a three-reel, single-payline machine.

One ``PayoutEngine`` serves one machine session. The reel configuration is
shared read-only; the random source and the optional symbol override are
mutable and belong to the session, so an engine must not be used from
several threads without external locking.
"""
import logging
from typing import List, Optional, Sequence

from bandit_engine.exceptions import InvalidConfigurationException, InvalidInputException
from bandit_engine.models import NUM_REELS, PayoutResult, ReelConfiguration
from bandit_engine.utils.random_source import RandomSource, SequenceOverride

logger = logging.getLogger(__name__)

MAX_BET = 3


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


class PayoutEngine:
    """Reel draws, paytable evaluation and lucky coin bonus for one machine session."""

    def __init__(self, configuration: ReelConfiguration, random_source: Optional[RandomSource] = None,
                 override: Optional[SequenceOverride] = None, session_id: Optional[str] = None):
        """
        Args:
            configuration (ReelConfiguration): The machine variation to play.
            random_source (RandomSource, optional): Defaults to RandomSource.from_settings().
            override (SequenceOverride, optional): Symbols returned by pick() before any random draw.
            session_id (str, optional): Attached to log records of this engine.
        """
        if not isinstance(configuration, ReelConfiguration):
            raise InvalidConfigurationException(
                f"PayoutEngine needs a ReelConfiguration, got {type(configuration).__name__}."
            )
        if override is not None:
            for i, symbol in enumerate(override.values):
                if not configuration.is_valid_symbol(symbol):
                    raise InvalidConfigurationException(
                        f"Override entry {i} ({symbol!r}) is not a valid symbol index.",
                        details={'position': i}
                    )
        self.configuration = configuration
        self.random_source = random_source if random_source is not None else RandomSource.from_settings()
        self.override = override
        self.session_id = session_id

    def _log_extra(self):
        return {'session_id': self.session_id}

    def _validate_bet(self, bet):
        if not _is_int(bet) or not 0 <= bet <= MAX_BET:
            logger.warning(f"Rejected bet {bet!r}", extra=self._log_extra())
            raise InvalidInputException(
                f"Bet must be an integer between 0 and {MAX_BET}, got {bet!r}.",
                details={'bet': bet}
            )

    def _validate_payline(self, payline):
        try:
            line = tuple(payline)
        except TypeError:
            raise InvalidInputException(f"Payline must be a sequence of {NUM_REELS} symbols, got {payline!r}.")
        if len(line) != NUM_REELS or not all(_is_int(s) for s in line):
            raise InvalidInputException(
                f"Payline must be a sequence of {NUM_REELS} integer symbols, got {payline!r}.",
                details={'payline': list(line)}
            )
        return line

    # --- Reel sampling ---

    def pick(self, reel: int) -> int:
        """
        Draw the symbol for one reel.

        An active override supplies the next pre-selected symbol regardless of
        ``reel``. Otherwise a uniform index into ``weight_table[reel]`` is
        drawn, so symbols repeated in the row are proportionally more likely.

        Raises:
            InvalidInputException: ``reel`` is not 0, 1 or 2.
            InvalidConfigurationException: the weight row is empty.
        """
        if not _is_int(reel) or not 0 <= reel < NUM_REELS:
            raise InvalidInputException(f"Reel must be 0, 1 or 2, got {reel!r}.", details={'reel': reel})

        if self.override is not None and self.override.has_next():
            symbol = self.override.take()
            logger.debug(f"Reel {reel}: override symbol {symbol} ({self.override.remaining} left)",
                         extra=self._log_extra())
            return symbol

        row = self.configuration.weight_table[reel]
        if not row:
            logger.warning(f"Weight table row {reel} is empty", extra=self._log_extra())
            raise InvalidConfigurationException(f"weight_table[{reel}] is empty.", details={'reel': reel})
        return row[self.random_source.next_int(len(row))]

    def spin(self):
        """Draw one symbol per reel, left to right, and return the payline."""
        return tuple(self.pick(reel) for reel in range(NUM_REELS))

    # --- Paytable ---

    def match(self, payline: Sequence[int]) -> Optional[int]:
        """
        Index of the first paytable rule matching ``payline``, or None.

        Table order is priority; a later rule never wins over an earlier one,
        even when it pays more.
        """
        line = self._validate_payline(payline)
        for index, rule in enumerate(self.configuration.paytable):
            if rule.matches(line):
                return index
        return None

    def get_payout(self, bet: int, payline: Sequence[int]) -> PayoutResult:
        """
        Evaluate ``payline`` for a bet of 0 to 3 coins.

        Returns:
            PayoutResult: lost when no rule matches, otherwise the matched rule
            and ``payout_per_coin * bet``.
        """
        self._validate_bet(bet)
        rule_index = self.match(payline)
        if rule_index is None:
            return PayoutResult.lost()
        amount = self.configuration.paytable[rule_index].payout_per_coin * bet
        return PayoutResult.matched(rule_index, amount)

    # --- Lucky coin ---

    def get_bonus(self, bet: int) -> int:
        """
        Bonus coins for a round in which the lucky coin was played.

        A bet of 0, or a configuration with the feature disabled, pays nothing
        and consumes no random draw.
        """
        self._validate_bet(bet)
        config = self.configuration
        if bet == 0 or not config.lucky_coin_enabled:
            return 0
        draw = self.random_source.next_float()
        if draw <= config.lucky_coin_chance[bet - 1]:
            logger.debug(f"Lucky coin bonus {config.lucky_coin_bonus} awarded (bet={bet}, draw={draw:.4f})",
                         extra=self._log_extra())
            return config.lucky_coin_bonus
        return 0

    # --- Idle display ---

    def get_initial_faces(self) -> List[int]:
        """
        Symbols shown on the reels before the first spin.

        Nine entries, one reel after another, bottom to top within a reel.
        The payline (middle) row shows rule 0, the bottom row rule 1 and the
        top row rule 2, so the first three rules must be wildcard-free.
        """
        paytable = self.configuration.paytable
        if len(paytable) < 3:
            logger.warning(f"Paytable has only {len(paytable)} rules", extra=self._log_extra())
            raise InvalidConfigurationException(
                f"Initial faces need at least 3 paytable rules, got {len(paytable)}."
            )
        bottom, payline, top = paytable[1].symbols, paytable[0].symbols, paytable[2].symbols
        faces = []
        for reel in range(NUM_REELS):
            faces.extend([bottom[reel], payline[reel], top[reel]])
        return faces
