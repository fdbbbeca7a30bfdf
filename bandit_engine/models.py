"""
Reel configuration and payout result types.

A ``ReelConfiguration`` describes one machine variation: symbols, per-reel
weight rows, the prioritized paytable and the lucky coin parameters. It is
validated on construction and read-only afterwards.
"""
from typing import List, Optional, Sequence, Tuple

from bandit_engine.exceptions import InvalidConfigurationException

NUM_REELS = 3
WILDCARD = -1  # legacy paytable encoding for "any symbol"
DEFAULT_LUCKY_COIN_CHANCE = (0.5, 0.25, 0.125)
DEFAULT_LUCKY_COIN_RE_ROLL = 10


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


class _ReadOnly:
    """Rejects attribute assignment once _freeze() has run."""

    __slots__ = ('_frozen',)

    def _freeze(self):
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name, value):
        if getattr(self, '_frozen', False):
            raise AttributeError(f"{type(self).__name__} is read-only; cannot set {name!r}.")
        super().__setattr__(name, value)

    def __delattr__(self, name):
        if getattr(self, '_frozen', False):
            raise AttributeError(f"{type(self).__name__} is read-only; cannot delete {name!r}.")
        super().__delattr__(name)


class RuleSlot(_ReadOnly):
    """One position of a pay rule: an exact symbol index or a wildcard."""

    __slots__ = ('_symbol',)

    def __init__(self, symbol: Optional[int] = None):
        if symbol is not None and (not _is_int(symbol) or symbol < 0):
            raise InvalidConfigurationException(
                f"Rule slot symbol must be a non-negative integer, got {symbol!r}."
            )
        self._symbol = symbol
        self._freeze()

    @classmethod
    def exact(cls, symbol: int) -> 'RuleSlot':
        return cls(symbol)

    @classmethod
    def wildcard(cls) -> 'RuleSlot':
        return cls(None)

    @classmethod
    def from_raw(cls, value) -> 'RuleSlot':
        """Build from the legacy encoding where -1 means wildcard."""
        if not _is_int(value):
            raise InvalidConfigurationException(f"Rule slot must be an integer, got {value!r}.")
        if value == WILDCARD:
            return cls.wildcard()
        return cls.exact(value)

    @property
    def is_wildcard(self) -> bool:
        return self._symbol is None

    @property
    def symbol(self) -> Optional[int]:
        return self._symbol

    def matches(self, symbol: int) -> bool:
        return self._symbol is None or self._symbol == symbol

    def to_raw(self) -> int:
        return WILDCARD if self._symbol is None else self._symbol

    def __eq__(self, other):
        if not isinstance(other, RuleSlot):
            return NotImplemented
        return self._symbol == other._symbol

    def __hash__(self):
        return hash(self._symbol)

    def __repr__(self):
        return "RuleSlot(*)" if self._symbol is None else f"RuleSlot({self._symbol})"


class PayRule(_ReadOnly):
    """A paytable row: three rule slots and the payout per coin bet."""

    __slots__ = ('slots', 'payout_per_coin')

    def __init__(self, slots: Sequence[RuleSlot], payout_per_coin: int):
        slots = tuple(slots)
        if len(slots) != NUM_REELS or not all(isinstance(s, RuleSlot) for s in slots):
            raise InvalidConfigurationException(
                f"A pay rule needs exactly {NUM_REELS} RuleSlot entries, got {slots!r}."
            )
        if not _is_int(payout_per_coin) or payout_per_coin < 0:
            raise InvalidConfigurationException(
                f"payout_per_coin must be a non-negative integer, got {payout_per_coin!r}."
            )
        self.slots: Tuple[RuleSlot, ...] = slots
        self.payout_per_coin = payout_per_coin
        self._freeze()

    @classmethod
    def from_row(cls, row) -> 'PayRule':
        """Build from a legacy ``[s0, s1, s2, payout]`` row."""
        if isinstance(row, PayRule):
            return row
        row = list(row)
        if len(row) != NUM_REELS + 1:
            raise InvalidConfigurationException(
                f"Paytable rows must have {NUM_REELS + 1} columns, got {len(row)}: {row!r}."
            )
        return cls([RuleSlot.from_raw(v) for v in row[:NUM_REELS]], row[NUM_REELS])

    def matches(self, payline: Sequence[int]) -> bool:
        return all(slot.matches(symbol) for slot, symbol in zip(self.slots, payline))

    @property
    def has_wildcard(self) -> bool:
        return any(slot.is_wildcard for slot in self.slots)

    @property
    def symbols(self) -> Tuple[int, ...]:
        """The exact symbol per reel; only defined for wildcard-free rules."""
        if self.has_wildcard:
            raise InvalidConfigurationException(f"Rule {self!r} contains a wildcard and has no fixed symbols.")
        return tuple(slot.symbol for slot in self.slots)

    def to_row(self) -> List[int]:
        return [slot.to_raw() for slot in self.slots] + [self.payout_per_coin]

    def __eq__(self, other):
        if not isinstance(other, PayRule):
            return NotImplemented
        return self.slots == other.slots and self.payout_per_coin == other.payout_per_coin

    def __hash__(self):
        return hash((self.slots, self.payout_per_coin))

    def __repr__(self):
        return f"<PayRule {self.to_row()}>"


class ReelConfiguration(_ReadOnly):
    """Symbols, weights, paytable and lucky coin parameters for one variation."""

    __slots__ = (
        'symbol_names', 'machine_name', 'weight_table', 'paytable', 'seed_capital',
        'lucky_coin_bonus', 'lucky_coin_re_roll', 'lucky_coin_chance',
    )

    def __init__(self, symbol_names, weight_table, paytable, machine_name="",
                 seed_capital=0, lucky_coin_bonus=0,
                 lucky_coin_re_roll=DEFAULT_LUCKY_COIN_RE_ROLL,
                 lucky_coin_chance=DEFAULT_LUCKY_COIN_CHANCE):
        if isinstance(symbol_names, str) or not symbol_names:
            raise InvalidConfigurationException("symbol_names must be a non-empty sequence of names.")
        self.symbol_names: Tuple[str, ...] = tuple(symbol_names)
        for i, name in enumerate(self.symbol_names):
            if not isinstance(name, str):
                raise InvalidConfigurationException(f"symbol_names[{i}] must be a string, got {name!r}.")

        if not isinstance(machine_name, str):
            raise InvalidConfigurationException("machine_name must be a string.")
        self.machine_name = machine_name

        self.weight_table: Tuple[Tuple[int, ...], ...] = self._validate_weight_table(weight_table)
        self.paytable: Tuple[PayRule, ...] = self._validate_paytable(paytable)

        if not _is_int(seed_capital) or seed_capital < 0:
            raise InvalidConfigurationException(f"seed_capital must be a non-negative integer, got {seed_capital!r}.")
        self.seed_capital = seed_capital

        if not _is_int(lucky_coin_bonus):
            raise InvalidConfigurationException(f"lucky_coin_bonus must be an integer, got {lucky_coin_bonus!r}.")
        self.lucky_coin_bonus = lucky_coin_bonus

        if not _is_int(lucky_coin_re_roll) or lucky_coin_re_roll <= 0:
            raise InvalidConfigurationException(
                f"lucky_coin_re_roll must be a positive integer, got {lucky_coin_re_roll!r}."
            )
        self.lucky_coin_re_roll = lucky_coin_re_roll

        self.lucky_coin_chance: Tuple[float, ...] = self._validate_chances(lucky_coin_chance)
        self._freeze()

    def _validate_weight_table(self, weight_table):
        rows = tuple(tuple(row) for row in weight_table)
        if len(rows) != NUM_REELS:
            raise InvalidConfigurationException(
                f"weight_table must have exactly {NUM_REELS} rows, got {len(rows)}."
            )
        for reel, row in enumerate(rows):
            if not row:
                raise InvalidConfigurationException(f"weight_table[{reel}] is empty.", details={'reel': reel})
            for j, symbol in enumerate(row):
                if not self.is_valid_symbol(symbol):
                    raise InvalidConfigurationException(
                        f"weight_table[{reel}][{j}] ({symbol!r}) is not a valid symbol index.",
                        details={'reel': reel, 'position': j}
                    )
        return rows

    def _validate_paytable(self, paytable):
        rules = tuple(PayRule.from_row(row) for row in paytable)
        for i, rule in enumerate(rules):
            for slot in rule.slots:
                if not slot.is_wildcard and not self.is_valid_symbol(slot.symbol):
                    raise InvalidConfigurationException(
                        f"paytable[{i}] references unknown symbol {slot.symbol}.",
                        details={'rule': i}
                    )
        return rules

    @staticmethod
    def _validate_chances(chances):
        chances = tuple(chances)
        if len(chances) != NUM_REELS:
            raise InvalidConfigurationException(
                f"lucky_coin_chance must have exactly 3 entries, got {len(chances)}."
            )
        for i, chance in enumerate(chances):
            if isinstance(chance, bool) or not isinstance(chance, (int, float)) or not 0.0 <= chance <= 1.0:
                raise InvalidConfigurationException(
                    f"lucky_coin_chance[{i}] must be a probability in [0, 1], got {chance!r}."
                )
        return tuple(float(c) for c in chances)

    def is_valid_symbol(self, symbol) -> bool:
        return _is_int(symbol) and 0 <= symbol < len(self.symbol_names)

    @property
    def num_symbols(self) -> int:
        return len(self.symbol_names)

    def symbol_name(self, symbol: int) -> str:
        if not self.is_valid_symbol(symbol):
            raise InvalidConfigurationException(f"Unknown symbol index {symbol!r}.")
        return self.symbol_names[symbol]

    @property
    def lucky_coin_enabled(self) -> bool:
        return self.lucky_coin_bonus > 0

    @property
    def has_display_rules(self) -> bool:
        """True when the first three rules exist and contain no wildcard."""
        return len(self.paytable) >= 3 and not any(rule.has_wildcard for rule in self.paytable[:3])

    def __repr__(self):
        return (f"<ReelConfiguration '{self.machine_name}' symbols={len(self.symbol_names)} "
                f"rules={len(self.paytable)}>")


class PayoutResult:
    """
    Outcome of evaluating a payline.

    LOST: no rule matched.
    MATCHED_NO_WAGER: a rule matched but the amount is 0 (nothing was bet,
        or the rule pays nothing).
    WON: a rule matched and pays ``amount`` coins.
    """

    LOST = 'lost'
    MATCHED_NO_WAGER = 'matched_no_wager'
    WON = 'won'

    __slots__ = ('outcome', 'amount', 'rule_index')

    def __init__(self, outcome, amount=0, rule_index=None):
        self.outcome = outcome
        self.amount = amount
        self.rule_index = rule_index

    @classmethod
    def lost(cls) -> 'PayoutResult':
        return cls(cls.LOST)

    @classmethod
    def matched(cls, rule_index: int, amount: int) -> 'PayoutResult':
        outcome = cls.WON if amount > 0 else cls.MATCHED_NO_WAGER
        return cls(outcome, amount, rule_index)

    @property
    def is_loss(self) -> bool:
        return self.outcome == self.LOST

    @property
    def is_win(self) -> bool:
        return self.outcome == self.WON

    def to_legacy(self) -> int:
        """-1 for a loss, otherwise the amount (0 when nothing was wagered)."""
        return -1 if self.is_loss else self.amount

    def __eq__(self, other):
        if not isinstance(other, PayoutResult):
            return NotImplemented
        return (self.outcome, self.amount, self.rule_index) == (other.outcome, other.amount, other.rule_index)

    def __hash__(self):
        return hash((self.outcome, self.amount, self.rule_index))

    def __repr__(self):
        if self.is_loss:
            return "<PayoutResult lost>"
        return f"<PayoutResult {self.outcome} amount={self.amount} rule={self.rule_index}>"
