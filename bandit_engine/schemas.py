from marshmallow import EXCLUDE, Schema, fields, ValidationError, validates_schema, post_load
from marshmallow.validate import Length, Range

from bandit_engine.exceptions import InvalidConfigurationException
from bandit_engine.models import (
    NUM_REELS, WILDCARD, DEFAULT_LUCKY_COIN_CHANCE, DEFAULT_LUCKY_COIN_RE_ROLL,
    PayRule, ReelConfiguration
)
from bandit_engine.utils.random_source import SequenceOverride


class ReelConfigurationSchema(Schema):
    """
    Turns a decoded variation mapping (camelCase keys) into a ReelConfiguration.

    With ``enforce_display_rules`` the first three paytable rules must exist
    and be wildcard-free, because the idle display is built from them.
    """

    symbol_names = fields.List(fields.Str(), data_key='symbolNames', required=True, validate=Length(min=1))
    machine_name = fields.Str(data_key='machineName', load_default="")
    weight_table = fields.List(
        fields.List(fields.Int(strict=True), validate=Length(min=1, error="Weight rows must not be empty.")),
        data_key='weightTable', required=True,
        validate=Length(equal=NUM_REELS, error=f"weightTable must have exactly {NUM_REELS} rows.")
    )
    paytable = fields.Method('dump_paytable', deserialize='load_paytable', required=True)
    seed_capital = fields.Int(data_key='seedCapital', strict=True, load_default=0, validate=Range(min=0))
    lucky_coin_bonus = fields.Int(data_key='luckyCoinBonus', strict=True, load_default=0)
    lucky_coin_re_roll = fields.Int(
        data_key='luckyCoinReRoll', strict=True, load_default=DEFAULT_LUCKY_COIN_RE_ROLL, validate=Range(min=1)
    )
    lucky_coin_chance = fields.List(
        fields.Float(validate=Range(min=0.0, max=1.0)),
        data_key='luckyCoinChance', load_default=list(DEFAULT_LUCKY_COIN_CHANCE),
        validate=Length(equal=NUM_REELS, error="luckyCoinChance must have exactly 3 entries.")
    )
    # Debug-only symbol override; read by load_symbol_override, not part of the configuration
    symbol_sequence = fields.List(fields.Int(strict=True), data_key='symbolSequence', load_only=True)

    def __init__(self, *args, enforce_display_rules=True, **kwargs):
        super().__init__(*args, **kwargs)
        self.enforce_display_rules = enforce_display_rules

    def dump_paytable(self, obj):
        return [rule.to_row() for rule in obj.paytable]

    def load_paytable(self, value):
        if not isinstance(value, list):
            raise ValidationError("paytable must be a list of rows.")
        rows = []
        for i, row in enumerate(value):
            if (not isinstance(row, list) or len(row) != NUM_REELS + 1
                    or not all(isinstance(v, int) and not isinstance(v, bool) for v in row)):
                raise ValidationError(f"paytable[{i}] must be a list of {NUM_REELS + 1} integers.")
            if row[NUM_REELS] < 0:
                raise ValidationError(f"paytable[{i}] payout must not be negative.")
            if any(v < WILDCARD for v in row[:NUM_REELS]):
                raise ValidationError(f"paytable[{i}] symbols must be indices or {WILDCARD} (any symbol).")
            rows.append(row)
        return rows

    @validates_schema
    def validate_symbol_references(self, data, **kwargs):
        num_symbols = len(data.get('symbol_names') or [])
        errors = {}

        for reel, row in enumerate(data.get('weight_table') or []):
            bad = [s for s in row if not 0 <= s < num_symbols]
            if bad:
                errors.setdefault('weightTable', []).append(f"Row {reel} references unknown symbols {bad}.")

        paytable = data.get('paytable') or []
        for i, row in enumerate(paytable):
            bad = [s for s in row[:NUM_REELS] if s != WILDCARD and s >= num_symbols]
            if bad:
                errors.setdefault('paytable', []).append(f"Rule {i} references unknown symbols {bad}.")

        if self.enforce_display_rules and 'paytable' in data:
            if len(paytable) < 3:
                errors.setdefault('paytable', []).append(
                    "At least 3 rules are required to build the initial reel faces."
                )
            elif any(WILDCARD in row[:NUM_REELS] for row in paytable[:3]):
                errors.setdefault('paytable', []).append("The first 3 rules must not contain wildcards.")

        if errors:
            raise ValidationError(errors)

    @post_load
    def make_configuration(self, data, **kwargs):
        data.pop('symbol_sequence', None)
        data['paytable'] = [PayRule.from_row(row) for row in data['paytable']]
        return ReelConfiguration(**data)


class SymbolOverrideSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    symbol_sequence = fields.List(fields.Int(strict=True), data_key='symbolSequence', load_default=None)

    @post_load
    def make_override(self, data, **kwargs):
        sequence = data.get('symbol_sequence')
        return SequenceOverride(sequence) if sequence else None


def load_reel_configuration(data, enforce_display_rules=True):
    """
    Validate a decoded variation mapping and build its ReelConfiguration.

    Raises:
        InvalidConfigurationException: with the marshmallow messages in ``details``.
    """
    try:
        return ReelConfigurationSchema(enforce_display_rules=enforce_display_rules).load(data)
    except ValidationError as err:
        raise InvalidConfigurationException(
            "Reel configuration failed validation", details=err.messages
        ) from err


def dump_reel_configuration(configuration):
    return ReelConfigurationSchema().dump(configuration)


def load_symbol_override(data):
    """
    The debug ``symbolSequence`` of a variation mapping as a SequenceOverride.

    Returns None when the mapping has no (or an empty) sequence.
    """
    try:
        return SymbolOverrideSchema().load(data)
    except ValidationError as err:
        raise InvalidConfigurationException(
            "Symbol override failed validation", details=err.messages
        ) from err
