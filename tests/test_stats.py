"""Tests for stat accessors, HP bookkeeping and the experience curve."""

import pytest

from engine.species import create_combatant
from engine.stats import (
    add_exp,
    add_hp,
    base_critical_hit_ratio,
    exp_threshold,
    get_base_stat,
    get_current_stat,
    level_for_exp,
    points_allowance,
    points_spent,
    remaining_exp,
    reset_current_stats,
    set_base_stat,
    set_critical_hit_ratio,
    set_current_critical_hit_ratio,
    set_current_stat,
    set_total_exp,
)
from models.combatant import Combatant, CombatantConfig
from models.enums import Stat, Status
from models.errors import FailureKind


def _make_combatant(hp: int = 30, exp: int = 0) -> Combatant:
    """Helper to create a test combatant (170 stat points + one move)."""
    combatant, failure = create_combatant(
        CombatantConfig(
            name="Tester",
            type="normal",
            hp=hp,
            attack=20,
            defense=20,
            special_attack=20,
            special_defense=20,
            speed=20,
            evasion=20,
            accuracy=20,
            exp=exp,
            moves=["Tackle"],
        ),
        unique_id="t1",
    )
    assert failure is None
    return combatant


class TestStatAccess:
    """Tests for get/set of base and current stats."""

    def test_get_base_and_current(self):
        c = _make_combatant()
        assert get_base_stat(c, Stat.ATTACK) == 20
        assert get_current_stat(c, Stat.ATTACK) == 20

    def test_set_base_resets_current(self):
        c = _make_combatant()
        c.stats.current_defense = 5
        assert set_base_stat(c, Stat.DEFENSE, 25) is None
        assert c.stats.defense == 25
        assert c.stats.current_defense == 25

    def test_set_base_negative_rejected(self):
        c = _make_combatant()
        failure = set_base_stat(c, Stat.SPEED, -1)
        assert failure.kind == FailureKind.INVALID_POKEMON_VALUES
        assert c.stats.speed == 20

    def test_set_current_negative_rejected(self):
        c = _make_combatant()
        failure = set_current_stat(c, Stat.ATTACK, -3)
        assert failure.kind == FailureKind.INVALID_POKEMON_VALUES
        assert c.stats.current_attack == 20

    def test_current_hp_above_max_rejected(self):
        c = _make_combatant(hp=30)
        failure = set_current_stat(c, Stat.HP, 31)
        assert failure.kind == FailureKind.INVALID_POKEMON_VALUES
        assert c.stats.current_hp == 30

    def test_current_hp_zero_faints(self):
        c = _make_combatant()
        assert set_current_stat(c, Stat.HP, 0) is None
        assert c.status == Status.FAINTED

    def test_fainted_current_hp_cannot_be_raised(self):
        c = _make_combatant(hp=30)
        add_hp(c, -1000)
        failure = set_current_stat(c, Stat.HP, 10)
        assert failure.kind == FailureKind.INVALID_POKEMON_VALUES
        assert c.stats.current_hp == 0
        assert c.status == Status.FAINTED

    def test_fainted_base_hp_cannot_revive(self):
        c = _make_combatant(hp=30)
        add_hp(c, -1000)
        failure = set_base_stat(c, Stat.HP, 30)
        assert failure.kind == FailureKind.INVALID_POKEMON_VALUES
        assert c.stats.current_hp == 0
        assert c.status == Status.FAINTED

    def test_fainted_other_stats_still_settable(self):
        c = _make_combatant()
        add_hp(c, -1000)
        assert set_current_stat(c, Stat.ATTACK, 5) is None
        assert set_current_stat(c, Stat.HP, 0) is None

    def test_reset_current_stats_keeps_hp(self):
        c = _make_combatant()
        c.stats.current_attack = 99
        c.stats.current_hp = 10
        c.stats.current_critical_hit_ratio = 0.9
        reset_current_stats(c)
        assert c.stats.current_attack == 20
        assert c.stats.current_hp == 10
        assert c.stats.current_critical_hit_ratio == c.stats.critical_hit_ratio


class TestAddHp:
    """Tests for add_hp()."""

    def test_damage(self):
        c = _make_combatant(hp=30)
        assert add_hp(c, -12) == 18

    def test_clamped_at_max(self):
        c = _make_combatant(hp=30)
        add_hp(c, -5)
        assert add_hp(c, 100) == 30

    def test_clamped_at_zero_and_faints(self):
        c = _make_combatant(hp=30)
        assert add_hp(c, -500) == 0
        assert c.status == Status.FAINTED
        assert c.is_fainted

    def test_fainted_not_healed(self):
        c = _make_combatant(hp=30)
        add_hp(c, -30)
        assert add_hp(c, 10) == 0
        assert c.status == Status.FAINTED


class TestCriticalHitRatio:
    """Tests for the critical-hit ratio helpers."""

    def test_base_ratio_from_speed(self):
        assert base_critical_hit_ratio(45) == pytest.approx(22.5 / 256)

    def test_constructed_ratio(self):
        c = _make_combatant()
        assert c.stats.critical_hit_ratio == pytest.approx(10 / 256)

    def test_out_of_range_rejected(self):
        c = _make_combatant()
        assert set_critical_hit_ratio(c, 1.5).kind == FailureKind.INVALID_POKEMON_VALUES
        assert set_current_critical_hit_ratio(c, -0.1).kind == FailureKind.INVALID_POKEMON_VALUES

    def test_set_ratio(self):
        c = _make_combatant()
        assert set_critical_hit_ratio(c, 0.5) is None
        assert c.stats.current_critical_hit_ratio == 0.5


class TestExperienceCurve:
    """Tests for exp_threshold() and level_for_exp()."""

    def test_thresholds(self):
        assert [exp_threshold(level) for level in range(1, 6)] == [10, 20, 40, 70, 110]

    def test_level_steps(self):
        assert level_for_exp(0) == 1
        assert level_for_exp(9) == 1
        assert level_for_exp(10) == 2
        assert level_for_exp(19) == 2
        assert level_for_exp(20) == 3
        assert level_for_exp(920) == 15

    def test_non_decreasing(self):
        levels = [level_for_exp(exp) for exp in range(0, 5000, 7)]
        assert levels == sorted(levels)

    def test_capped(self):
        assert level_for_exp(10**9) == 100


class TestAddExp:
    """Tests for add_exp() and set_total_exp()."""

    def test_negative_rejected_and_unchanged(self):
        c = _make_combatant()
        leveled, failure = add_exp(c, -5)
        assert failure.kind == FailureKind.INVALID_EXP
        assert leveled is False
        assert c.stats.exp == 0

    def test_gain_without_level(self):
        c = _make_combatant()
        leveled, failure = add_exp(c, 5)
        assert failure is None
        assert leveled is False
        assert c.stats.exp == 5
        assert c.stats.added_exp == 5

    def test_level_up_grants_points(self):
        c = _make_combatant()
        points = c.stats.points
        leveled, failure = add_exp(c, 40)
        assert failure is None
        assert leveled is True
        assert c.stats.level == 4
        assert c.stats.points == points + 3 * 5

    def test_set_total_cannot_decrease(self):
        c = _make_combatant(exp=30)
        leveled, failure = set_total_exp(c, 20)
        assert failure.kind == FailureKind.INVALID_EXP
        assert c.stats.exp == 30

    def test_remaining_exp(self):
        c = _make_combatant(exp=12)
        assert c.stats.level == 2
        assert remaining_exp(c) == 20 - 12


class TestPoints:
    """Tests for points_spent() and points_allowance()."""

    def test_spent(self):
        c = _make_combatant()
        assert points_spent(c) == 170 + 5

    def test_allowance_grows_with_level(self):
        assert points_allowance(1) == 200
        assert points_allowance(15) == 270

    def test_unspent_points(self):
        c = _make_combatant()
        assert c.stats.points == 200 - 175
