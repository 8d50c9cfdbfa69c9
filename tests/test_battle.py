"""Tests for battle resolution."""

import config
from engine.battle import (
    calculate_damage,
    check_preconditions,
    choose_move,
    experience_for_win,
    hit_chance,
    resolve,
    turn_order,
)
from engine.moveset import add_item, select_item, select_move
from engine.rng import make_rng
from engine.species import STRUGGLE, create_combatant, create_from_species, get_item, get_move
from engine.stats import set_critical_hit_ratio
from models.battle import BattleEventType, BattlePair
from models.combatant import Combatant, CombatantConfig
from models.enums import Status
from models.errors import FailureKind
from models.moves import Move


def _make_combatant(
    uid: str,
    type: str = "normal",
    moves: list | None = None,
    exp: int = 0,
    **stats,
) -> Combatant:
    """Helper to create a combatant with every stat at 5 unless overridden.

    Critical hits are switched off so damage is predictable.
    """
    fields = dict(
        hp=100, attack=5, defense=5, special_attack=5,
        special_defense=5, speed=5, evasion=5, accuracy=5,
    )
    fields.update(stats)
    combatant, failure = create_combatant(
        CombatantConfig(
            name=f"Mon-{uid}",
            type=type,
            exp=exp,
            moves=moves or ["Tackle"],
            **fields,
        ),
        unique_id=uid,
    )
    assert failure is None, failure
    set_critical_hit_ratio(combatant, 0.0)
    return combatant


def _headbutt(name: str = "Headbutt") -> Move:
    return Move(name=name, type="normal", power=60, pp=15, current_pp=15)


def _make_pair() -> BattlePair:
    """A level 15 hitter against a level 1 punching bag.

    The hitter deals 40 per hit and takes 3, so the battle lasts three rounds.
    """
    hitter = _make_combatant(
        "a", exp=920, hp=100, speed=90, attack=40,
        moves=[_headbutt(), _headbutt("Slam")],
    )
    bag = _make_combatant("b", hp=100, speed=60, defense=10)
    return BattlePair(first=hitter, second=bag)


class TestDamage:
    """Tests for calculate_damage() and hit_chance()."""

    def test_formula(self):
        pair = _make_pair()
        assert calculate_damage(pair.first, pair.second, _headbutt()) == 40
        assert calculate_damage(pair.second, pair.first, get_move("Tackle")) == 3

    def test_critical_doubles(self):
        pair = _make_pair()
        normal = calculate_damage(pair.first, pair.second, _headbutt())
        critical = calculate_damage(pair.first, pair.second, _headbutt(), critical=True)
        assert critical >= 2 * normal - 1

    def test_monotonic_in_attack(self):
        pair = _make_pair()
        last = 0
        for attack in (5, 10, 20, 40, 80):
            pair.first.stats.current_attack = attack
            damage = calculate_damage(pair.first, pair.second, _headbutt())
            assert damage >= last
            last = damage

    def test_non_increasing_in_defence(self):
        pair = _make_pair()
        last = None
        for defense in (5, 10, 20, 40, 80):
            pair.second.stats.current_defense = defense
            damage = calculate_damage(pair.first, pair.second, _headbutt())
            assert last is None or damage <= last
            last = damage

    def test_resisted_hit_still_hurts(self):
        weak = _make_combatant("w")
        tank = _make_combatant("t", type="rock", moves=["Rock Throw"], hp=30, defense=80)
        assert calculate_damage(weak, tank, get_move("Tackle")) == 1

    def test_immune(self):
        attacker = _make_combatant("a")
        ghost = _make_combatant("g", type="ghost", moves=["Lick"])
        assert calculate_damage(attacker, ghost, get_move("Tackle")) == 0

    def test_struggle_ignores_immunity(self):
        attacker = _make_combatant("a")
        ghost = _make_combatant("g", type="ghost", moves=["Lick"])
        assert calculate_damage(attacker, ghost, STRUGGLE, typeless=True) > 0

    def test_super_effective(self):
        attacker = _make_combatant("e", type="electric", moves=["Thunder Shock"])
        water = _make_combatant("w", type="water", moves=["Water Gun"])
        normal = _make_combatant("n")
        move = get_move("Thunder Shock")
        assert calculate_damage(attacker, water, move) > calculate_damage(attacker, normal, move)

    def test_status_move_deals_nothing(self):
        pair = _make_pair()
        assert calculate_damage(pair.first, pair.second, get_move("Supersonic")) == 0

    def test_hit_chance(self):
        pair = _make_pair()
        assert hit_chance(pair.first, pair.second, _headbutt()) == 1.0
        pair.second.stats.current_evasion = 10
        assert hit_chance(pair.first, pair.second, _headbutt()) == 0.5
        assert 0.0 <= hit_chance(pair.first, pair.second, get_move("Supersonic")) <= 1.0


class TestTurnOrderAndMoveChoice:
    """Tests for turn_order() and choose_move()."""

    def test_faster_first(self):
        pair = _make_pair()
        pair.first.stats.current_speed = 10
        assert [c.id for c in turn_order(pair)] == ["b", "a"]

    def test_ties_keep_pair_order(self):
        a = _make_combatant("a")
        b = _make_combatant("b")
        assert [c.id for c in turn_order(BattlePair(first=a, second=b))] == ["a", "b"]
        assert [c.id for c in turn_order(BattlePair(first=b, second=a))] == ["b", "a"]

    def test_selected_move(self):
        pair = _make_pair()
        select_move(pair.first, "Slam")
        move, struggling = choose_move(pair.first)
        assert move.name == "Slam"
        assert struggling is False

    def test_falls_back_when_selected_empty(self):
        pair = _make_pair()
        select_move(pair.first, "Headbutt")
        pair.first.moves[0].current_pp = 0
        move, _ = choose_move(pair.first)
        assert move.name == "Slam"

    def test_struggle_when_no_pp(self):
        pair = _make_pair()
        for move in pair.first.moves:
            move.current_pp = 0
        move, struggling = choose_move(pair.first)
        assert move.name == "Struggle"
        assert struggling is True


class TestExperience:
    """Tests for experience_for_win()."""

    def test_equal_levels(self):
        a = _make_combatant("a")
        b = _make_combatant("b")
        # base yield 64 + level 1, over 5
        assert experience_for_win(a, b) == 13

    def test_stronger_winner_earns_less(self):
        pair = _make_pair()
        low = _make_combatant("c")
        assert experience_for_win(pair.first, pair.second) < experience_for_win(low, pair.second)

    def test_evolutions_raise_award(self):
        a = _make_combatant("a")
        b = _make_combatant("b")
        before = experience_for_win(a, b)
        b.evolutions = 10
        assert experience_for_win(a, b) > before


class TestPreconditions:
    """Tests for check_preconditions() and unsuccessful battles."""

    def test_valid_pair(self):
        assert check_preconditions(_make_pair()) is None

    def test_same_combatant(self):
        a = _make_combatant("a")
        result = resolve(BattlePair(first=a, second=a), make_rng(1))
        assert result.success is False
        assert result.error_kind == FailureKind.INVALID_BATTLE_STATE
        assert a.wins == 0

    def test_fainted(self):
        pair = _make_pair()
        pair.second.stats.current_hp = 0
        pair.second.status = Status.FAINTED
        result = resolve(pair, make_rng(1))
        assert result.success is False
        assert result.error_kind == FailureKind.INVALID_BATTLE_STATE
        assert "fainted" in result.error

    def test_failed_inspection(self):
        pair = _make_pair()
        pair.first.moves = []
        result = resolve(pair, make_rng(1))
        assert result.success is False
        assert "inspection" in result.error
        assert result.events == []


class TestResolve:
    """Tests for resolve()."""

    def test_scenario(self):
        pair = _make_pair()
        result = resolve(pair, make_rng(7))

        assert result.success is True
        assert result.winner.id == "a"
        assert result.loser.id == "b"
        assert result.rounds == 3
        assert result.loser.status == Status.FAINTED
        assert result.loser.stats.current_hp == 0
        assert result.winner.stats.current_hp == 94
        assert result.winner.wins == 1
        assert result.exp_gained == 1
        assert result.winner.stats.exp == 921
        assert result.remove_loser is True

        moves = [e for e in result.events if e.event_type == BattleEventType.MOVE]
        assert [e.combatant_id for e in moves] == ["a", "b", "a", "b", "a"]
        assert [e.damage for e in moves] == [40, 3, 40, 3, 20]
        assert result.events[-2].event_type == BattleEventType.FAINT
        assert result.events[-1].event_type == BattleEventType.EXPERIENCE
        assert pair.first.moves[0].current_pp == 12

    def test_events_are_round_ordered(self):
        result = resolve(_make_pair(), make_rng(7))
        rounds = [e.round for e in result.events]
        assert rounds == sorted(rounds)

    def test_deterministic_with_seed(self):
        a, _ = create_from_species("Pikachu", unique_id="p")
        b, _ = create_from_species("Charmander", unique_id="c")

        first = resolve(
            BattlePair(first=a.model_copy(deep=True), second=b.model_copy(deep=True)),
            make_rng(42),
        )
        second = resolve(
            BattlePair(first=a.model_copy(deep=True), second=b.model_copy(deep=True)),
            make_rng(42),
        )
        assert first.success and second.success
        assert first.winner.id == second.winner.id
        assert first.rounds == second.rounds
        assert first.events == second.events

    def test_struggle(self):
        pair = _make_pair()
        for move in pair.first.moves:
            move.current_pp = 0
        result = resolve(pair, make_rng(3))
        assert result.winner.id == "a"
        used = {e.details["move"] for e in result.events
                if e.event_type == BattleEventType.MOVE and e.combatant_id == "a"}
        assert used == {"Struggle"}
        assert all(m.current_pp == 0 for m in pair.first.moves)

    def test_item_used_instead_of_move(self):
        pair = _make_pair()
        pair.first.stats.current_hp = 50
        add_item(pair.first, get_item("Potion"))
        select_item(pair.first, "Potion")

        result = resolve(pair, make_rng(3))
        assert result.events[0].event_type == BattleEventType.ITEM
        assert result.events[0].combatant_id == "a"
        assert pair.first.current_item is None
        assert result.rounds == 4

    def test_winner_stats_reset(self):
        pair = _make_pair()
        add_item(pair.first, get_item("X Attack"))
        select_item(pair.first, "X Attack")
        result = resolve(pair, make_rng(3))
        assert result.winner.stats.current_attack == result.winner.stats.attack

    def test_winner_status_cleared(self):
        pair = _make_pair()
        pair.first.status = Status.POISON
        result = resolve(pair, make_rng(3))
        assert result.winner.id == "a"
        assert result.winner.status == Status.NORMAL

    def test_stalemate(self, monkeypatch):
        monkeypatch.setattr(config, "MAX_BATTLE_ROUNDS", 0)
        pair = _make_pair()
        pair.first.stats.current_hp = 20
        result = resolve(pair, make_rng(3))
        assert result.success is True
        assert result.loser.id == "a"
        assert result.loser.status == Status.FAINTED
        assert result.rounds == 0
