"""Tests for the arena controller and scene geometry."""

import pytest

from engine.arena import (
    add_combatant,
    apply_battle_result,
    create_arena,
    find_collision,
    inspect_roster,
    load_arena,
    recover_interrupted_battle,
    register_combatant,
    remove_combatant,
    save_arena,
    set_roam_target,
    tick,
)
from engine.battle import resolve
from engine.rng import make_rng
from engine.scene import RecordingSceneListener, in_bounds, intersects, reentry_position, step_toward
from engine.species import create_from_species, species_config
from models.arena import ArenaState, ArenaStatus
from models.battle import BattlePair, BattleResult
from models.combatant import Combatant
from models.enums import Status
from models.errors import FailureKind


def _make_combatant(uid: str, species: str = "Pikachu") -> Combatant:
    """Helper to create a catalogue combatant with a fixed id."""
    combatant, failure = create_from_species(species, unique_id=uid)
    assert failure is None
    return combatant


def _make_arena(*placements: tuple[str, tuple[int, int]]) -> ArenaState:
    """Helper to create a small arena with combatants at given positions."""
    arena = create_arena(200, 100, "Test Arena")
    for uid, position in placements:
        add_combatant(arena, _make_combatant(uid), position)
    return arena


class TestScene:
    """Tests for the scene geometry helpers."""

    def test_in_bounds(self):
        assert in_bounds((0, 0), 200, 100)
        assert in_bounds((199, 99), 200, 100)
        assert not in_bounds((200, 50), 200, 100)
        assert not in_bounds((-1, 50), 200, 100)

    def test_intersects(self):
        assert intersects((10, 10), (40, 40), (10, 10), (40, 40))
        assert intersects((10, 10), (40, 40), (49, 10), (40, 40))
        assert not intersects((10, 10), (40, 40), (50, 10), (40, 40))
        assert not intersects((10, 10), (40, 40), (10, 60), (40, 40))

    def test_step_toward(self):
        assert step_toward((0, 0), (10, 1), 3) == (3, 1)
        assert step_toward((9, 0), (10, 0), 3) == (10, 0)
        assert step_toward((10, 10), (4, 10), 3) == (7, 10)

    def test_reentry_is_centre(self):
        assert reentry_position(200, 100) == (100, 50)


class TestRoster:
    """Tests for adding, registering and removing combatants."""

    def test_add(self):
        arena = _make_arena(("a", (10, 10)))
        entry = arena.roster["a"]
        assert entry.position == (10, 10)
        assert arena.event_log[-1].event_type == "added"

    def test_add_duplicate(self):
        arena = _make_arena(("a", (10, 10)))
        with pytest.raises(ValueError, match="already"):
            add_combatant(arena, _make_combatant("a"), (50, 50))

    def test_add_out_of_bounds(self):
        arena = _make_arena()
        with pytest.raises(ValueError, match="out of bounds"):
            add_combatant(arena, _make_combatant("a"), (200, 10))

    def test_add_fainted(self):
        arena = _make_arena()
        c = _make_combatant("a")
        c.stats.current_hp = 0
        c.status = Status.FAINTED
        with pytest.raises(ValueError, match="fainted"):
            add_combatant(arena, c, (10, 10))

    def test_register_assigns_ids(self):
        arena = _make_arena()
        first, _ = register_combatant(arena, species_config("Pikachu"), (10, 10))
        second, _ = register_combatant(arena, species_config("Squirtle"), (150, 10))
        assert first.combatant.id == "1"
        assert second.combatant.id == "2"
        assert arena.next_id == 3

    def test_register_rejected(self):
        arena = _make_arena()
        cfg = species_config("Pikachu")
        cfg.moves = []
        entry, failure = register_combatant(arena, cfg, (10, 10))
        assert entry is None
        assert failure.kind == FailureKind.INVALID_MOVE_TOTAL
        assert arena.roster == {}
        assert arena.next_id == 1
        assert arena.event_log[-1].event_type == "rejected"

    def test_remove(self):
        arena = _make_arena(("a", (10, 10)))
        removed = remove_combatant(arena, "a")
        assert removed.id == "a"
        assert arena.roster == {}
        with pytest.raises(ValueError):
            remove_combatant(arena, "a")


class TestRoaming:
    """Tests for movement and culling during a tick."""

    def test_moves_toward_target(self):
        arena = _make_arena(("a", (100, 50)))
        set_roam_target(arena, "a", (106, 50))
        tick(arena, make_rng(1))
        assert arena.roster["a"].position == (103, 50)
        tick(arena, make_rng(1))
        assert arena.roster["a"].position == (106, 50)
        assert arena.roster["a"].target is None

    def test_unknown_target_combatant(self):
        arena = _make_arena()
        with pytest.raises(ValueError):
            set_roam_target(arena, "nobody", (0, 0))

    def test_out_of_bounds_is_culled(self):
        arena = _make_arena(("a", (1, 50)), ("b", (150, 50)))
        set_roam_target(arena, "a", (-10, 50))
        report = tick(arena, make_rng(1))
        assert report.culled == ["a"]
        assert "a" not in arena.roster
        assert "b" in arena.roster
        assert arena.event_log[-1].event_type == "culled"

    def test_no_collision_no_battle(self):
        arena = _make_arena(("a", (10, 10)), ("b", (150, 80)))
        report = tick(arena, make_rng(1))
        assert report.battle is None
        assert arena.tick == 1
        assert find_collision(arena) is None


class TestBattles:
    """Tests for collision-triggered battles."""

    def test_identical_positions_fight_once(self):
        arena = _make_arena(("a", (20, 20)), ("b", (20, 20)))
        report = tick(arena, make_rng(5))

        assert report.battle is not None
        assert report.battle.success is True
        assert len(arena.battle_history) == 1
        assert list(arena.roster) == [report.battle.winner.id]
        assert arena.roster[report.battle.winner.id].position == (100, 50)
        assert arena.status == ArenaStatus.ROAMING
        assert arena.active_pair is None

        assert tick(arena, make_rng(5)).battle is None

    def test_one_battle_per_tick(self):
        arena = _make_arena(("a", (20, 20)), ("b", (20, 20)), ("c", (170, 20)), ("d", (170, 20)))
        report = tick(arena, make_rng(5))
        assert {report.battle.winner.id, report.battle.loser.id} == {"a", "b"}
        assert "c" in arena.roster and "d" in arena.roster
        report = tick(arena, make_rng(5))
        assert {report.battle.winner.id, report.battle.loser.id} == {"c", "d"}

    def test_pair_leaves_roster_during_battle(self):
        arena = _make_arena(("a", (20, 20)), ("b", (20, 20)), ("c", (170, 80)))
        seen = {}

        def spy_engine(pair: BattlePair, rng) -> BattleResult:
            seen["roster"] = list(arena.roster)
            seen["status"] = arena.status
            with pytest.raises(ValueError, match="in progress"):
                tick(arena, rng)
            return resolve(pair, rng)

        tick(arena, make_rng(5), battle_engine=spy_engine)
        assert seen["roster"] == ["c"]
        assert seen["status"] == ArenaStatus.BATTLE_TRANSITION

    def test_engine_error_restores_pair(self):
        arena = _make_arena(("a", (20, 20)), ("b", (20, 20)))

        def broken_engine(pair: BattlePair, rng) -> BattleResult:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            tick(arena, make_rng(5), battle_engine=broken_engine)
        assert set(arena.roster) == {"a", "b"}
        assert arena.status == ArenaStatus.ROAMING

    def test_aborted_battle_drops_violator(self):
        arena = _make_arena(("a", (20, 20)), ("b", (20, 20)))
        arena.roster["a"].combatant.moves = []
        report = tick(arena, make_rng(5))

        assert report.battle.success is False
        assert report.battle.error_kind == FailureKind.INVALID_BATTLE_STATE
        assert list(arena.roster) == ["b"]
        assert arena.roster["b"].position == (100, 50)
        assert any(e.event_type == "battle_aborted" for e in arena.event_log)

    def test_apply_without_battle(self):
        arena = _make_arena()
        with pytest.raises(ValueError):
            apply_battle_result(arena, BattleResult(success=False))

    def test_listener_notifications(self):
        listener = RecordingSceneListener()
        arena = create_arena(200, 100)
        add_combatant(arena, _make_combatant("a"), (20, 20), listener)
        add_combatant(arena, _make_combatant("b"), (20, 20), listener)
        report = tick(arena, make_rng(5), listener)

        notes = listener.drain()
        assert [n.kind for n in notes] == [
            "entity_added", "entity_added",
            "entity_removed", "entity_removed",
            "scene_transition", "scene_transition",
            "entity_added",
        ]
        assert [n.entity_id for n in notes if n.kind == "entity_removed"] == ["a", "b"]
        assert [n.transition for n in notes if n.transition] == ["battle_start", "battle_end"]
        assert notes[-1].entity_id == report.battle.winner.id
        assert notes[-1].position == (100, 50)
        assert listener.drain() == []

    def test_loser_sprite_removed_and_not_readded(self):
        listener = RecordingSceneListener()
        arena = create_arena(200, 100)
        add_combatant(arena, _make_combatant("a"), (50, 50), listener)
        add_combatant(arena, _make_combatant("b"), (50, 50), listener)
        listener.drain()
        report = tick(arena, make_rng(5), listener)

        loser_id = report.battle.loser.id
        winner_id = report.battle.winner.id
        notes = listener.drain()
        removed = [n.entity_id for n in notes if n.kind == "entity_removed"]
        added = [n.entity_id for n in notes if n.kind == "entity_added"]
        assert loser_id in removed
        assert winner_id in removed
        assert added == [winner_id]

    def test_engine_error_readds_sprites(self):
        listener = RecordingSceneListener()
        arena = create_arena(200, 100)
        add_combatant(arena, _make_combatant("a"), (20, 20), listener)
        add_combatant(arena, _make_combatant("b"), (20, 20), listener)
        listener.drain()

        def broken_engine(pair: BattlePair, rng) -> BattleResult:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            tick(arena, make_rng(5), listener, battle_engine=broken_engine)
        kinds = [(n.kind, n.entity_id) for n in listener.drain() if n.kind != "scene_transition"]
        assert kinds == [
            ("entity_removed", "a"), ("entity_removed", "b"),
            ("entity_added", "a"), ("entity_added", "b"),
        ]

    def test_listener_buffer_is_bounded(self):
        listener = RecordingSceneListener(max_buffered=2)
        for i in range(5):
            listener.notify_entity_removed(str(i))
        assert [n.entity_id for n in listener.drain()] == ["3", "4"]


class TestInspection:
    """Tests for inspect_roster()."""

    def test_all_pass(self):
        arena = _make_arena(("a", (10, 10)), ("b", (150, 10)))
        reports = inspect_roster(arena)
        assert [r.passed for r in reports] == [True, True]
        assert len(arena.roster) == 2

    def test_violator_disqualified(self):
        arena = _make_arena(("a", (10, 10)), ("b", (150, 10)))
        arena.roster["b"].combatant.stats.attack = 500
        reports = inspect_roster(arena)

        assert [r.passed for r in reports] == [True, False]
        assert list(arena.roster) == ["a"]
        event = arena.event_log[-1]
        assert event.event_type == "disqualified"
        assert event.combatant_id == "b"
        assert event.details["failure_kind"] == FailureKind.INVALID_POKEMON_POINTS.value


class TestPersistence:
    """Tests for save_arena(), load_arena() and recovery."""

    def test_round_trip(self, tmp_path):
        arena = _make_arena(("a", (10, 10)), ("b", (150, 80)))
        tick(arena, make_rng(1))
        path = str(tmp_path / "arena.json")
        save_arena(arena, path)
        loaded = load_arena(path)
        assert loaded == arena

    def test_missing_file(self, tmp_path):
        assert load_arena(str(tmp_path / "nope.json")) is None

    def test_recover_interrupted_battle(self):
        arena = _make_arena(("c", (10, 10)))
        a = _make_combatant("a")
        b = _make_combatant("b")
        b.stats.current_hp = 0
        b.status = Status.FAINTED
        arena.status = ArenaStatus.BATTLE_TRANSITION
        arena.active_pair = BattlePair(first=a, second=b)

        recover_interrupted_battle(arena)
        assert arena.status == ArenaStatus.ROAMING
        assert arena.active_pair is None
        assert list(arena.roster) == ["c", "a"]
        assert arena.roster["a"].position == (100, 50)

    def test_recover_noop_when_roaming(self):
        arena = _make_arena(("a", (10, 10)))
        recover_interrupted_battle(arena)
        assert list(arena.roster) == ["a"]
