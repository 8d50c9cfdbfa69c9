"""Species, move and item catalogues plus combatant construction."""

from __future__ import annotations

from uuid import uuid4

from pydantic import BaseModel

import config
from engine.moveset import add_item, add_move
from engine.stats import base_critical_hit_ratio, level_for_exp, points_allowance
from models.combatant import Combatant, CombatantConfig, StatBlock
from models.enums import MoveCategory, PokemonType, Stat, Status
from models.errors import Failure, FailureKind
from models.moves import Item, ItemEffect, Move

T = PokemonType

# ---------------------------------------------------------------------------
# Move catalogue
# ---------------------------------------------------------------------------


def _move(
    name: str,
    type: PokemonType,
    category: MoveCategory,
    power: int,
    accuracy: int,
    pp: int,
    status_effect: Status | None = None,
    status_chance: float = 0.0,
    description: str = "",
) -> Move:
    return Move(
        name=name,
        type=type,
        category=category,
        power=power,
        accuracy=accuracy,
        pp=pp,
        current_pp=pp,
        status_effect=status_effect,
        status_chance=status_chance,
        description=description,
        sound_id=name.lower().replace(" ", "_"),
    )


_MOVE_LIST = [
    _move("Tackle", T.NORMAL, MoveCategory.PHYSICAL, 40, 100, 35,
          description="A physical attack in which the user charges and slams into the target."),
    _move("Scratch", T.NORMAL, MoveCategory.PHYSICAL, 40, 100, 35,
          description="Hard, pointed, sharp claws rake the target."),
    _move("Quick Attack", T.NORMAL, MoveCategory.PHYSICAL, 40, 100, 30,
          description="The user lunges at the target at a speed that makes it almost invisible."),
    _move("Wrap", T.NORMAL, MoveCategory.PHYSICAL, 15, 90, 20, Status.BOUND, 1.0,
          description="A long body or vines are used to wrap and squeeze the target."),
    _move("Supersonic", T.NORMAL, MoveCategory.STATUS, 0, 55, 20, Status.CONFUSION, 1.0,
          description="The user generates odd sound waves that confuse the target."),
    _move("Thunder Shock", T.ELECTRIC, MoveCategory.SPECIAL, 40, 100, 30, Status.PARALYSIS, 0.1,
          description="A jolt of electricity crashes down on the target."),
    _move("Thunder", T.ELECTRIC, MoveCategory.SPECIAL, 110, 70, 10, Status.PARALYSIS, 0.3,
          description="A wicked thunderbolt is dropped on the target."),
    _move("Thunder Punch", T.ELECTRIC, MoveCategory.PHYSICAL, 75, 100, 15, Status.PARALYSIS, 0.1,
          description="The target is punched with an electrified fist."),
    _move("Thunder Wave", T.ELECTRIC, MoveCategory.STATUS, 0, 90, 20, Status.PARALYSIS, 1.0,
          description="The user launches a weak jolt of electricity that paralyzes the target."),
    _move("Ember", T.FIRE, MoveCategory.SPECIAL, 40, 100, 25, Status.BURN, 0.1,
          description="The target is attacked with small flames."),
    _move("Flamethrower", T.FIRE, MoveCategory.SPECIAL, 90, 100, 15, Status.BURN, 0.1,
          description="The target is scorched with an intense blast of fire."),
    _move("Water Gun", T.WATER, MoveCategory.SPECIAL, 40, 100, 25,
          description="The target is blasted with a forceful shot of water."),
    _move("Bubble", T.WATER, MoveCategory.SPECIAL, 40, 100, 30,
          description="A spray of countless bubbles is jetted at the opposing Pokemon."),
    _move("Vine Whip", T.GRASS, MoveCategory.PHYSICAL, 45, 100, 25,
          description="The target is struck with slender, whiplike vines."),
    _move("Sleep Powder", T.GRASS, MoveCategory.STATUS, 0, 75, 15, Status.SLEEP, 1.0,
          description="The user scatters a big cloud of sleep-inducing dust."),
    _move("Poison Sting", T.POISON, MoveCategory.PHYSICAL, 15, 100, 35, Status.POISON, 0.3,
          description="The user stabs the target with a poisonous stinger."),
    _move("Ice Beam", T.ICE, MoveCategory.SPECIAL, 90, 100, 10, Status.FREEZE, 0.1,
          description="The target is struck with an icy-cold beam of energy."),
    _move("Rock Throw", T.ROCK, MoveCategory.PHYSICAL, 50, 90, 15,
          description="The user picks up and throws a small rock at the target."),
    _move("Psybeam", T.PSYCHIC, MoveCategory.SPECIAL, 65, 100, 20, Status.CONFUSION, 0.1,
          description="The target is attacked with a peculiar ray."),
    _move("Lick", T.GHOST, MoveCategory.PHYSICAL, 30, 100, 30, Status.PARALYSIS, 0.3,
          description="The target is licked with a long tongue."),
]

MOVES: dict[str, Move] = {m.name.lower(): m for m in _MOVE_LIST}

# Used when a combatant has no PP left on any move. Typeless and never misses.
STRUGGLE = _move(
    "Struggle", T.NORMAL, MoveCategory.PHYSICAL, config.STRUGGLE_POWER, 100, 1,
    description="An attack used only when there is no PP left.",
)

# ---------------------------------------------------------------------------
# Item catalogue
# ---------------------------------------------------------------------------

_ITEM_LIST = [
    Item(name="Potion", effect=ItemEffect(heal_hp=20),
         description="Restores 20 HP.", image_id="potion"),
    Item(name="Super Potion", effect=ItemEffect(heal_hp=50),
         description="Restores 50 HP.", image_id="super_potion"),
    Item(name="Antidote", effect=ItemEffect(cures=[Status.POISON]),
         description="Cures poison.", image_id="antidote"),
    Item(name="Burn Heal", effect=ItemEffect(cures=[Status.BURN]),
         description="Heals a burn.", image_id="burn_heal"),
    Item(name="Paralyze Heal", effect=ItemEffect(cures=[Status.PARALYSIS]),
         description="Cures paralysis.", image_id="paralyze_heal"),
    Item(name="Awakening", effect=ItemEffect(cures=[Status.SLEEP]),
         description="Wakes a sleeping Pokemon.", image_id="awakening"),
    Item(name="Ice Heal", effect=ItemEffect(cures=[Status.FREEZE]),
         description="Thaws a frozen Pokemon.", image_id="ice_heal"),
    Item(
        name="Full Heal",
        effect=ItemEffect(cures=[
            Status.BURN, Status.FREEZE, Status.PARALYSIS, Status.POISON,
            Status.SLEEP, Status.BOUND, Status.CONFUSION,
        ]),
        description="Cures every status condition.",
        image_id="full_heal",
    ),
    Item(name="X Attack", effect=ItemEffect(stat_boosts={Stat.ATTACK: 10}),
         description="Raises Attack for the battle.", image_id="x_attack"),
    Item(name="X Defend", effect=ItemEffect(stat_boosts={Stat.DEFENSE: 10}),
         description="Raises Defense for the battle.", image_id="x_defend"),
    Item(name="X Speed", effect=ItemEffect(stat_boosts={Stat.SPEED: 10}),
         description="Raises Speed for the battle.", image_id="x_speed"),
    Item(name="Dire Hit", effect=ItemEffect(critical_hit_boost=0.25),
         description="Raises the critical-hit ratio.", image_id="dire_hit"),
    Item(name="PP Max", effect=ItemEffect(restore_pp=10),
         description="Restores 10 PP to every move.", image_id="pp_max"),
]

ITEMS: dict[str, Item] = {i.name.lower(): i for i in _ITEM_LIST}

# ---------------------------------------------------------------------------
# Species catalogue
# ---------------------------------------------------------------------------


class SpeciesInfo(BaseModel):
    """Data describing a species. Species are data, not subclasses."""
    name: str
    type: PokemonType
    number: int
    hp: int
    attack: int
    defense: int
    special_attack: int
    special_defense: int
    speed: int
    evasion: int
    accuracy: int
    moves: list[str]
    items: list[str] = []            # Repeats stack into quantities
    height: float = 0.0
    weight: float = 0.0
    description: str = ""
    base_exp_yield: int = 64
    image_id: str | None = None
    battle_image_id: str | None = None
    cry_id: str | None = None


def _species(**kwargs) -> SpeciesInfo:
    key = kwargs["name"].lower()
    kwargs.setdefault("image_id", f"{key}_sm")
    kwargs.setdefault("battle_image_id", f"battle_{key}")
    kwargs.setdefault("cry_id", f"{key}_cry")
    return SpeciesInfo(**kwargs)


SPECIES: dict[str, SpeciesInfo] = {
    s.name.lower(): s
    for s in [
        _species(
            name="Pikachu", type=T.ELECTRIC, number=25,
            hp=20, attack=15, defense=20, special_attack=35,
            special_defense=15, speed=45, evasion=20, accuracy=15,
            moves=["Thunder Shock", "Thunder", "Thunder Punch"],
            items=["Potion", "Potion", "Potion", "PP Max"],
            height=1.4, weight=13.0, base_exp_yield=82,
            description=(
                "It stores electricity in the electric sacs on its cheeks. "
                "When it releases pent-up energy in a burst, the electric "
                "power is equal to a lightning bolt."
            ),
        ),
        _species(
            name="Charmander", type=T.FIRE, number=4,
            hp=25, attack=30, defense=15, special_attack=30,
            special_defense=15, speed=35, evasion=15, accuracy=20,
            moves=["Scratch", "Ember", "Flamethrower"],
            items=["Potion", "Burn Heal"],
            height=2.0, weight=18.7, base_exp_yield=62,
            description=(
                "The flame on its tail shows the strength of its life force. "
                "If it is weak, the flame also burns weakly."
            ),
        ),
        _species(
            name="Squirtle", type=T.WATER, number=7,
            hp=30, attack=20, defense=35, special_attack=25,
            special_defense=30, speed=15, evasion=15, accuracy=15,
            moves=["Tackle", "Water Gun", "Bubble"],
            items=["Potion", "Potion"],
            height=1.8, weight=19.8, base_exp_yield=63,
            description=(
                "When it feels threatened, it draws its limbs inside its shell "
                "and sprays water from its mouth."
            ),
        ),
        _species(
            name="Bulbasaur", type=T.GRASS, number=1,
            hp=30, attack=20, defense=25, special_attack=35,
            special_defense=30, speed=15, evasion=15, accuracy=15,
            moves=["Tackle", "Vine Whip", "Sleep Powder"],
            items=["Potion", "Antidote"],
            height=2.4, weight=15.2, base_exp_yield=64,
            description=(
                "There is a plant seed on its back right from the day this "
                "Pokemon is born. The seed slowly grows larger."
            ),
        ),
        _species(
            name="Eevee", type=T.NORMAL, number=133,
            hp=30, attack=25, defense=25, special_attack=20,
            special_defense=30, speed=25, evasion=15, accuracy=10,
            moves=["Tackle", "Quick Attack", "Supersonic", "Wrap"],
            items=["Potion", "Full Heal"],
            height=1.0, weight=14.3, base_exp_yield=65,
            description=(
                "It has the ability to alter the composition of its body to "
                "suit its surrounding environment."
            ),
        ),
    ]
}


def get_move(name: str) -> Move:
    """Return a fresh copy of a catalogue move.

    Raises:
        ValueError: If the move is not in the catalogue.
    """
    move = MOVES.get(name.lower())
    if move is None:
        raise ValueError(f"Unknown move: {name}")
    return move.model_copy(deep=True)


def get_item(name: str) -> Item:
    """Return a fresh single unit of a catalogue item.

    Raises:
        ValueError: If the item is not in the catalogue.
    """
    item = ITEMS.get(name.lower())
    if item is None:
        raise ValueError(f"Unknown item: {name}")
    return item.model_copy(deep=True)


def species_config(name: str, exp: int = 0) -> CombatantConfig:
    """Build the construction input for a catalogue species.

    Raises:
        ValueError: If the species is not in the catalogue.
    """
    info = SPECIES.get(name.lower())
    if info is None:
        raise ValueError(f"Unknown species: {name}")
    return CombatantConfig(
        name=info.name,
        species=info.name,
        type=info.type.value,
        hp=info.hp,
        attack=info.attack,
        defense=info.defense,
        special_attack=info.special_attack,
        special_defense=info.special_defense,
        speed=info.speed,
        evasion=info.evasion,
        accuracy=info.accuracy,
        exp=exp,
        moves=list(info.moves),
        items=list(info.items),
        height=info.height,
        weight=info.weight,
        description=info.description,
        number=info.number,
        base_exp_yield=info.base_exp_yield,
        image_id=info.image_id,
        battle_image_id=info.battle_image_id,
        cry_id=info.cry_id,
    )


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


def create_combatant(
    combatant_config: CombatantConfig,
    unique_id: str | None = None,
) -> tuple[Combatant | None, Failure | None]:
    """Build a validated Combatant from a configuration record.

    Checks, in order: move count, type, stat values, experience and the
    point budget for the combatant's level. Each learned move then costs
    NEW_MOVE_COST points and must suit the combatant's type.

    Args:
        combatant_config: The construction input.
        unique_id: Identifier to give the combatant. Defaults to a UUID.

    Returns:
        (combatant, failure) tuple with exactly one side set.

    Raises:
        ValueError: If a move or item name is not in the catalogue.
    """
    cfg = combatant_config
    move_count = len(cfg.moves)
    if not config.MIN_NUMBER_OF_MOVES <= move_count <= config.MAX_NUMBER_OF_MOVES:
        return None, Failure(
            kind=FailureKind.INVALID_MOVE_TOTAL,
            message=(
                f"{cfg.name} has {move_count} moves; must have between "
                f"{config.MIN_NUMBER_OF_MOVES} and {config.MAX_NUMBER_OF_MOVES}"
            ),
        )

    ptype = PokemonType.parse(cfg.type)
    if ptype is None:
        return None, Failure(kind=FailureKind.INVALID_TYPE, message=f"Unknown type: {cfg.type}")

    values = {stat: getattr(cfg, stat.value) for stat in Stat}
    for stat, value in values.items():
        if value < config.MIN_ATTRIBUTE:
            return None, Failure(
                kind=FailureKind.INVALID_POKEMON_VALUES,
                message=f"{cfg.name} {stat.value} is {value}; minimum is {config.MIN_ATTRIBUTE}",
            )

    if cfg.exp < 0:
        return None, Failure(
            kind=FailureKind.INVALID_EXP,
            message=f"{cfg.name} experience cannot be negative (got {cfg.exp})",
        )
    if cfg.wins < 0 or cfg.evolutions < 0:
        return None, Failure(
            kind=FailureKind.INVALID_POKEMON_VALUES,
            message=f"{cfg.name} wins and evolutions cannot be negative",
        )

    moves = [get_move(m) if isinstance(m, str) else m.model_copy(deep=True) for m in cfg.moves]
    for move in moves:
        if move.current_pp < 0 or move.current_pp > move.pp:
            return None, Failure(
                kind=FailureKind.INVALID_POKEMON_VALUES,
                message=f"{move.name} has {move.current_pp} of {move.pp} PP",
            )
        if move.power < 0 or not 0 <= move.accuracy <= 100 or not 0.0 <= move.status_chance <= 1.0:
            return None, Failure(
                kind=FailureKind.INVALID_POKEMON_VALUES,
                message=(
                    f"{move.name} has power {move.power}, accuracy {move.accuracy} "
                    f"and status chance {move.status_chance}"
                ),
            )
    items = [get_item(i) if isinstance(i, str) else i.model_copy(deep=True) for i in cfg.items]

    level = level_for_exp(cfg.exp)
    allowance = points_allowance(level)
    stat_total = sum(values.values())
    spent = stat_total + move_count * config.NEW_MOVE_COST
    if spent > allowance:
        return None, Failure(
            kind=FailureKind.INVALID_POKEMON_POINTS,
            message=f"{cfg.name} spends {spent} points; level {level} allows {allowance}",
        )

    crit = base_critical_hit_ratio(cfg.speed)
    stats = StatBlock(
        hp=cfg.hp, current_hp=cfg.hp,
        attack=cfg.attack, current_attack=cfg.attack,
        defense=cfg.defense, current_defense=cfg.defense,
        special_attack=cfg.special_attack, current_special_attack=cfg.special_attack,
        special_defense=cfg.special_defense, current_special_defense=cfg.special_defense,
        speed=cfg.speed, current_speed=cfg.speed,
        evasion=cfg.evasion, current_evasion=cfg.evasion,
        accuracy=cfg.accuracy, current_accuracy=cfg.accuracy,
        critical_hit_ratio=crit,
        current_critical_hit_ratio=crit,
        points=allowance - stat_total,
        exp=cfg.exp,
        level=level,
    )
    combatant = Combatant(
        id=unique_id or str(uuid4()),
        name=cfg.name,
        species=cfg.species,
        type=ptype,
        stats=stats,
        wins=cfg.wins,
        evolutions=cfg.evolutions,
        height=cfg.height,
        weight=cfg.weight,
        description=cfg.description,
        number=cfg.number,
        base_exp_yield=cfg.base_exp_yield,
        image_id=cfg.image_id,
        battle_image_id=cfg.battle_image_id,
        cry_id=cfg.cry_id,
    )

    for move in moves:
        failure = add_move(combatant, move)
        if failure is not None:
            return None, failure
    for item in items:
        add_item(combatant, item)

    return combatant, None


def create_from_species(
    name: str,
    unique_id: str | None = None,
    exp: int = 0,
) -> tuple[Combatant | None, Failure | None]:
    """Build a combatant from the species catalogue.

    Raises:
        ValueError: If the species is not in the catalogue.
    """
    return create_combatant(species_config(name, exp=exp), unique_id)
