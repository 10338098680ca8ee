"""
Unit tests for the organism rules.

Tests cover:
- Defaults and the producer movement rule
- Aging and death
- Reproduction energy split and trait jitter
- Producer photosynthesis and growth
- Consumer metabolism, diet capability and hunting
- Decomposer passive decomposition and corpse consumption
- Attribute flattening
"""

import numpy as np
import pytest

import constants as C
from organisms import (
    Organism, age_organism, move_organism, can_reproduce, reproduce, kill,
    update_producer, update_consumer, update_decomposer, can_eat, eat, decompose,
    hunt_success_chance, to_attributes, from_attributes, _decomposer_temperature_factor,
)
from conftest import make_producer, make_consumer, make_decomposer


def make_env(**overrides):
    env = {
        'temperature': 25.0, 'rainfall': 100.0, 'seasonal_factor': 1.0,
        'nutrient_level': 50.0, 'sunlight_intensity': 100.0, 'pollution_level': 0.0,
        'season': C.SEASON_SUMMER, 'day': 1, 'width': 10, 'height': 10,
    }
    env.update(overrides)
    return env


# ---------------------------------------------------------------------------
# Defaults and lifecycle
# ---------------------------------------------------------------------------

def test_defaults():
    organism = Organism("x", C.KIND_CONSUMER, (1, 2))
    assert organism.energy == 100
    assert organism.size == 1
    assert organism.max_age == 100
    assert organism.reproduction_energy == 150
    assert organism.reproduction_rate == 0.2
    assert organism.movement_cost == 1
    assert organism.species == "Basic Consumer"
    assert organism.traits.diet_guild == C.GUILD_HERBIVORE
    assert organism.traits.diet == []


def test_producers_never_pay_to_move():
    producer = make_producer(movement_cost=5.0)
    assert producer.movement_cost == 0.0


def test_unknown_kind_is_rejected():
    with pytest.raises(ValueError):
        Organism("x", "Fungus", (0, 0))


def test_age_reaching_max_age_kills():
    organism = make_consumer(max_age=2)
    assert age_organism(organism) is True
    assert age_organism(organism) is False
    assert organism.is_dead
    assert organism.age == 2


def test_age_is_a_no_op_when_dead():
    organism = make_consumer()
    kill(organism)
    assert age_organism(organism) is False
    assert organism.age == 0


def test_energy_depletion_kills_on_next_age():
    organism = make_consumer(energy=0.0)
    assert age_organism(organism) is False
    assert organism.is_dead


def test_kill_is_idempotent():
    organism = make_consumer()
    kill(organism)
    kill(organism)
    assert organism.is_dead


def test_move_charges_movement_cost():
    organism = make_consumer(movement_cost=2.5)
    move_organism(organism, (3, 4))
    assert organism.position == (3, 4)
    assert organism.energy == pytest.approx(97.5)


# ---------------------------------------------------------------------------
# Reproduction
# ---------------------------------------------------------------------------

def test_can_reproduce_requires_energy():
    rng = np.random.default_rng(0)
    organism = make_consumer(energy=10.0, reproduction_energy=150.0, reproduction_rate=1.0)
    assert not can_reproduce(organism, rng)
    organism.energy = 200.0
    assert can_reproduce(organism, rng)


def test_reproduce_splits_energy_in_half(rng):
    parent = make_consumer(energy=200.0)
    offspring = reproduce(parent, rng, "child")
    assert parent.energy == pytest.approx(100.0)
    assert offspring.energy == pytest.approx(100.0)
    assert offspring.id == "child"
    assert offspring.kind == parent.kind
    assert offspring.species == parent.species
    assert offspring.age == 0
    assert not offspring.is_dead


def test_reproduce_jitters_traits_within_ten_percent(rng):
    parent = make_decomposer(energy=300.0, size=2.0, max_age=80, reproduction_energy=120.0,
                             reproduction_rate=0.3, movement_cost=0.5)
    for i in range(200):
        offspring = reproduce(parent, rng, f"child-{i}")
        assert 1.8 <= offspring.size <= 2.2
        assert 72 <= offspring.max_age <= 88
        assert 108 <= offspring.reproduction_energy <= 132
        assert 0.27 <= offspring.reproduction_rate <= 0.33
        assert 0.45 <= offspring.movement_cost <= 0.55


def test_offspring_traits_are_independent_copies(rng):
    parent = make_consumer(energy=200.0)
    parent.traits.diet.append(C.SPECIES_PLANT)
    offspring = reproduce(parent, rng, "child")
    offspring.traits.diet.append("Other")
    assert parent.traits.diet == [C.SPECIES_PLANT]


# ---------------------------------------------------------------------------
# Producers
# ---------------------------------------------------------------------------

def test_producer_photosynthesis_under_ideal_conditions():
    producer = make_producer(energy=100.0)
    update_producer(producer, make_env(), 100.0, 100.0)
    # 0.25 photosynthesis * 1 * 1 * 12
    assert producer.energy == pytest.approx(103.0)
    assert producer.size == pytest.approx(1.0)


def test_producer_grows_when_rich_and_well_supplied():
    producer = make_producer(energy=120.0)
    update_producer(producer, make_env(), 100.0, 100.0)
    assert producer.size == pytest.approx(1.1)
    assert producer.energy == pytest.approx(123.0 - 8.0)


def test_producer_limited_by_scarcer_resource():
    producer = make_producer(energy=100.0)
    update_producer(producer, make_env(), 100.0, 50.0)
    assert producer.energy == pytest.approx(101.5)


def test_producer_seasonal_floor_and_pollution():
    producer = make_producer(energy=100.0)
    update_producer(producer, make_env(seasonal_factor=0.0, pollution_level=50.0), 100.0, 100.0)
    # 3.0 * 0.3 seasonal floor * 0.5 pollution
    assert producer.energy == pytest.approx(100.45)


def test_dead_producer_does_not_photosynthesize():
    producer = make_producer(max_age=1)
    update_producer(producer, make_env(), 100.0, 100.0)
    assert producer.is_dead
    assert producer.energy == 100.0


# ---------------------------------------------------------------------------
# Consumers
# ---------------------------------------------------------------------------

def test_consumer_metabolism_at_optimum():
    consumer = make_consumer(energy=100.0)
    update_consumer(consumer, make_env(temperature=22.0, seasonal_factor=1.0))
    # size 1 * 0.08 * temp factor 1 * season factor 0.9
    assert consumer.energy == pytest.approx(100.0 - 0.072)


def test_consumer_temperature_factor_is_capped():
    consumer = make_consumer(energy=100.0)
    update_consumer(consumer, make_env(temperature=-100.0, seasonal_factor=0.0))
    assert consumer.energy == pytest.approx(100.0 - 0.08 * 1.5 * 1.3)


@pytest.mark.parametrize("guild, target_kind, expected", [
    (C.GUILD_HERBIVORE, C.KIND_PRODUCER, True),
    (C.GUILD_HERBIVORE, C.KIND_CONSUMER, False),
    (C.GUILD_CARNIVORE, C.KIND_PRODUCER, False),
    (C.GUILD_CARNIVORE, C.KIND_CONSUMER, True),
    (C.GUILD_OMNIVORE, C.KIND_PRODUCER, True),
    (C.GUILD_OMNIVORE, C.KIND_CONSUMER, True),
    (C.GUILD_OMNIVORE, C.KIND_DECOMPOSER, False),
])
def test_can_eat_follows_diet_guild(guild, target_kind, expected):
    consumer = make_consumer(guild=guild)
    target = Organism("t", target_kind, (0, 0))
    assert can_eat(consumer, target) is expected


def test_eat_returns_zero_when_prey_is_dead(rng):
    hunter = make_consumer(guild=C.GUILD_CARNIVORE, hunting_efficiency=10.0)
    prey = make_consumer("c2")
    kill(prey)
    assert eat(hunter, prey, rng) == 0.0
    assert hunter.energy == 100.0


def test_successful_hunt_transfers_energy(rng):
    hunter = make_consumer(guild=C.GUILD_CARNIVORE, hunting_efficiency=10.0)
    prey = make_consumer("c2", energy=50.0)
    gain = eat(hunter, prey, rng)
    assert gain == pytest.approx(40.0)
    assert hunter.energy == pytest.approx(140.0)
    assert prey.is_dead


def test_failed_hunt_costs_energy(rng):
    hunter = make_consumer(guild=C.GUILD_CARNIVORE, hunting_efficiency=0.0, movement_cost=2.0)
    prey = make_consumer("c2")
    assert eat(hunter, prey, rng) == 0.0
    assert hunter.energy == pytest.approx(97.0)
    assert not prey.is_dead


def test_hunt_chance_formula():
    hunter = make_consumer(hunting_efficiency=0.6, size=2.0)
    prey = make_producer(size=1.0)
    assert hunt_success_chance(hunter, prey) == pytest.approx(0.6 / 0.8)


def test_hunting_success_rate_matches_formula():
    rng = np.random.default_rng(99)
    hunter = make_consumer(guild=C.GUILD_CARNIVORE, hunting_efficiency=1.0)
    prey = make_consumer("c2")
    trials = 100_000
    successes = 0
    for _ in range(trials):
        prey.is_dead = False
        prey.energy = 100.0
        hunter.energy = 100.0
        if eat(hunter, prey, rng) > 0:
            successes += 1
    assert successes / trials == pytest.approx(1 / 1.3, abs=0.01)


# ---------------------------------------------------------------------------
# Decomposers
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("temperature, expected", [
    (-5.0, 0.2),
    (7.5, 0.6),
    (15.0, 1.0),
    (25.0, 1.0),
    (35.0, 1.0),
    (37.5, 0.9),
    (45.0, 0.6),
])
def test_decomposer_temperature_response(temperature, expected):
    assert _decomposer_temperature_factor(temperature) == pytest.approx(expected)


def test_decomposer_without_dead_matter_produces_nothing():
    decomposer = make_decomposer()
    assert update_decomposer(decomposer, make_env(), 0) == 0.0
    assert decomposer.energy == 100.0


def test_decomposer_with_saturated_dead_matter():
    decomposer = make_decomposer()
    nutrients = update_decomposer(decomposer, make_env(rainfall=100.0, temperature=25.0), 4)
    # efficiency = 0.35 * 1 * 1 * 1
    assert decomposer.energy == pytest.approx(100.0 + 0.35 * 12 * 4)
    assert nutrients == pytest.approx(0.25 * 0.35 * 4)


def test_decomposer_growth_when_well_fed():
    decomposer = make_decomposer(energy=140.0)
    update_decomposer(decomposer, make_env(), 4)
    assert decomposer.size == pytest.approx(1.06)
    assert decomposer.energy == pytest.approx(140.0 + 16.8 - 4.0)


def test_decompose_corpse():
    decomposer = make_decomposer()
    corpse = make_producer(size=2.0)
    kill(corpse)
    assert decompose(decomposer, corpse) == pytest.approx(0.5)
    assert decomposer.energy == pytest.approx(104.2)


def test_dead_decomposer_cannot_decompose():
    decomposer = make_decomposer()
    kill(decomposer)
    assert decompose(decomposer, make_producer()) == 0.0


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------

def test_attributes_are_flat_and_restorable():
    consumer = make_consumer(position=(3, 4), guild=C.GUILD_OMNIVORE, energy=77.0)
    consumer.traits.diet = [C.SPECIES_PLANT, C.SPECIES_HERBIVORE]
    attributes = to_attributes(consumer)
    assert attributes['position'] == {'x': 3, 'y': 4}
    assert attributes['diet_guild'] == C.GUILD_OMNIVORE
    assert attributes['kind'] == C.KIND_CONSUMER

    restored = from_attributes(attributes)
    assert to_attributes(restored) == attributes
