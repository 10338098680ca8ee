"""Shared fixtures: small seeded worlds and hand-built organisms."""

import numpy as np
import pytest

import constants as C
from config import SimulationConfig
from organisms import Organism
from traits import ConsumerTraits, DecomposerTraits, ProducerTraits
from world import World


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def small_config():
    return SimulationConfig(
        grid_width=12, grid_height=10,
        initial_producers=30, initial_herbivores=8, initial_carnivores=3,
        initial_omnivores=2, initial_decomposers=15,
        seed=7,
    )


@pytest.fixture
def world(small_config):
    return World(small_config)


@pytest.fixture
def empty_world():
    """A seeded world with terrain but no organisms."""
    config = SimulationConfig(
        grid_width=6, grid_height=6,
        initial_producers=0, initial_herbivores=0, initial_carnivores=0,
        initial_omnivores=0, initial_decomposers=0, seed=3,
    )
    return World(config)


def make_producer(organism_id="p1", position=(0, 0), **kwargs):
    return Organism(organism_id, C.KIND_PRODUCER, position, ProducerTraits(), species=C.SPECIES_PLANT, **kwargs)


def make_consumer(organism_id="c1", position=(0, 0), guild=C.GUILD_HERBIVORE,
                  hunting_efficiency=0.5, **kwargs):
    traits = ConsumerTraits(guild, hunting_efficiency=hunting_efficiency)
    return Organism(organism_id, C.KIND_CONSUMER, position, traits, **kwargs)


def make_decomposer(organism_id="d1", position=(0, 0), **kwargs):
    return Organism(organism_id, C.KIND_DECOMPOSER, position, DecomposerTraits(), **kwargs)
