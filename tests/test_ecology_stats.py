"""
Unit tests for population statistics.
"""

import math

import pytest

import constants as C
from ecology_stats import (
    PopulationStatistics, SERIES_NAMES, count_populations, biodiversity_index, stability_index
)
from organisms import kill
from conftest import make_producer, make_consumer, make_decomposer


def sample(producers=0, herbivores=0):
    data = {name: 0 for name in SERIES_NAMES}
    data['producers'] = producers
    data['herbivores'] = herbivores
    return data


def test_biodiversity_is_zero_for_one_species():
    organisms = [make_producer(f"p{i}") for i in range(5)]
    assert biodiversity_index(organisms) == 0.0


def test_biodiversity_for_an_even_split():
    organisms = [make_producer(f"p{i}") for i in range(3)] + [make_decomposer(f"d{i}") for i in range(3)]
    assert biodiversity_index(organisms) == pytest.approx(math.log(2))


def test_biodiversity_ignores_the_dead():
    corpse = make_decomposer("d1")
    kill(corpse)
    assert biodiversity_index([make_producer("p1"), corpse]) == 0.0
    assert biodiversity_index([]) == 0.0


def test_count_populations_by_group():
    dead = make_producer("p-dead")
    kill(dead)
    organisms = [
        make_producer("p1"), make_producer("p2"), dead,
        make_consumer("h1", guild=C.GUILD_HERBIVORE),
        make_consumer("c1", guild=C.GUILD_CARNIVORE),
        make_consumer("o1", guild=C.GUILD_OMNIVORE),
        make_decomposer("d1"),
    ]
    assert count_populations(organisms) == {
        'producers': 2, 'herbivores': 1, 'carnivores': 1, 'omnivores': 1, 'decomposers': 1,
    }


def test_stability_is_one_without_enough_history():
    statistics = PopulationStatistics()
    for _ in range(C.STABILITY_WINDOW - 1):
        statistics.add_sample(sample(10, 0))
    assert stability_index(statistics) == 1.0


def test_stability_of_steady_populations():
    statistics = PopulationStatistics()
    for _ in range(C.STABILITY_WINDOW):
        statistics.add_sample(sample(40, 12))
    assert stability_index(statistics) == pytest.approx(1.0)


def test_stability_with_oscillating_producers():
    statistics = PopulationStatistics()
    for i in range(C.STABILITY_WINDOW):
        # Herbivores at zero contribute no variation.
        statistics.add_sample(sample(10 if i % 2 else 20, 0))
    # mean 15, mean absolute deviation 5
    assert stability_index(statistics) == pytest.approx(1 - (5 / 15) / 4)


def test_stability_after_a_population_crash():
    statistics = PopulationStatistics()
    for i in range(C.STABILITY_WINDOW):
        statistics.add_sample(sample(1000 if i == 0 else 0, 1000 if i == 0 else 0))
    # Each series: mean 100, mean absolute deviation 180
    assert stability_index(statistics) == pytest.approx(1 - (1.8 + 1.8) / 4)


def test_stability_only_looks_at_the_recent_window():
    statistics = PopulationStatistics()
    for _ in range(5):
        statistics.add_sample(sample(500, 500))
    for _ in range(C.STABILITY_WINDOW):
        statistics.add_sample(sample(40, 12))
    assert stability_index(statistics) == pytest.approx(1.0)


def test_truncate_keeps_most_recent_samples():
    statistics = PopulationStatistics()
    for i in range(30):
        statistics.add_sample(sample(i))
    statistics.truncate(10)
    assert len(statistics) == 10
    assert statistics.data['producers'] == list(range(20, 30))
    assert all(len(series) == 10 for series in statistics.data.values())


def test_statistics_round_trip():
    statistics = PopulationStatistics()
    statistics.add_sample(sample(3, 4))
    restored = PopulationStatistics.from_dict(statistics.to_dict())
    assert restored.to_dict() == statistics.to_dict()
    assert restored.latest()['herbivores'] == 4
