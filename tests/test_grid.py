"""
Unit tests for the spatial grid.

Tests cover:
- Cell lookup and bounds
- Occupancy bookkeeping (add, remove, atomic move)
- Neighbourhood queries and offspring placement
- Per-tick resource dynamics
- Disturbance damage
- Terrain generation and serialization
"""

import numpy as np
import pytest

import constants as C
from grid import Grid


def make_env(**overrides):
    env = {
        'temperature': 20.0, 'rainfall': 50.0, 'seasonal_factor': 1.0,
        'nutrient_level': 50.0, 'sunlight_intensity': 80.0, 'pollution_level': 10.0,
        'season': C.SEASON_SPRING, 'day': 1, 'width': 3, 'height': 3,
    }
    env.update(overrides)
    return env


AREA_ALL = {'start_x': 0, 'start_y': 0, 'end_x': 2, 'end_y': 2}


# ---------------------------------------------------------------------------
# Cells and occupancy
# ---------------------------------------------------------------------------

def test_get_cell_out_of_bounds_returns_none():
    grid = Grid(3, 2)
    assert grid.get_cell((3, 0)) is None
    assert grid.get_cell((0, 2)) is None
    assert grid.get_cell((-1, 0)) is None
    assert grid.get_cell((2, 1)).position == (2, 1)


def test_cell_view_writes_through_to_arrays():
    grid = Grid(3, 3)
    cell = grid.get_cell((2, 1))
    cell.nutrient_level = 12.5
    assert grid.nutrients[1, 2] == 12.5
    assert grid.get_cell((2, 1)).nutrient_level == 12.5


def test_add_and_remove_organism():
    grid = Grid(3, 3)
    assert grid.add_organism("a", (1, 1))
    assert grid.get_cell((1, 1)).organisms == ["a"]
    assert not grid.add_organism("b", (5, 5))
    assert grid.remove_organism("a", (1, 1))
    assert not grid.remove_organism("a", (1, 1))
    assert grid.get_cell((1, 1)).organisms == []


def test_move_organism():
    grid = Grid(3, 3)
    grid.add_organism("a", (0, 0))
    assert grid.move_organism("a", (0, 0), (2, 2))
    assert grid.get_cell((0, 0)).organisms == []
    assert grid.get_cell((2, 2)).organisms == ["a"]


def test_move_out_of_bounds_leaves_grid_untouched():
    grid = Grid(3, 3)
    grid.add_organism("a", (0, 0))
    assert not grid.move_organism("a", (0, 0), (3, 0))
    assert grid.get_cell((0, 0)).organisms == ["a"]


def test_move_of_absent_id_fails():
    grid = Grid(3, 3)
    grid.add_organism("a", (0, 0))
    assert not grid.move_organism("b", (0, 0), (1, 1))
    assert grid.get_cell((1, 1)).organisms == []


def test_nearby_organisms_are_clipped_to_grid():
    grid = Grid(5, 5)
    grid.add_organism("a", (0, 0))
    grid.add_organism("b", (1, 1))
    grid.add_organism("c", (3, 3))
    assert sorted(grid.get_nearby_organisms((0, 0), 1)) == ["a", "b"]
    assert sorted(grid.get_nearby_organisms((2, 2), 1)) == ["b", "c"]
    assert sorted(grid.get_nearby_organisms((2, 2), 5)) == ["a", "b", "c"]


# ---------------------------------------------------------------------------
# Offspring placement
# ---------------------------------------------------------------------------

def test_find_available_position_on_single_cell(rng):
    grid = Grid(1, 1)
    assert grid.find_available_position((0, 0), 3, rng) == (0, 0)


def test_find_available_position_on_full_single_cell(rng):
    grid = Grid(1, 1)
    for i in range(C.PLACEMENT_MAX_OCCUPANTS):
        grid.add_organism(f"o{i}", (0, 0))
    assert grid.find_available_position((0, 0), 3, rng) is None


def test_full_cell_on_high_ground_still_accepts(rng):
    grid = Grid(1, 1)
    grid.elevation[0, 0] = 2.0
    for i in range(C.PLACEMENT_MAX_OCCUPANTS + 5):
        grid.add_organism(f"o{i}", (0, 0))
    assert grid.find_available_position((0, 0), 1, rng) == (0, 0)


def test_find_available_position_stays_in_square(rng):
    grid = Grid(10, 10)
    for _ in range(200):
        x, y = grid.find_available_position((5, 5), 2, rng)
        assert 3 <= x <= 7 and 3 <= y <= 7


def test_find_available_position_avoids_full_cells(rng):
    grid = Grid(2, 1)
    for i in range(C.PLACEMENT_MAX_OCCUPANTS):
        grid.add_organism(f"o{i}", (0, 0))
    for _ in range(50):
        assert grid.find_available_position((0, 0), 1, rng) == (1, 0)


# ---------------------------------------------------------------------------
# Resource dynamics
# ---------------------------------------------------------------------------

def test_add_nutrients_clamps_to_ceiling():
    grid = Grid(2, 2)
    grid.add_nutrients((0, 0), 500.0)
    assert grid.nutrients[0, 0] == C.NUTRIENT_CEILING
    assert not grid.add_nutrients((9, 9), 1.0)


def test_total_nutrients():
    grid = Grid(2, 2)
    grid.nutrients[:] = 10.0
    assert grid.total_nutrients() == pytest.approx(40.0)


def test_water_balance_on_flat_ground():
    grid = Grid(3, 3)
    grid.water[:] = 50.0
    grid.update_environment(make_env(temperature=20.0, rainfall=50.0, seasonal_factor=1.0))
    # 50 * (1 - 0.08) + 50 * 0.15
    assert grid.water[1, 1] == pytest.approx(53.5)


def test_water_capped_by_elevation():
    grid = Grid(3, 3)
    grid.elevation[:] = 3.0
    grid.water[:] = 100.0
    grid.update_environment(make_env(rainfall=100.0))
    assert np.all(grid.water <= 20.0)
    assert np.all(grid.water >= 0.0)


def test_nutrient_diffusion_spreads_from_a_spike():
    grid = Grid(3, 3)
    grid.nutrients[:] = 0.0
    grid.nutrients[1, 1] = 100.0
    grid.update_environment(make_env())
    # The centre is not higher than its neighbours, so flow uses the 0.7 modifier.
    assert grid.nutrients[1, 1] == pytest.approx(100.0 - 0.7)
    # An edge cell has three neighbours, one of them the spike.
    assert grid.nutrients[0, 1] == pytest.approx(70.0 * 0.01 / 3)
    assert grid.nutrients[0, 0] == pytest.approx(0.0)


def test_nutrients_flow_downhill_faster():
    grid = Grid(2, 1)
    grid.nutrients[0, 0] = 0.0
    grid.nutrients[0, 1] = 100.0
    grid.elevation[0, 0] = 1.0
    grid.update_environment(make_env())
    # The high cell pulls with the downhill modifier, the low one with the uphill modifier.
    assert grid.nutrients[0, 0] == pytest.approx(100.0 * 1.5 * 0.01)
    assert grid.nutrients[0, 1] == pytest.approx(100.0 - 100.0 * 0.7 * 0.01)


def test_temperature_and_pollution_relax_towards_ambient():
    grid = Grid(3, 3)
    grid.temperature[:] = 0.0
    grid.pollution[:] = 0.0
    grid.update_environment(make_env(temperature=10.0, pollution_level=10.0))
    assert grid.temperature[1, 1] == pytest.approx(2.0)
    assert grid.pollution[1, 1] == pytest.approx(0.2)


# ---------------------------------------------------------------------------
# Disturbances
# ---------------------------------------------------------------------------

def test_fire_on_flat_ground():
    grid = Grid(4, 4)
    grid.nutrients[:] = 50.0
    grid.water[:] = 50.0
    grid.temperature[:] = 20.0
    grid.apply_disturbance(AREA_ALL, C.DISTURBANCE_FIRE, 1.0)
    assert grid.nutrients[1, 1] == pytest.approx(40.0)
    assert grid.water[1, 1] == pytest.approx(10.0)
    assert grid.temperature[1, 1] == pytest.approx(40.0)
    # Outside the inclusive rectangle
    assert grid.nutrients[3, 3] == pytest.approx(50.0)
    assert grid.temperature[0, 3] == pytest.approx(20.0)


def test_fire_burns_harder_on_high_ground():
    grid = Grid(1, 1)
    grid.elevation[0, 0] = 2.0
    grid.water[0, 0] = 50.0
    grid.apply_disturbance(AREA_ALL, C.DISTURBANCE_FIRE, 0.5)
    assert grid.water[0, 0] == pytest.approx(50.0 * (1 - 0.8 * 0.65))


def test_flood_caps_water():
    grid = Grid(2, 2)
    grid.water[:] = 90.0
    grid.apply_disturbance(AREA_ALL, C.DISTURBANCE_FLOOD, 1.0)
    assert np.all(grid.water == C.WATER_CEILING)


def test_human_activity_pollutes_and_depletes():
    grid = Grid(2, 2)
    grid.nutrients[:] = 50.0
    grid.pollution[:] = 90.0
    grid.apply_disturbance(AREA_ALL, C.DISTURBANCE_HUMAN_ACTIVITY, 1.0)
    assert np.all(grid.pollution == C.POLLUTION_CEILING)
    assert grid.nutrients[0, 0] == pytest.approx(50.0 * (1 - 0.4 * 1.2))


def test_disease_leaves_terrain_alone():
    grid = Grid(2, 2)
    before = grid.to_dict()
    grid.apply_disturbance(AREA_ALL, C.DISTURBANCE_DISEASE, 1.0)
    assert grid.to_dict() == before


def test_disturbance_never_drives_resources_negative():
    grid = Grid(2, 2)
    grid.elevation[:] = 2.0
    grid.water[:] = 50.0
    grid.apply_disturbance(AREA_ALL, C.DISTURBANCE_DROUGHT, 1.0)
    assert np.all(grid.water >= 0.0)


def test_unknown_disturbance_type():
    grid = Grid(2, 2)
    with pytest.raises(ValueError):
        grid.apply_disturbance(AREA_ALL, "Meteor", 1.0)


# ---------------------------------------------------------------------------
# Terrain and serialization
# ---------------------------------------------------------------------------

def test_generated_terrain_respects_floors():
    grid = Grid(30, 25)
    grid.generate_terrain(make_env(rainfall=60.0, temperature=22.0), np.random.default_rng(5))
    assert grid.elevation.shape == (25, 30)
    assert np.all(grid.elevation >= 0.0)
    assert np.all(grid.nutrients >= C.CELL_MIN_INITIAL_NUTRIENTS)
    assert np.all(grid.water >= C.CELL_MIN_INITIAL_WATER)
    assert np.all(grid.pollution >= 0.0)
    # The central island raises the middle of the map.
    assert grid.elevation[12, 15] > 1.5


def test_terrain_is_reproducible_from_seed():
    a, b = Grid(12, 12), Grid(12, 12)
    a.generate_terrain(make_env(), np.random.default_rng(11))
    b.generate_terrain(make_env(), np.random.default_rng(11))
    assert np.array_equal(a.elevation, b.elevation)
    assert np.array_equal(a.nutrients, b.nutrients)


def test_grid_round_trip():
    grid = Grid(4, 3)
    grid.generate_terrain(make_env(), np.random.default_rng(2))
    grid.add_organism("a", (3, 2))
    data = grid.to_dict()
    restored = Grid.from_dict(data)
    assert restored.to_dict() == data
    assert restored.get_cell((3, 2)).organisms == ["a"]
