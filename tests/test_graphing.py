"""
Chart export tests. Uses the non-interactive backend.
"""

import matplotlib
matplotlib.use("Agg")

import os

from ecology_stats import PopulationStatistics, SERIES_NAMES
from graphing_manager import GraphingManager


def make_statistics(samples=20):
    statistics = PopulationStatistics()
    for i in range(samples):
        sample = {name: float(i) for name in SERIES_NAMES}
        sample['producers'] = 40 + i % 5
        statistics.add_sample(sample)
    return statistics


def test_all_charts_are_written(tmp_path):
    output_dir = tmp_path / "charts"
    manager = GraphingManager(str(output_dir))
    paths = manager.generate_and_save_graphs(make_statistics())

    names = sorted(os.path.basename(path) for path in paths)
    assert names == ['climate_graph.png', 'ecology_graph.png', 'population_graph.png']
    for path in paths:
        assert os.path.getsize(path) > 0


def test_no_charts_without_data(tmp_path):
    manager = GraphingManager(str(tmp_path / "charts"))
    assert manager.generate_and_save_graphs(PopulationStatistics()) == []
    assert not (tmp_path / "charts").exists()


def test_output_dir_override(tmp_path):
    manager = GraphingManager(str(tmp_path / "unused"))
    paths = manager.generate_and_save_graphs(make_statistics(3), output_dir=str(tmp_path / "other"))
    assert len(paths) == 3
    assert all(path.startswith(str(tmp_path / "other")) for path in paths)


def test_charts_from_a_real_run(tmp_path, world):
    for _ in range(5):
        world.step()
    paths = GraphingManager(str(tmp_path)).generate_and_save_graphs(world.statistics)
    assert len(paths) == 3
