# ecology_stats.py

import numpy as np
import constants as C

SERIES_NAMES = (
    'producers', 'herbivores', 'carnivores', 'omnivores', 'decomposers',
    'biodiversity_index', 'average_temperature', 'average_rainfall',
    'total_energy', 'total_nutrients', 'stability_index',
)


class PopulationStatistics:
    """
    Parallel time series, one sample per completed step. All series always
    have the same length.
    """
    def __init__(self):
        self.data = {name: [] for name in SERIES_NAMES}

    def __len__(self):
        return len(self.data['producers'])

    def add_sample(self, sample):
        for name in SERIES_NAMES:
            self.data[name].append(sample[name])

    def truncate(self, max_length=C.STATISTICS_HISTORY_LENGTH):
        """Keeps only the most recent samples."""
        for name in SERIES_NAMES:
            if len(self.data[name]) > max_length:
                del self.data[name][:-max_length]

    def latest(self):
        if len(self) == 0:
            return None
        return {name: self.data[name][-1] for name in SERIES_NAMES}

    def to_dict(self):
        return {name: list(values) for name, values in self.data.items()}

    @classmethod
    def from_dict(cls, data):
        statistics = cls()
        for name in SERIES_NAMES:
            statistics.data[name] = list(data.get(name, []))
        return statistics


def count_populations(organisms):
    """Counts living organisms by trophic group."""
    counts = {'producers': 0, 'herbivores': 0, 'carnivores': 0, 'omnivores': 0, 'decomposers': 0}
    for organism in organisms:
        if organism.is_dead:
            continue
        if organism.kind == C.KIND_PRODUCER:
            counts['producers'] += 1
        elif organism.kind == C.KIND_DECOMPOSER:
            counts['decomposers'] += 1
        elif organism.traits.diet_guild == C.GUILD_HERBIVORE:
            counts['herbivores'] += 1
        elif organism.traits.diet_guild == C.GUILD_CARNIVORE:
            counts['carnivores'] += 1
        else:
            counts['omnivores'] += 1
    return counts

def biodiversity_index(organisms):
    """Shannon index over the species labels of living organisms."""
    species_counts = {}
    for organism in organisms:
        if organism.is_alive:
            species_counts[organism.species] = species_counts.get(organism.species, 0) + 1

    if not species_counts:
        return 0.0
    counts = np.array(list(species_counts.values()), dtype=float)
    proportions = counts / counts.sum()
    return float(-np.sum(proportions * np.log(proportions)))

def _relative_variation(values):
    """Mean absolute deviation divided by the mean; 0 when the mean is 0."""
    values = np.asarray(values, dtype=float)
    mean = values.mean()
    if mean == 0:
        return 0.0
    return float(np.abs(values - mean).mean() / mean)

def stability_index(statistics):
    """
    How steady the producer and herbivore populations have been over the last
    few samples. 1.0 until enough history exists.
    """
    window = C.STABILITY_WINDOW
    if len(statistics) < window:
        return 1.0
    producer_variation = _relative_variation(statistics.data['producers'][-window:])
    herbivore_variation = _relative_variation(statistics.data['herbivores'][-window:])
    return max(0.0, 1 - (producer_variation + herbivore_variation) / C.STABILITY_DIVISOR)
