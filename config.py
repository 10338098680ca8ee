# config.py

import constants as C
import logger as log


class ConfigError(ValueError):
    """Raised when a run configuration cannot be used to build a world."""


class SimulationConfig:
    """The per-run parameters used to build a world."""
    FIELDS = (
        'grid_width', 'grid_height',
        'initial_producers', 'initial_herbivores', 'initial_carnivores',
        'initial_omnivores', 'initial_decomposers',
        'simulation_speed', 'initial_temperature', 'initial_rainfall',
        'enable_evolution', 'enable_disturbances', 'seed',
    )

    def __init__(self, grid_width=C.DEFAULT_GRID_WIDTH, grid_height=C.DEFAULT_GRID_HEIGHT,
                 initial_producers=C.DEFAULT_INITIAL_PRODUCERS,
                 initial_herbivores=C.DEFAULT_INITIAL_HERBIVORES,
                 initial_carnivores=C.DEFAULT_INITIAL_CARNIVORES,
                 initial_omnivores=C.DEFAULT_INITIAL_OMNIVORES,
                 initial_decomposers=C.DEFAULT_INITIAL_DECOMPOSERS,
                 simulation_speed=C.DEFAULT_SIMULATION_SPEED,
                 initial_temperature=C.DEFAULT_INITIAL_TEMPERATURE,
                 initial_rainfall=C.DEFAULT_INITIAL_RAINFALL,
                 enable_evolution=True, enable_disturbances=False, seed=None):
        self.grid_width = grid_width # Cells
        self.grid_height = grid_height # Cells
        self.initial_producers = initial_producers
        self.initial_herbivores = initial_herbivores
        self.initial_carnivores = initial_carnivores
        self.initial_omnivores = initial_omnivores
        self.initial_decomposers = initial_decomposers
        self.simulation_speed = simulation_speed # Requested cycles per second
        self.initial_temperature = initial_temperature # Celsius
        self.initial_rainfall = initial_rainfall # Percent
        self.enable_evolution = enable_evolution # Reserved, has no effect yet
        self.enable_disturbances = enable_disturbances # Allows spontaneous disturbances
        self.seed = seed # None draws fresh entropy

    def validate(self):
        """Rejects configurations that cannot produce a world. Returns self for chaining."""
        for name in ('grid_width', 'grid_height'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")

        for name in ('initial_producers', 'initial_herbivores', 'initial_carnivores',
                     'initial_omnivores', 'initial_decomposers'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigError(f"{name} must be a non-negative integer, got {value!r}")

        speed = self.simulation_speed
        if isinstance(speed, bool) or not isinstance(speed, (int, float)) or not speed > 0:
            raise ConfigError(f"simulation_speed must be positive, got {self.simulation_speed!r}")
        return self

    def to_dict(self):
        return {name: getattr(self, name) for name in self.FIELDS}

    @classmethod
    def from_dict(cls, data):
        """Builds a config from a plain dict, ignoring keys it does not know."""
        return cls(**{name: data[name] for name in cls.FIELDS if name in data})

    def __eq__(self, other):
        return isinstance(other, SimulationConfig) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"SimulationConfig({self.to_dict()})"


def _uniform(rng, value_range):
    low, high = value_range
    return float(low + rng.random() * (high - low))

def _integer(rng, value_range):
    low, high = value_range
    return int(rng.integers(low, high))

def generate_random_config(rng):
    """
    Builds a fresh randomized configuration. Used by the calling layer when it
    decides to restart after an extinction.
    """
    config = SimulationConfig(
        grid_width=_integer(rng, C.RANDOM_GRID_SIZE_RANGE),
        grid_height=_integer(rng, C.RANDOM_GRID_SIZE_RANGE),
        initial_producers=_integer(rng, C.RANDOM_PRODUCERS_RANGE),
        initial_herbivores=_integer(rng, C.RANDOM_HERBIVORES_RANGE),
        initial_carnivores=_integer(rng, C.RANDOM_CARNIVORES_RANGE),
        initial_decomposers=_integer(rng, C.RANDOM_DECOMPOSERS_RANGE),
        simulation_speed=C.DEFAULT_SIMULATION_SPEED,
        initial_temperature=_uniform(rng, C.RANDOM_TEMPERATURE_RANGE),
        initial_rainfall=_uniform(rng, C.RANDOM_RAINFALL_RANGE),
        enable_evolution=True,
        enable_disturbances=bool(rng.random() < C.RANDOM_DISTURBANCES_CHANCE),
    )
    log.log(f"Generated random configuration: {config.grid_width}x{config.grid_height} grid, "
            f"disturbances {'on' if config.enable_disturbances else 'off'}.")
    return config
