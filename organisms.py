# organisms.py

import constants as C
from traits import default_traits, traits_from_dict

class Organism:
    """
    One living entity. The shared fields live here; everything that differs
    between producers, consumers and decomposers lives in `traits`, and the
    biology is implemented by the functions below, dispatching on `kind`.
    """
    def __init__(self, organism_id, kind, position, traits=None,
                 energy=C.ORGANISM_DEFAULT_ENERGY, size=C.ORGANISM_DEFAULT_SIZE, age=0,
                 max_age=C.ORGANISM_DEFAULT_MAX_AGE,
                 reproduction_energy=C.ORGANISM_DEFAULT_REPRODUCTION_ENERGY,
                 reproduction_rate=C.ORGANISM_DEFAULT_REPRODUCTION_RATE,
                 movement_cost=C.ORGANISM_DEFAULT_MOVEMENT_COST,
                 is_dead=False, species=None):
        if kind not in C.ORGANISM_KINDS:
            raise ValueError(f"Unknown organism kind: {kind!r}")
        self.id = organism_id
        self.kind = kind
        self.position = (int(position[0]), int(position[1]))  # Grid cell (x, y)
        self.traits = traits if traits is not None else default_traits(kind)
        self.energy = energy  # Stored energy; death when it reaches 0
        self.size = size
        self.age = age  # Age, in ticks
        self.max_age = max_age  # Age at which the organism dies, in ticks
        self.reproduction_energy = reproduction_energy  # Energy needed before reproducing
        self.reproduction_rate = reproduction_rate  # Chance per eligible tick
        # Plants don't move.
        self.movement_cost = 0.0 if kind == C.KIND_PRODUCER else movement_cost
        self.is_dead = is_dead
        self.species = species or C.DEFAULT_SPECIES[kind]

    @property
    def is_alive(self):
        return not self.is_dead

    def copy(self):
        return Organism(self.id, self.kind, self.position, self.traits.copy(),
                        energy=self.energy, size=self.size, age=self.age, max_age=self.max_age,
                        reproduction_energy=self.reproduction_energy,
                        reproduction_rate=self.reproduction_rate,
                        movement_cost=self.movement_cost, is_dead=self.is_dead,
                        species=self.species)

    def __repr__(self):
        state = "dead" if self.is_dead else "alive"
        return f"<{self.kind} {self.id} {self.species} at {self.position} E={self.energy:.1f} {state}>"


# =============================================================================
# --- SHARED LIFECYCLE ---
# =============================================================================

def age_organism(organism):
    """
    Advances the organism by one tick of age. Returns False if the organism is
    (or has just become) dead, in which case no further biology should run.
    """
    if organism.is_dead:
        return False

    organism.age += 1

    # Check for death by old age
    if organism.age >= organism.max_age:
        kill(organism)
        return False

    # Check for death by energy depletion
    if organism.energy <= 0:
        kill(organism)
        return False

    return True

def move_organism(organism, new_position):
    """Relocates the organism and charges its movement cost. Bounds are the caller's job."""
    organism.position = (int(new_position[0]), int(new_position[1]))
    organism.energy -= organism.movement_cost

def can_reproduce(organism, rng):
    return organism.energy >= organism.reproduction_energy and rng.random() < organism.reproduction_rate

def _jitter(rng, value):
    low, high = C.TRAIT_JITTER_RANGE
    return value * rng.uniform(low, high)

def reproduce(organism, rng, offspring_id):
    """
    Splits the parent's energy in half and returns an offspring carrying the
    other half, with slightly varied traits. The offspring starts on the
    parent's cell; the caller is expected to give it a real position.
    """
    offspring_energy = organism.energy * C.OFFSPRING_ENERGY_SHARE
    offspring = Organism(
        offspring_id, organism.kind, organism.position, organism.traits.copy(),
        energy=offspring_energy,
        size=_jitter(rng, organism.size),
        max_age=_jitter(rng, organism.max_age),
        reproduction_energy=_jitter(rng, organism.reproduction_energy),
        reproduction_rate=_jitter(rng, organism.reproduction_rate),
        movement_cost=_jitter(rng, organism.movement_cost),
        species=organism.species,
    )

    # Reduce parent's energy after reproduction
    organism.energy -= offspring_energy
    return offspring

def kill(organism):
    organism.is_dead = True


# =============================================================================
# --- PRODUCERS ---
# =============================================================================

def _producer_temperature_factor(temperature):
    diff = abs(temperature - C.PRODUCER_OPTIMAL_TEMPERATURE)
    return max(C.PRODUCER_MIN_TEMPERATURE_FACTOR, 1 - diff / C.PRODUCER_TEMPERATURE_TOLERANCE)

def update_producer(organism, environment, cell_nutrient_level, cell_water_level):
    """Photosynthesis for one tick, followed by resource-gated growth."""
    if not age_organism(organism):
        return

    traits = organism.traits

    # --- 1. Environmental suitability ---
    environment_factor = (
        (environment['sunlight_intensity'] / 100) *
        _producer_temperature_factor(environment['temperature']) *
        (1 - environment['pollution_level'] / 100) *
        max(C.PRODUCER_MIN_SEASONAL_FACTOR, environment['seasonal_factor'])
    )

    # --- 2. Local resources ---
    resource_factor = min(cell_nutrient_level / 100, cell_water_level / 100)

    # --- 3. Energy gain ---
    organism.energy += (traits.photosynthesis_rate * environment_factor *
                        resource_factor * C.PRODUCER_PHOTOSYNTHESIS_MULTIPLIER)

    # --- 4. Growth only happens on well-supplied cells ---
    if (organism.energy > C.PRODUCER_GROWTH_ENERGY_THRESHOLD and
            resource_factor > C.PRODUCER_GROWTH_RESOURCE_THRESHOLD):
        organism.size += traits.growth_rate * resource_factor
        organism.energy -= C.PRODUCER_GROWTH_ENERGY_COST


# =============================================================================
# --- CONSUMERS ---
# =============================================================================

def _consumer_temperature_factor(temperature):
    # Metabolism gets more expensive the further we stray from the optimum.
    diff = abs(temperature - C.CONSUMER_OPTIMAL_TEMPERATURE)
    factor = 1 + (diff / C.CONSUMER_TEMPERATURE_TOLERANCE) * C.CONSUMER_TEMPERATURE_IMPACT
    return min(C.CONSUMER_MAX_TEMPERATURE_FACTOR, factor)

def _consumer_seasonal_factor(seasonal_factor):
    return C.CONSUMER_SEASON_BASE_FACTOR - seasonal_factor * C.CONSUMER_SEASON_IMPACT

def update_consumer(organism, environment):
    """Pays one tick of metabolism."""
    if not age_organism(organism):
        return

    base_cost = organism.size * organism.traits.metabolism_rate
    organism.energy -= (base_cost *
                        _consumer_temperature_factor(environment['temperature']) *
                        _consumer_seasonal_factor(environment['seasonal_factor']))

def can_eat(consumer, target):
    """Whether the consumer's guild allows it to eat the target at all."""
    guild = consumer.traits.diet_guild
    if guild == C.GUILD_HERBIVORE:
        return target.kind == C.KIND_PRODUCER
    if guild == C.GUILD_CARNIVORE:
        return target.kind == C.KIND_CONSUMER
    return target.kind in (C.KIND_PRODUCER, C.KIND_CONSUMER)

def hunt_success_chance(consumer, prey):
    size_ratio = prey.size / consumer.size
    return consumer.traits.hunting_efficiency / (size_ratio + C.HUNT_SIZE_RATIO_OFFSET)

def eat(consumer, prey, rng):
    """
    Attempts to eat the prey. Returns the energy gained, which is 0 when the
    hunt fails or either party is already dead.
    """
    if consumer.is_dead or prey.is_dead:
        return 0.0

    if rng.random() < hunt_success_chance(consumer, prey):
        energy_gain = prey.energy * C.HUNT_ENERGY_TRANSFER
        consumer.energy += energy_gain
        kill(prey)
        return energy_gain

    # Failed hunt still costs energy
    consumer.energy -= consumer.movement_cost * C.FAILED_HUNT_COST_MULTIPLIER
    return 0.0


# =============================================================================
# --- DECOMPOSERS ---
# =============================================================================

def _decomposer_temperature_factor(temperature):
    optimal_low, optimal_high = C.DECOMPOSER_OPTIMAL_RANGE
    if temperature < 0:
        return C.DECOMPOSER_COLD_FACTOR
    if temperature > C.DECOMPOSER_HEAT_LIMIT:
        return C.DECOMPOSER_HOT_FACTOR
    if optimal_low <= temperature <= optimal_high:
        return 1.0
    if temperature < optimal_low:
        return C.DECOMPOSER_COLD_FACTOR + (temperature / optimal_low) * (1.0 - C.DECOMPOSER_COLD_FACTOR)
    return 1.0 - ((temperature - optimal_high) / C.DECOMPOSER_HEAT_SPAN) * C.DECOMPOSER_HEAT_DECLINE

def update_decomposer(organism, environment, dead_organism_count):
    """
    Passive decomposition of the dead matter on the organism's cell. Returns
    the nutrients produced; applying them to the cell is the caller's job.
    """
    if not age_organism(organism):
        return 0.0

    traits = organism.traits
    dead_matter_factor = min(1.0, dead_organism_count / C.DEAD_MATTER_SATURATION)
    moisture_factor = max(C.DECOMPOSER_MIN_MOISTURE_FACTOR, environment['rainfall'] / 100)
    temperature_factor = _decomposer_temperature_factor(environment['temperature'])

    efficiency = traits.decomposition_rate * dead_matter_factor * moisture_factor * temperature_factor
    organism.energy += efficiency * C.DECOMPOSER_ENERGY_MULTIPLIER * dead_organism_count
    nutrients_produced = traits.nutrient_production_rate * efficiency * dead_organism_count

    if (organism.energy > C.DECOMPOSER_GROWTH_ENERGY_THRESHOLD and
            dead_matter_factor > C.DECOMPOSER_GROWTH_DEAD_FACTOR_THRESHOLD):
        organism.size += C.DECOMPOSER_GROWTH_RATE * dead_matter_factor
        organism.energy -= C.DECOMPOSER_GROWTH_ENERGY_COST

    return nutrients_produced

def decompose(decomposer, corpse):
    """Consumes one specific corpse. Returns the nutrients released into the soil."""
    if decomposer.is_dead:
        return 0.0

    traits = decomposer.traits
    decomposer.energy += corpse.size * C.CORPSE_ENERGY_PER_SIZE * traits.decomposition_rate
    return corpse.size * traits.nutrient_production_rate


# =============================================================================
# --- SERIALIZATION ---
# =============================================================================

BASE_ATTRIBUTE_KEYS = (
    'id', 'kind', 'energy', 'size', 'age', 'max_age', 'reproduction_energy',
    'reproduction_rate', 'movement_cost', 'is_dead', 'species'
)

def to_attributes(organism):
    """Flattens the organism and its traits into a plain dict."""
    attributes = {key: getattr(organism, key) for key in BASE_ATTRIBUTE_KEYS}
    attributes['position'] = {'x': organism.position[0], 'y': organism.position[1]}
    attributes.update(organism.traits.to_dict())
    return attributes

def from_attributes(attributes):
    kind = attributes['kind']
    position = attributes['position']
    return Organism(
        attributes['id'], kind, (position['x'], position['y']),
        traits_from_dict(kind, attributes),
        energy=attributes['energy'], size=attributes['size'], age=attributes['age'],
        max_age=attributes['max_age'], reproduction_energy=attributes['reproduction_energy'],
        reproduction_rate=attributes['reproduction_rate'],
        movement_cost=attributes['movement_cost'], is_dead=attributes['is_dead'],
        species=attributes['species'],
    )
