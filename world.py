#world.py

import numpy as np
import constants as C
import logger as log
from config import SimulationConfig
from environment import Environment
from grid import Grid
from time_manager import TimeManager
from traits import ProducerTraits, ConsumerTraits, DecomposerTraits
from ecology_stats import PopulationStatistics, count_populations, biodiversity_index, stability_index
from organisms import (
    Organism, move_organism, can_reproduce, reproduce, update_producer, update_consumer,
    update_decomposer, can_eat, eat, decompose, to_attributes, from_attributes
)

class StepResult:
    """What one call to World.step() hands back to its caller."""
    def __init__(self, snapshot, extinct):
        self.snapshot = snapshot
        self.extinct = extinct

    def __repr__(self):
        return f"StepResult(day={self.snapshot['day']}, extinct={self.extinct})"


class StepPlan:
    """
    The structural changes gathered during one organism pass. Nothing here
    touches the grid until World._apply_plan() runs.
    """
    def __init__(self, organisms):
        self.organisms = organisms  # Working copy of the organism table
        self.dead_counts = {}  # position -> corpses present at the start of the step
        self.corpses = {}  # position -> ids of those corpses
        self.claimed_corpses = set()
        self.position_changes = []  # (id, old_position, new_position)
        self.offspring = []
        self.removals = []
        self._removal_set = set()

    def queue_removal(self, organism_id):
        if organism_id not in self._removal_set:
            self._removal_set.add(organism_id)
            self.removals.append(organism_id)

    def record_corpse(self, organism):
        self.dead_counts[organism.position] = self.dead_counts.get(organism.position, 0) + 1
        self.corpses.setdefault(organism.position, []).append(organism.id)


def _draw(rng, trait_range):
    base, spread = trait_range
    return base + rng.random() * spread

def _draw_age(rng, trait_range):
    base, spread = trait_range
    return base + int(rng.integers(spread))


class World:
    def __init__(self, config=None, rng=None):
        log.log("Creating a new World...")
        self.rng = rng
        self.time_manager = TimeManager()
        self.config = None
        self.environment = None
        self.grid = None
        self.organisms = {}
        self.statistics = PopulationStatistics()
        self.next_organism_id = 1

        self.births_this_period = 0
        self.deaths_this_period = 0
        self.last_report_day = 0

        self._handlers = {
            C.KIND_PRODUCER: self._step_producer,
            C.KIND_CONSUMER: self._step_consumer,
            C.KIND_DECOMPOSER: self._step_decomposer,
        }

        if config is not None:
            self.initialize(config)

    # =============================================================================
    # --- SETUP ---
    # =============================================================================

    def initialize(self, config):
        """
        Builds a fresh environment, terrain and starting population from the
        configuration. Returns the initial snapshot.
        """
        if isinstance(config, dict):
            config = SimulationConfig.from_dict(config)
        config.validate()
        self.config = config

        if config.seed is not None:
            self.rng = np.random.default_rng(config.seed)
        elif self.rng is None:
            self.rng = np.random.default_rng()

        self.environment = Environment(
            config.grid_width, config.grid_height,
            temperature=config.initial_temperature, rainfall=config.initial_rainfall,
            allow_random_disturbances=config.enable_disturbances)
        self.grid = Grid(config.grid_width, config.grid_height)
        self.grid.generate_terrain(self.environment.get_config(), self.rng)

        self.organisms = {}
        self.statistics = PopulationStatistics()
        self.next_organism_id = 1
        self.births_this_period = 0
        self.deaths_this_period = 0
        self.last_report_day = 0

        self.time_manager.sync(self.environment.day, self.environment.season)
        self.time_manager.set_cycles_per_second(config.simulation_speed)
        self.time_manager.accumulator = 0.0
        self.time_manager.set_paused(True)

        self.populate_world()
        log.log(f"World created: {config.grid_width}x{config.grid_height} grid, "
                f"{len(self.organisms)} organisms.")
        return self.serialize_snapshot()

    def populate_world(self):
        log.log("Populating the world with initial organisms...")
        config = self.config
        rng = self.rng

        for _ in range(config.initial_producers):
            t = C.INITIAL_PRODUCER_TRAITS
            traits = ProducerTraits(growth_rate=_draw(rng, t['growth_rate']),
                                    photosynthesis_rate=_draw(rng, t['photosynthesis_rate']))
            self._spawn_initial(C.KIND_PRODUCER, t, traits, C.SPECIES_PLANT)

        consumer_groups = (
            (config.initial_herbivores, C.GUILD_HERBIVORE, C.INITIAL_HERBIVORE_TRAITS,
             C.SPECIES_HERBIVORE, [C.SPECIES_PLANT]),
            (config.initial_carnivores, C.GUILD_CARNIVORE, C.INITIAL_CARNIVORE_TRAITS,
             C.SPECIES_CARNIVORE, [C.SPECIES_HERBIVORE]),
            (config.initial_omnivores, C.GUILD_OMNIVORE, C.INITIAL_OMNIVORE_TRAITS,
             C.SPECIES_OMNIVORE, [C.SPECIES_PLANT, C.SPECIES_HERBIVORE]),
        )
        for count, guild, t, species, diet in consumer_groups:
            for _ in range(count):
                traits = ConsumerTraits(guild, hunting_efficiency=_draw(rng, t['hunting_efficiency']),
                                        metabolism_rate=_draw(rng, t['metabolism_rate']), diet=diet)
                self._spawn_initial(C.KIND_CONSUMER, t, traits, species)

        for _ in range(config.initial_decomposers):
            t = C.INITIAL_DECOMPOSER_TRAITS
            traits = DecomposerTraits(decomposition_rate=_draw(rng, t['decomposition_rate']),
                                      nutrient_production_rate=_draw(rng, t['nutrient_production_rate']))
            self._spawn_initial(C.KIND_DECOMPOSER, t, traits, C.SPECIES_DECOMPOSER)

        log.log("World population complete.")

    def _spawn_initial(self, kind, trait_table, traits, species):
        rng = self.rng
        position = (int(rng.integers(self.grid.width)), int(rng.integers(self.grid.height)))
        organism = Organism(
            self._next_id(), kind, position, traits,
            energy=_draw(rng, trait_table['energy']),
            size=_draw(rng, trait_table['size']),
            max_age=_draw_age(rng, trait_table['max_age']),
            reproduction_rate=_draw(rng, trait_table['reproduction_rate']),
            reproduction_energy=_draw(rng, trait_table['reproduction_energy']),
            movement_cost=_draw(rng, trait_table['movement_cost']) if 'movement_cost' in trait_table
            else C.ORGANISM_DEFAULT_MOVEMENT_COST,
            species=species,
        )
        self.add_organism(organism)

    def _next_id(self):
        organism_id = f"{C.ORGANISM_ID_PREFIX}-{self.next_organism_id:06d}"
        self.next_organism_id += 1
        return organism_id

    def add_organism(self, organism):
        """Registers an organism in the table and on its cell. Rejects off-grid positions."""
        if self.grid is None or not self.grid.in_bounds(organism.position):
            log.debug(f"Rejected {organism.id}: position {organism.position} is off the grid.")
            return False
        if organism.id in self.organisms:
            log.debug(f"Rejected {organism.id}: id already in use.")
            return False
        self.organisms[organism.id] = organism
        self.grid.add_organism(organism.id, organism.position)
        return True

    # =============================================================================
    # --- SIMULATION STEP ---
    # =============================================================================

    def step(self):
        """Advances the whole world by one day."""
        if self.grid is None:
            raise RuntimeError("World has not been initialized.")
        rng = self.rng

        # --- 1. Climate and terrain ---
        self.environment.update(rng)
        environment = self.environment.get_config()
        self.grid.update_environment(environment)
        for disturbance in self.environment.get_active_disturbances():
            self.grid.apply_disturbance(disturbance.area, disturbance.type, disturbance.intensity)
        self.time_manager.sync(self.environment.day, self.environment.season)

        # --- 2. Organism pass over a working copy ---
        working = {organism_id: organism.copy() for organism_id, organism in self.organisms.items()}
        plan = StepPlan(working)

        # Corpses from earlier steps are harvested at the end of this one.
        for organism in working.values():
            if organism.is_dead:
                plan.queue_removal(organism.id)
                plan.record_corpse(organism)

        for organism in working.values():
            if organism.is_dead:
                continue
            cell = self.grid.get_cell(organism.position)
            if cell is None:
                log.debug(f"Skipping {organism.id}: no cell at {organism.position}.")
                continue
            self._handlers[organism.kind](organism, cell, environment, plan)

        # --- 3. Apply the queued structural changes ---
        self._apply_plan(plan)
        self.organisms = working

        # --- 4. Statistics ---
        living = [o for o in working.values() if o.is_alive]
        if not living:
            log.log(f"Extinction detected on day {self.environment.day}.")
            return StepResult(self.serialize_snapshot(), True)

        self._record_statistics(living, environment)
        self._process_housekeeping()
        return StepResult(self.serialize_snapshot(), False)

    def _queue_offspring(self, organism, radius, plan):
        if not can_reproduce(organism, self.rng):
            return
        position = self.grid.find_available_position(organism.position, radius, self.rng)
        if position is None:
            return
        offspring = reproduce(organism, self.rng, self._next_id())
        offspring.position = position
        plan.offspring.append(offspring)

    def _move(self, organism, new_position, plan):
        old_position = organism.position
        move_organism(organism, new_position)
        plan.position_changes.append((organism.id, old_position, new_position))

    def _neighbor_positions(self, position):
        x, y = position
        neighbors = []
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                if self.grid.in_bounds((x + dx, y + dy)):
                    neighbors.append((x + dx, y + dy))
        return neighbors

    def _step_producer(self, producer, cell, environment, plan):
        update_producer(producer, environment, cell.nutrient_level, cell.water_level)
        if producer.is_dead:
            return
        self._queue_offspring(producer, C.PRODUCER_OFFSPRING_RADIUS, plan)

    def _step_consumer(self, consumer, cell, environment, plan):
        rng = self.rng
        update_consumer(consumer, environment)
        if consumer.is_dead:
            return

        # --- Wander ---
        if rng.random() < C.CONSUMER_MOVE_CHANCE:
            moves = self._neighbor_positions(consumer.position)
            if moves:
                self._move(consumer, moves[int(rng.integers(len(moves)))], plan)

        # --- Forage and hunt ---
        guild = consumer.traits.diet_guild
        if guild != C.GUILD_CARNIVORE:
            self._try_to_eat(consumer, C.PLANT_FORAGE_RADIUS, C.KIND_PRODUCER, plan)
        if guild != C.GUILD_HERBIVORE:
            self._try_to_eat(consumer, C.PREY_HUNT_RADIUS, C.KIND_CONSUMER, plan)

        self._queue_offspring(consumer, C.CONSUMER_OFFSPRING_RADIUS, plan)

    def _try_to_eat(self, consumer, radius, prey_kind, plan):
        working = plan.organisms
        candidates = []
        for organism_id in self.grid.get_nearby_organisms(consumer.position, radius):
            target = working.get(organism_id)
            if target is None:
                log.debug(f"Cell lists unknown organism {organism_id}.")
                continue
            if target.kind == prey_kind and target.is_alive and target.id != consumer.id:
                candidates.append(target)
        if not candidates:
            return

        prey = candidates[int(self.rng.integers(len(candidates)))]
        if not can_eat(consumer, prey):
            return
        eat(consumer, prey, self.rng)
        if prey.is_dead:
            # Consumed prey leaves the world at the end of this step.
            plan.queue_removal(prey.id)

    def _step_decomposer(self, decomposer, cell, environment, plan):
        rng = self.rng
        start = cell.position
        dead_count = plan.dead_counts.get(start, 0)

        nutrients = update_decomposer(decomposer, environment, dead_count)
        if nutrients > 0:
            self.grid.add_nutrients(start, nutrients)
        if decomposer.is_dead:
            return

        # --- Drift, preferring cells with corpses ---
        if rng.random() < C.DECOMPOSER_MOVE_CHANCE:
            destination = self._pick_decomposer_move(decomposer.position, plan.dead_counts)
            if destination is not None:
                self._move(decomposer, destination, plan)

        # --- Consume one corpse from the starting cell ---
        available = [cid for cid in plan.corpses.get(start, []) if cid not in plan.claimed_corpses]
        if available:
            corpse_id = available[int(rng.integers(len(available)))]
            plan.claimed_corpses.add(corpse_id)
            released = decompose(decomposer, plan.organisms[corpse_id])
            # Released nutrients enrich wherever the decomposer ended up.
            self.grid.add_nutrients(decomposer.position, released)
            plan.queue_removal(corpse_id)

        self._queue_offspring(decomposer, C.DECOMPOSER_OFFSPRING_RADIUS, plan)

    def _pick_decomposer_move(self, position, dead_counts):
        """Random in-bounds neighbour, weighted by corpses present + 1. None if there is none."""
        moves = self._neighbor_positions(position)
        if not moves:
            return None
        weights = np.array([dead_counts.get(p, 0) + 1 for p in moves], dtype=float)
        return moves[self.rng.choice(len(moves), p=weights / weights.sum())]

    def _apply_plan(self, plan):
        """Moves, then births, then removals."""
        working = plan.organisms

        for organism_id, old_position, new_position in plan.position_changes:
            if not self.grid.move_organism(organism_id, old_position, new_position):
                log.debug(f"Could not move {organism_id} from {old_position} to {new_position}.")

        for offspring in plan.offspring:
            working[offspring.id] = offspring
            self.grid.add_organism(offspring.id, offspring.position)
        self.births_this_period += len(plan.offspring)

        for organism_id in plan.removals:
            organism = working.pop(organism_id, None)
            if organism is None:
                log.debug(f"Removal of unknown organism {organism_id} skipped.")
                continue
            if not self.grid.remove_organism(organism_id, organism.position):
                log.debug(f"{organism_id} was not on its cell {organism.position}.")
            self.deaths_this_period += 1

    def _record_statistics(self, living, environment):
        sample = count_populations(living)
        sample['biodiversity_index'] = biodiversity_index(living)
        sample['average_temperature'] = float(environment['temperature'])
        sample['average_rainfall'] = float(environment['rainfall'])
        sample['total_energy'] = float(sum(o.energy for o in living))
        sample['total_nutrients'] = self.grid.total_nutrients()
        sample['stability_index'] = stability_index(self.statistics)
        self.statistics.add_sample(sample)
        self.statistics.truncate(C.STATISTICS_HISTORY_LENGTH)

    def _process_housekeeping(self):
        """Prints the periodic population report and resets the period counters."""
        if self.environment.day - self.last_report_day >= C.STATS_LOG_INTERVAL_DAYS:
            self._print_population_statistics()
            self.last_report_day = self.environment.day
            self.births_this_period = 0
            self.deaths_this_period = 0

    def _print_population_statistics(self):
        """Prints a formatted summary of the world's population statistics."""
        latest = self.statistics.latest()
        if latest is None:
            return
        log.log("\n--- Population Statistics ---")
        log.log(f"  > Report for Day {self.environment.day} (covering the last {C.STATS_LOG_INTERVAL_DAYS} days)")
        log.log(f"  Producers: {latest['producers']:,}  Herbivores: {latest['herbivores']:,}  "
                f"Carnivores: {latest['carnivores']:,}  Omnivores: {latest['omnivores']:,}  "
                f"Decomposers: {latest['decomposers']:,}")
        log.log(f"  Biodiversity: {latest['biodiversity_index']:.3f}  Stability: {latest['stability_index']:.3f}")
        log.log(f"  - Births this Period: {self.births_this_period:,}")
        log.log(f"  - Deaths this Period: {self.deaths_this_period:,}")
        log.log("---------------------------\n")

    # =============================================================================
    # --- CONTROL ---
    # =============================================================================

    def add_disturbance(self, disturbance_type, intensity, duration, area=None):
        """
        Starts a disturbance. Without an area, a square centred on the grid with
        radius min(width, height) / 4 is used.
        """
        if self.grid is None:
            raise RuntimeError("World has not been initialized.")
        if disturbance_type not in C.DISTURBANCE_TYPES:
            raise ValueError(f"Unknown disturbance type: {disturbance_type!r}")
        width, height = self.grid.width, self.grid.height
        if area is None:
            radius = min(width, height) // C.DEFAULT_DISTURBANCE_RADIUS_DIVISOR
            center_x, center_y = width // 2, height // 2
            area = {
                'start_x': center_x - radius,
                'start_y': center_y - radius,
                'end_x': center_x + radius,
                'end_y': center_y + radius,
            }
        area = {
            'start_x': max(0, area['start_x']),
            'start_y': max(0, area['start_y']),
            'end_x': min(width - 1, area['end_x']),
            'end_y': min(height - 1, area['end_y']),
        }
        return self.environment.add_disturbance(disturbance_type, intensity, duration, area)

    def toggle_pause(self):
        self.time_manager.toggle_pause()

    def set_speed(self, cycles_per_second):
        self.time_manager.set_cycles_per_second(cycles_per_second)

    # =============================================================================
    # --- SNAPSHOTS ---
    # =============================================================================

    def serialize_snapshot(self):
        """The complete world state as plain data."""
        return {
            'day': self.environment.day,
            'season': self.environment.season,
            'environment': self.environment.to_dict(),
            'grid': self.grid.to_dict(),
            'organisms': {organism_id: to_attributes(o) for organism_id, o in self.organisms.items()},
            'disturbances': [d.to_dict() for d in self.environment.disturbances],
            'statistics': self.statistics.to_dict(),
            'paused': self.time_manager.is_paused,
            'cycles_per_second': self.time_manager.cycles_per_second,
            'next_organism_id': self.next_organism_id,
            'config': self.config.to_dict(),
        }

    def restore_snapshot(self, snapshot):
        """Rebuilds every part of the world from a snapshot."""
        self.config = SimulationConfig.from_dict(snapshot['config'])
        self.environment = Environment.from_dict(snapshot['environment'], snapshot['disturbances'])
        self.grid = Grid.from_dict(snapshot['grid'])
        self.organisms = {organism_id: from_attributes(attributes)
                          for organism_id, attributes in snapshot['organisms'].items()}
        self.statistics = PopulationStatistics.from_dict(snapshot['statistics'])
        self.next_organism_id = snapshot['next_organism_id']

        self.time_manager.sync(snapshot['day'], snapshot['season'])
        self.time_manager.set_paused(snapshot['paused'])
        self.time_manager.set_cycles_per_second(snapshot['cycles_per_second'])
        self.time_manager.accumulator = 0.0

        self.last_report_day = self.environment.day
        self.births_this_period = 0
        self.deaths_this_period = 0
        if self.rng is None:
            self.rng = np.random.default_rng(self.config.seed)
        log.log(f"World restored at day {self.environment.day} with {len(self.organisms)} organisms.")

    @classmethod
    def from_snapshot(cls, snapshot, rng=None):
        world = cls(rng=rng)
        world.restore_snapshot(snapshot)
        return world
