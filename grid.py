# grid.py

import numpy as np
import constants as C
from numpy_noise import noise_field


class Cell:
    """
    A lightweight view onto one grid cell. Reads and writes go straight to the
    grid's arrays, so a Cell never holds stale data.
    """
    __slots__ = ('grid', 'x', 'y')

    def __init__(self, grid, x, y):
        self.grid = grid
        self.x = x
        self.y = y

    @property
    def position(self):
        return (self.x, self.y)

    @property
    def elevation(self):
        return float(self.grid.elevation[self.y, self.x])

    @property
    def nutrient_level(self):
        return float(self.grid.nutrients[self.y, self.x])

    @nutrient_level.setter
    def nutrient_level(self, value):
        self.grid.nutrients[self.y, self.x] = value

    @property
    def water_level(self):
        return float(self.grid.water[self.y, self.x])

    @water_level.setter
    def water_level(self, value):
        self.grid.water[self.y, self.x] = value

    @property
    def temperature(self):
        return float(self.grid.temperature[self.y, self.x])

    @temperature.setter
    def temperature(self, value):
        self.grid.temperature[self.y, self.x] = value

    @property
    def pollution_level(self):
        return float(self.grid.pollution[self.y, self.x])

    @pollution_level.setter
    def pollution_level(self, value):
        self.grid.pollution[self.y, self.x] = value

    @property
    def organisms(self):
        """The live list of organism ids located in this cell."""
        return self.grid.occupants[self.y][self.x]

    def to_dict(self):
        return {
            'x': self.x,
            'y': self.y,
            'elevation': self.elevation,
            'nutrient_level': self.nutrient_level,
            'water_level': self.water_level,
            'temperature': self.temperature,
            'pollution_level': self.pollution_level,
            'organisms': list(self.organisms),
        }

    def __repr__(self):
        return f"<Cell ({self.x}, {self.y}) h={self.elevation:.2f} {len(self.organisms)} organisms>"


def _shift_slices(offset):
    """Returns (cell_slice, neighbor_slice) pairing each cell with its neighbour at `offset` along one axis."""
    if offset < 0:
        return slice(-offset, None), slice(None, offset)
    if offset > 0:
        return slice(None, -offset), slice(offset, None)
    return slice(None), slice(None)


class Grid:
    """
    The spatial substrate. Per-cell scalar fields are stored as numpy arrays of
    shape (height, width), indexed [y, x]; the organisms on each cell are kept
    as ordered lists of ids.
    """
    def __init__(self, width, height):
        self.width = width
        self.height = height
        shape = (height, width)
        self.elevation = np.zeros(shape)
        self.nutrients = np.full(shape, C.ENV_DEFAULT_NUTRIENT_LEVEL)
        self.water = np.full(shape, C.ENV_DEFAULT_RAINFALL)
        self.temperature = np.full(shape, C.ENV_DEFAULT_TEMPERATURE)
        self.pollution = np.zeros(shape)
        self.occupants = [[[] for _ in range(width)] for _ in range(height)]

    # =============================================================================
    # --- TERRAIN GENERATION ---
    # =============================================================================

    def generate_terrain(self, environment, rng):
        """
        Builds elevation and the initial resource fields from the world generator.
        `environment` is the plain dict from Environment.get_config().
        """
        w, h = self.width, self.height
        xs, ys = np.meshgrid(np.arange(w, dtype=float), np.arange(h, dtype=float))
        center_x, center_y = w / 2, h / 2

        # --- 1. Central island with a linear falloff ---
        island_radius = min(w, h) * C.ISLAND_RADIUS_FACTOR
        island_distance = np.hypot(xs - center_x, ys - center_y)
        elevation = np.zeros((h, w))
        if island_radius > 0:
            inside = island_distance < island_radius
            elevation[inside] = (1 - island_distance[inside] / island_radius) * C.ISLAND_PEAK_ELEVATION

        # --- 2. A few smaller hills, blended in with max ---
        margin = C.HILL_PLACEMENT_MARGIN
        for _ in range(C.HILL_COUNT):
            hill_x = w * margin + rng.random() * w * (1 - 2 * margin)
            hill_y = h * margin + rng.random() * h * (1 - 2 * margin)
            hill_radius = C.HILL_MIN_RADIUS + rng.random() * C.HILL_RADIUS_SPREAD
            hill_peak = C.HILL_MIN_PEAK + rng.random() * C.HILL_PEAK_SPREAD
            hill_distance = np.hypot(xs - hill_x, ys - hill_y)
            hill = np.where(hill_distance < hill_radius, (1 - hill_distance / hill_radius) * hill_peak, 0.0)
            elevation = np.maximum(elevation, hill)

        # --- 3. Perlin noise for natural variation ---
        noise = noise_field(rng, w, h, C.TERRAIN_NOISE_SCALE, octaves=C.TERRAIN_NOISE_OCTAVES,
                            persistence=C.TERRAIN_NOISE_PERSISTENCE,
                            lacunarity=C.TERRAIN_NOISE_LACUNARITY)
        elevation = np.maximum(0.0, elevation + noise * C.TERRAIN_NOISE_AMPLITUDE)
        self.elevation = elevation

        # --- 4. Resources: richer in the lowlands and towards the centre ---
        max_distance = np.hypot(w / 2, h / 2)
        normalized_distance = island_distance / max_distance

        base_nutrients = C.CELL_BASE_NUTRIENTS + rng.uniform(0, C.CELL_NUTRIENT_SPREAD, size=(h, w))
        self.nutrients = np.maximum(
            C.CELL_MIN_INITIAL_NUTRIENTS,
            (base_nutrients - elevation * C.CELL_NUTRIENT_ELEVATION_PENALTY) *
            (1 - normalized_distance * C.CELL_NUTRIENT_DISTANCE_PENALTY))

        base_water = (environment['rainfall'] * C.CELL_RAINFALL_WATER_FACTOR +
                      rng.uniform(0, C.CELL_WATER_SPREAD, size=(h, w)))
        self.water = np.maximum(
            C.CELL_MIN_INITIAL_WATER,
            (base_water - elevation * C.CELL_WATER_ELEVATION_PENALTY) *
            (1 - normalized_distance * C.CELL_WATER_DISTANCE_PENALTY))

        spread = C.CELL_TEMPERATURE_SPREAD
        self.temperature = (environment['temperature'] -
                            elevation * C.TEMPERATURE_LAPSE_PER_ELEVATION +
                            rng.uniform(-spread, spread, size=(h, w)))

        pollution_spread = rng.uniform(1 - C.CELL_POLLUTION_SPREAD, 1 + C.CELL_POLLUTION_SPREAD, size=(h, w))
        self.pollution = np.maximum(
            0.0,
            environment['pollution_level'] * pollution_spread - elevation * C.POLLUTION_REDUCTION_PER_ELEVATION)

    # =============================================================================
    # --- CELL ACCESS & OCCUPANCY ---
    # =============================================================================

    def in_bounds(self, position):
        x, y = position
        return 0 <= x < self.width and 0 <= y < self.height

    def get_cell(self, position):
        """Returns a Cell view, or None if the position is off the grid."""
        if not self.in_bounds(position):
            return None
        return Cell(self, int(position[0]), int(position[1]))

    def add_organism(self, organism_id, position):
        if not self.in_bounds(position):
            return False
        x, y = position
        self.occupants[y][x].append(organism_id)
        return True

    def remove_organism(self, organism_id, position):
        if not self.in_bounds(position):
            return False
        x, y = position
        cell_organisms = self.occupants[y][x]
        if organism_id not in cell_organisms:
            return False
        cell_organisms.remove(organism_id)
        return True

    def move_organism(self, organism_id, old_position, new_position):
        """Moves an id between cells. Leaves the grid untouched if the move is impossible."""
        if not self.in_bounds(new_position):
            return False
        if not self.remove_organism(organism_id, old_position):
            return False
        x, y = new_position
        self.occupants[y][x].append(organism_id)
        return True

    def _square_bounds(self, position, radius):
        x, y = position
        return (max(0, x - radius), min(self.width - 1, x + radius),
                max(0, y - radius), min(self.height - 1, y + radius))

    def get_nearby_organisms(self, position, radius):
        """All ids in the square of the given radius around position, clipped to the grid."""
        min_x, max_x, min_y, max_y = self._square_bounds(position, radius)
        nearby = []
        for y in range(min_y, max_y + 1):
            for x in range(min_x, max_x + 1):
                nearby.extend(self.occupants[y][x])
        return nearby

    def find_available_position(self, origin, max_distance, rng):
        """
        Picks a cell near origin for a newborn, favouring sparsely occupied and
        elevated cells. Returns None when every candidate is full.
        """
        min_x, max_x, min_y, max_y = self._square_bounds(origin, max_distance)
        candidates = []
        weights = []
        for y in range(min_y, max_y + 1):
            for x in range(min_x, max_x + 1):
                crowding = min(C.PLACEMENT_MAX_OCCUPANTS, len(self.occupants[y][x]))
                bonus = C.PLACEMENT_ELEVATION_BONUS if self.elevation[y, x] > C.HIGH_GROUND_ELEVATION else 0
                weight = C.PLACEMENT_MAX_OCCUPANTS - crowding + bonus
                if weight > 0:
                    candidates.append((x, y))
                    weights.append(weight)

        if not candidates:
            return None
        weights = np.array(weights, dtype=float)
        index = rng.choice(len(candidates), p=weights / weights.sum())
        return candidates[index]

    # =============================================================================
    # --- RESOURCE DYNAMICS ---
    # =============================================================================

    def add_nutrients(self, position, amount):
        if not self.in_bounds(position):
            return False
        x, y = position
        self.nutrients[y, x] = min(C.NUTRIENT_CEILING, self.nutrients[y, x] + amount)
        return True

    def total_nutrients(self):
        return float(self.nutrients.sum())

    def update_environment(self, environment):
        """
        Advances every cell's water, nutrients, temperature and pollution by one
        tick. Nutrient diffusion reads the pre-update field for all cells.
        """
        h = self.elevation
        temperature = environment['temperature']
        rainfall = environment['rainfall']

        # --- 1. Water balance ---
        evaporation = (C.EVAPORATION_BASE_RATE *
                       (1 + (temperature - C.EVAPORATION_REFERENCE_TEMP) / C.EVAPORATION_TEMP_SCALE) *
                       (1 + h * C.EVAPORATION_ELEVATION_FACTOR))
        rain_shadow = np.minimum(C.RAIN_SHADOW_MAX, h * C.RAIN_SHADOW_PER_ELEVATION)
        rain = rainfall * (1 - rain_shadow) * C.RAIN_ABSORPTION * environment['seasonal_factor']
        drainage = self.water * np.minimum(1.0, h * C.DRAINAGE_PER_ELEVATION) * C.DRAINAGE_RATE
        capacity = np.maximum(C.WATER_CAPACITY_FLOOR, C.WATER_CEILING - h * C.WATER_CAPACITY_LOSS_PER_ELEVATION)
        self.water = np.clip(self.water * (1 - evaporation) + rain - drainage, 0.0, capacity)

        # --- 2. Nutrient diffusion between direct neighbours ---
        diffusion = np.zeros_like(self.nutrients)
        neighbor_counts = np.zeros_like(self.nutrients)
        for dx, dy in C.NEIGHBOR_OFFSETS:
            col_here, col_there = _shift_slices(dx)
            row_here, row_there = _shift_slices(dy)
            here = (row_here, col_here)
            there = (row_there, col_there)
            # Nutrients flow downhill more easily.
            flow = np.where(h[here] > h[there], C.DOWNHILL_FLOW_MODIFIER, C.UPHILL_FLOW_MODIFIER)
            diffusion[here] += (self.nutrients[there] - self.nutrients[here]) * flow
            neighbor_counts[here] += 1
        average_flow = np.divide(diffusion * C.NUTRIENT_DIFFUSION_RATE, neighbor_counts,
                                 out=np.zeros_like(diffusion), where=neighbor_counts > 0)
        self.nutrients = np.clip(self.nutrients + average_flow, 0.0, C.NUTRIENT_CEILING)

        # --- 3. Temperature relaxes towards the lapse-adjusted ambient value ---
        target_temperature = temperature - h * C.TEMPERATURE_LAPSE_PER_ELEVATION
        rate = C.TEMPERATURE_ADJUSTMENT_RATE
        self.temperature = self.temperature * (1 - rate) + target_temperature * rate

        # --- 4. Pollution decays and settles in the lowlands ---
        target_pollution = np.maximum(0.0, environment['pollution_level'] - h * C.POLLUTION_REDUCTION_PER_ELEVATION)
        self.pollution = np.maximum(
            0.0, self.pollution * (1 - C.POLLUTION_DECAY_RATE) + target_pollution * C.POLLUTION_SETTLING_RATE)

    def apply_disturbance(self, area, disturbance_type, intensity):
        """
        Damages the cells inside the inclusive rectangle `area` (a dict with
        start_x, start_y, end_x, end_y), clipped to the grid.
        """
        if disturbance_type not in C.DISTURBANCE_TYPES:
            raise ValueError(f"Unknown disturbance type: {disturbance_type!r}")

        min_x, max_x = max(0, area['start_x']), min(self.width - 1, area['end_x'])
        min_y, max_y = max(0, area['start_y']), min(self.height - 1, area['end_y'])
        if min_x > max_x or min_y > max_y:
            return

        region = (slice(min_y, max_y + 1), slice(min_x, max_x + 1))
        h = self.elevation[region]
        resistance = 1 - np.minimum(C.DISTURBANCE_MAX_RESISTANCE, h * C.DISTURBANCE_RESISTANCE_PER_ELEVATION)
        effective = intensity * resistance

        if disturbance_type == C.DISTURBANCE_FIRE:
            # Fires spread more easily on high, dry ground
            f = np.where(h > C.FIRE_HIGH_GROUND_ELEVATION, intensity * C.FIRE_HIGH_GROUND_MULTIPLIER, effective)
            self.nutrients[region] *= (1 - C.FIRE_NUTRIENT_BURN * f)
            self.water[region] *= (1 - C.FIRE_WATER_BURN * f)
            self.temperature[region] += C.FIRE_CELL_HEATING * f

        elif disturbance_type == C.DISTURBANCE_DROUGHT:
            f = np.where(h > C.DROUGHT_HIGH_GROUND_ELEVATION, intensity * C.DROUGHT_HIGH_GROUND_MULTIPLIER, effective)
            self.water[region] *= (1 - C.DROUGHT_WATER_LOSS * f)
            self.temperature[region] += C.DROUGHT_CELL_HEATING * f

        elif disturbance_type == C.DISTURBANCE_FLOOD:
            f = np.where(h < C.FLOOD_LOW_GROUND_ELEVATION, intensity * C.FLOOD_LOW_GROUND_MULTIPLIER,
                         effective * C.FLOOD_HIGH_GROUND_MULTIPLIER)
            self.water[region] = np.minimum(C.WATER_CEILING, self.water[region] + C.FLOOD_WATER_GAIN * f)
            self.nutrients[region] *= (1 - C.FLOOD_NUTRIENT_WASHOUT * f)

        elif disturbance_type == C.DISTURBANCE_HUMAN_ACTIVITY:
            f = np.where(h < C.HUMAN_LOW_GROUND_ELEVATION, intensity * C.HUMAN_LOW_GROUND_MULTIPLIER,
                         effective * C.HUMAN_HIGH_GROUND_MULTIPLIER)
            self.nutrients[region] *= (1 - C.HUMAN_NUTRIENT_DEPLETION * f)
            self.pollution[region] = np.minimum(C.POLLUTION_CEILING, self.pollution[region] + C.HUMAN_POLLUTION_GAIN * f)

        # Disease leaves the terrain alone.

        np.maximum(self.nutrients[region], 0.0, out=self.nutrients[region])
        np.maximum(self.water[region], 0.0, out=self.water[region])

    # =============================================================================
    # --- SERIALIZATION ---
    # =============================================================================

    def to_dict(self):
        return {
            'width': self.width,
            'height': self.height,
            'cells': [[Cell(self, x, y).to_dict() for x in range(self.width)] for y in range(self.height)],
        }

    @classmethod
    def from_dict(cls, data):
        grid = cls(data['width'], data['height'])
        for row in data['cells']:
            for cell_data in row:
                x, y = cell_data['x'], cell_data['y']
                grid.elevation[y, x] = cell_data['elevation']
                grid.nutrients[y, x] = cell_data['nutrient_level']
                grid.water[y, x] = cell_data['water_level']
                grid.temperature[y, x] = cell_data['temperature']
                grid.pollution[y, x] = cell_data['pollution_level']
                grid.occupants[y][x] = list(cell_data['organisms'])
        return grid
