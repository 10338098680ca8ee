# constants.py

# =============================================================================
# --- SIMULATION & PERFORMANCE SETTINGS ---
# =============================================================================
CLOCK_TICK_RATE = 30 # Frames per second of the viewer loop
MILLISECONDS_PER_SECOND = 1000.0
MAX_FRAME_DELTA_SECONDS = 0.25 # Cap on real time per frame, avoids a "spiral of death"
MAX_CATCH_UP_CYCLES = 5 # Most simulation steps run for a single frame
PROFILER_ENABLED = False
PROFILER_PRINT_LINE_COUNT = 20
STATISTICS_HISTORY_LENGTH = 500 # Samples kept per statistics series
STATS_LOG_INTERVAL_DAYS = 30 # How often the world prints a population report
DEBUG_LOGGING = False # Print diagnostics for skipped lookups

# Requested simulation speed, in cycles per second, selected by the number keys.
SPEED_LEVELS = {
    0: 1.0,
    1: 2.0,
    2: 5.0,
    3: 10.0,
    4: 20.0,
    5: 60.0
}

# =============================================================================
# --- ORGANISM KINDS & LABELS ---
# =============================================================================
KIND_PRODUCER = "Producer"
KIND_CONSUMER = "Consumer"
KIND_DECOMPOSER = "Decomposer"
ORGANISM_KINDS = (KIND_PRODUCER, KIND_CONSUMER, KIND_DECOMPOSER)

GUILD_HERBIVORE = "Herbivore"
GUILD_CARNIVORE = "Carnivore"
GUILD_OMNIVORE = "Omnivore"
DIET_GUILDS = (GUILD_HERBIVORE, GUILD_CARNIVORE, GUILD_OMNIVORE)

SPECIES_PLANT = "Basic Plant"
SPECIES_HERBIVORE = "Herbivore"
SPECIES_CARNIVORE = "Carnivore"
SPECIES_OMNIVORE = "Omnivore"
SPECIES_DECOMPOSER = "Decomposer"
DEFAULT_SPECIES = {
    KIND_PRODUCER: "Basic Plant",
    KIND_CONSUMER: "Basic Consumer",
    KIND_DECOMPOSER: "Basic Decomposer",
}

ORGANISM_ID_PREFIX = "org"

# =============================================================================
# --- SEASONS & CLIMATE ---
# =============================================================================
SEASON_SPRING = "Spring"
SEASON_SUMMER = "Summer"
SEASON_FALL = "Fall"
SEASON_WINTER = "Winter"
SEASONS = (SEASON_SPRING, SEASON_SUMMER, SEASON_FALL, SEASON_WINTER)

YEAR_LENGTH_DAYS = 120
SEASON_LENGTH_DAYS = YEAR_LENGTH_DAYS / len(SEASONS)

# Starting climate before the first update.
ENV_DEFAULT_TEMPERATURE = 25.0 # Celsius
ENV_DEFAULT_RAINFALL = 50.0 # Percent
ENV_DEFAULT_SEASONAL_FACTOR = 1.0 # Unitless [0, 1]
ENV_DEFAULT_NUTRIENT_LEVEL = 50.0
ENV_DEFAULT_SUNLIGHT = 80.0 # Percent
ENV_DEFAULT_POLLUTION = 10.0 # Percent

# Daily random variation applied on top of the seasonal curves.
ENV_TEMPERATURE_JITTER = 1.0 # +/- degrees
ENV_RAINFALL_JITTER = 2.0 # +/- percent

# Bounds enforced after the periodic update.
ENV_TEMPERATURE_BOUNDS = (-10.0, 40.0)
ENV_RAINFALL_BOUNDS = (10.0, 100.0)
ENV_SUNLIGHT_BOUNDS = (30.0, 100.0)

# Slightly wider bounds enforced after a disturbance shifts the climate.
ENV_DISTURBED_TEMPERATURE_BOUNDS = (-10.0, 45.0)
ENV_DISTURBED_RAINFALL_BOUNDS = (5.0, 100.0)
ENV_POLLUTION_BOUNDS = (0.0, 100.0)

# =============================================================================
# --- DISTURBANCES ---
# =============================================================================
DISTURBANCE_FIRE = "Fire"
DISTURBANCE_DROUGHT = "Drought"
DISTURBANCE_FLOOD = "Flood"
DISTURBANCE_DISEASE = "Disease"
DISTURBANCE_HUMAN_ACTIVITY = "Human Activity"
DISTURBANCE_TYPES = (
    DISTURBANCE_FIRE, DISTURBANCE_DROUGHT, DISTURBANCE_FLOOD,
    DISTURBANCE_DISEASE, DISTURBANCE_HUMAN_ACTIVITY
)

RANDOM_DISTURBANCE_CHANCE = 0.0005 # Per day
RANDOM_DISTURBANCE_INTENSITY_RANGE = (0.2, 0.7)
RANDOM_DISTURBANCE_MIN_DURATION_DAYS = 3
RANDOM_DISTURBANCE_DURATION_SPREAD_DAYS = 8 # Durations of 3-10 days
RANDOM_DISTURBANCE_RADIUS_DIVISOR = 6 # Radius up to min(width, height) / 6 ...
RANDOM_DISTURBANCE_MIN_RADIUS = 2 # ... plus this many cells
DEFAULT_DISTURBANCE_RADIUS_DIVISOR = 4 # Requested disturbances cover min(width, height) / 4

# Immediate shift to the global climate when a disturbance starts.
FIRE_TEMPERATURE_SHIFT = 5.0
DROUGHT_RAINFALL_REDUCTION = 0.3
FLOOD_RAINFALL_INCREASE = 30.0
HUMAN_POLLUTION_INCREASE = 20.0

# =============================================================================
# --- TERRAIN GENERATION ---
# =============================================================================
ISLAND_RADIUS_FACTOR = 0.25 # Island radius as a fraction of min(width, height)
ISLAND_PEAK_ELEVATION = 2.5
HILL_COUNT = 3
HILL_PLACEMENT_MARGIN = 0.2 # Hills are placed within the middle 60% of each axis
HILL_MIN_RADIUS = 3.0
HILL_RADIUS_SPREAD = 5.0
HILL_MIN_PEAK = 0.8
HILL_PEAK_SPREAD = 1.2
TERRAIN_NOISE_SCALE = 7.3 # Cells per noise lattice unit; kept off integers
TERRAIN_NOISE_OCTAVES = 3
TERRAIN_NOISE_PERSISTENCE = 0.5
TERRAIN_NOISE_LACUNARITY = 2.0
TERRAIN_NOISE_AMPLITUDE = 0.15 # +/- elevation added by the noise layer
HIGH_GROUND_ELEVATION = 1.0 # Cells above this count as elevated

# Initial resources.
CELL_BASE_NUTRIENTS = 50.0
CELL_NUTRIENT_SPREAD = 50.0
CELL_NUTRIENT_ELEVATION_PENALTY = 15.0
CELL_NUTRIENT_DISTANCE_PENALTY = 0.3
CELL_MIN_INITIAL_NUTRIENTS = 10.0
CELL_RAINFALL_WATER_FACTOR = 0.8
CELL_WATER_SPREAD = 20.0
CELL_WATER_ELEVATION_PENALTY = 25.0
CELL_WATER_DISTANCE_PENALTY = 0.2
CELL_MIN_INITIAL_WATER = 5.0
CELL_TEMPERATURE_SPREAD = 2.0 # +/- degrees
CELL_POLLUTION_SPREAD = 0.2 # +/- fraction of ambient pollution

# =============================================================================
# --- GRID DYNAMICS ---
# =============================================================================
NUTRIENT_CEILING = 100.0
WATER_CEILING = 100.0
POLLUTION_CEILING = 100.0

# Water balance.
EVAPORATION_BASE_RATE = 0.08
EVAPORATION_REFERENCE_TEMP = 20.0
EVAPORATION_TEMP_SCALE = 15.0
EVAPORATION_ELEVATION_FACTOR = 0.3
RAIN_SHADOW_PER_ELEVATION = 0.2
RAIN_SHADOW_MAX = 0.7
RAIN_ABSORPTION = 0.15
DRAINAGE_PER_ELEVATION = 0.4
DRAINAGE_RATE = 0.1
WATER_CAPACITY_FLOOR = 20.0
WATER_CAPACITY_LOSS_PER_ELEVATION = 30.0

# Nutrient diffusion between the four direct neighbours.
NUTRIENT_DIFFUSION_RATE = 0.01
DOWNHILL_FLOW_MODIFIER = 1.5
UPHILL_FLOW_MODIFIER = 0.7
NEIGHBOR_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1)) # (dx, dy)

# Temperature and pollution relaxation.
TEMPERATURE_ADJUSTMENT_RATE = 0.2
TEMPERATURE_LAPSE_PER_ELEVATION = 2.0
POLLUTION_DECAY_RATE = 0.01
POLLUTION_SETTLING_RATE = 0.02
POLLUTION_REDUCTION_PER_ELEVATION = 0.1

# Disturbance damage to terrain.
DISTURBANCE_RESISTANCE_PER_ELEVATION = 0.2
DISTURBANCE_MAX_RESISTANCE = 0.5
FIRE_HIGH_GROUND_ELEVATION = 1.0
FIRE_HIGH_GROUND_MULTIPLIER = 1.3
FIRE_NUTRIENT_BURN = 0.2
FIRE_WATER_BURN = 0.8
FIRE_CELL_HEATING = 20.0
DROUGHT_HIGH_GROUND_ELEVATION = 0.5
DROUGHT_HIGH_GROUND_MULTIPLIER = 1.4
DROUGHT_WATER_LOSS = 0.7
DROUGHT_CELL_HEATING = 5.0
FLOOD_LOW_GROUND_ELEVATION = 0.5
FLOOD_LOW_GROUND_MULTIPLIER = 1.5
FLOOD_HIGH_GROUND_MULTIPLIER = 0.3
FLOOD_WATER_GAIN = 40.0
FLOOD_NUTRIENT_WASHOUT = 0.3
HUMAN_LOW_GROUND_ELEVATION = 1.0
HUMAN_LOW_GROUND_MULTIPLIER = 1.2
HUMAN_HIGH_GROUND_MULTIPLIER = 0.6
HUMAN_NUTRIENT_DEPLETION = 0.4
HUMAN_POLLUTION_GAIN = 30.0

# Offspring placement.
PLACEMENT_MAX_OCCUPANTS = 10
PLACEMENT_ELEVATION_BONUS = 2

# =============================================================================
# --- ORGANISMS (GENERAL) ---
# =============================================================================
ORGANISM_DEFAULT_ENERGY = 100.0
ORGANISM_DEFAULT_SIZE = 1.0
ORGANISM_DEFAULT_MAX_AGE = 100
ORGANISM_DEFAULT_REPRODUCTION_ENERGY = 150.0
ORGANISM_DEFAULT_REPRODUCTION_RATE = 0.2
ORGANISM_DEFAULT_MOVEMENT_COST = 1.0

OFFSPRING_ENERGY_SHARE = 0.5 # Fraction of the parent's energy handed to the offspring
TRAIT_JITTER_RANGE = (0.9, 1.1) # Uniform multiplier applied to inherited traits

# =============================================================================
# --- PRODUCERS ---
# =============================================================================
PRODUCER_DEFAULT_GROWTH_RATE = 0.1
PRODUCER_DEFAULT_PHOTOSYNTHESIS_RATE = 0.25
PRODUCER_DEFAULT_WATER_CONSUMPTION = 0.08

PRODUCER_OPTIMAL_TEMPERATURE = 25.0
PRODUCER_TEMPERATURE_TOLERANCE = 18.0
PRODUCER_MIN_TEMPERATURE_FACTOR = 0.1
PRODUCER_MIN_SEASONAL_FACTOR = 0.3
PRODUCER_PHOTOSYNTHESIS_MULTIPLIER = 12.0
PRODUCER_GROWTH_ENERGY_THRESHOLD = 110.0
PRODUCER_GROWTH_RESOURCE_THRESHOLD = 0.4
PRODUCER_GROWTH_ENERGY_COST = 8.0

# =============================================================================
# --- CONSUMERS ---
# =============================================================================
CONSUMER_DEFAULT_HUNTING_EFFICIENCY = 0.5
CONSUMER_DEFAULT_METABOLISM_RATE = 0.08

CONSUMER_OPTIMAL_TEMPERATURE = 22.0
CONSUMER_TEMPERATURE_TOLERANCE = 25.0
CONSUMER_TEMPERATURE_IMPACT = 0.5
CONSUMER_MAX_TEMPERATURE_FACTOR = 1.5
CONSUMER_SEASON_BASE_FACTOR = 1.3
CONSUMER_SEASON_IMPACT = 0.4
HUNT_SIZE_RATIO_OFFSET = 0.3
HUNT_ENERGY_TRANSFER = 0.8
FAILED_HUNT_COST_MULTIPLIER = 1.5

CONSUMER_MOVE_CHANCE = 0.8
PLANT_FORAGE_RADIUS = 1
PREY_HUNT_RADIUS = 2
CONSUMER_OFFSPRING_RADIUS = 3

# =============================================================================
# --- DECOMPOSERS ---
# =============================================================================
DECOMPOSER_DEFAULT_DECOMPOSITION_RATE = 0.35
DECOMPOSER_DEFAULT_NUTRIENT_PRODUCTION_RATE = 0.25

DEAD_MATTER_SATURATION = 4.0 # Corpses per cell at which the dead-matter factor saturates
DECOMPOSER_MIN_MOISTURE_FACTOR = 0.3
DECOMPOSER_COLD_FACTOR = 0.2 # Below freezing
DECOMPOSER_HOT_FACTOR = 0.6 # Above the heat limit
DECOMPOSER_HEAT_LIMIT = 40.0
DECOMPOSER_OPTIMAL_RANGE = (15.0, 35.0)
DECOMPOSER_HEAT_DECLINE = 0.4 # Lost per DECOMPOSER_HEAT_SPAN degrees above the optimum
DECOMPOSER_HEAT_SPAN = 10.0
DECOMPOSER_ENERGY_MULTIPLIER = 12.0
DECOMPOSER_GROWTH_ENERGY_THRESHOLD = 130.0
DECOMPOSER_GROWTH_DEAD_FACTOR_THRESHOLD = 0.25
DECOMPOSER_GROWTH_RATE = 0.06
DECOMPOSER_GROWTH_ENERGY_COST = 4.0
CORPSE_ENERGY_PER_SIZE = 6.0

DECOMPOSER_MOVE_CHANCE = 0.4
PRODUCER_OFFSPRING_RADIUS = 2
DECOMPOSER_OFFSPRING_RADIUS = 2

# =============================================================================
# --- STATISTICS ---
# =============================================================================
STABILITY_WINDOW = 10 # Samples considered by the stability index
STABILITY_DIVISOR = 4.0

# =============================================================================
# --- DEFAULT RUN CONFIGURATION ---
# =============================================================================
DEFAULT_GRID_WIDTH = 30
DEFAULT_GRID_HEIGHT = 30
DEFAULT_INITIAL_PRODUCERS = 80
DEFAULT_INITIAL_HERBIVORES = 25
DEFAULT_INITIAL_CARNIVORES = 8
DEFAULT_INITIAL_OMNIVORES = 0
DEFAULT_INITIAL_DECOMPOSERS = 100
DEFAULT_SIMULATION_SPEED = 1.0
DEFAULT_INITIAL_TEMPERATURE = 25.0
DEFAULT_INITIAL_RAINFALL = 30.0

# Ranges used when the caller restarts after an extinction.
RANDOM_GRID_SIZE_RANGE = (25, 40) # Upper bound exclusive
RANDOM_PRODUCERS_RANGE = (60, 100)
RANDOM_HERBIVORES_RANGE = (15, 35)
RANDOM_CARNIVORES_RANGE = (5, 15)
RANDOM_DECOMPOSERS_RANGE = (50, 70)
RANDOM_TEMPERATURE_RANGE = (20.0, 30.0)
RANDOM_RAINFALL_RANGE = (40.0, 80.0)
RANDOM_DISTURBANCES_CHANCE = 0.5

# =============================================================================
# --- INITIAL POPULATION TRAITS ---
# =============================================================================
# Each entry is (base, spread): values are drawn uniformly from [base, base + spread).
INITIAL_PRODUCER_TRAITS = {
    'energy': (120.0, 40.0),
    'size': (0.6, 1.2),
    'max_age': (90, 30),
    'reproduction_rate': (0.12, 0.15),
    'reproduction_energy': (110.0, 50.0),
    'growth_rate': (0.06, 0.08),
    'photosynthesis_rate': (0.15, 0.15),
}
INITIAL_HERBIVORE_TRAITS = {
    'energy': (180.0, 40.0),
    'size': (1.0, 0.8),
    'max_age': (70, 25),
    'reproduction_rate': (0.06, 0.12),
    'reproduction_energy': (160.0, 30.0),
    'hunting_efficiency': (0.5, 0.25),
    'metabolism_rate': (0.06, 0.03),
    'movement_cost': (0.6, 0.3),
}
INITIAL_CARNIVORE_TRAITS = {
    'energy': (220.0, 80.0),
    'size': (1.8, 1.5),
    'max_age': (80, 30),
    'reproduction_rate': (0.04, 0.06),
    'reproduction_energy': (220.0, 40.0),
    'hunting_efficiency': (0.6, 0.3),
    'metabolism_rate': (0.08, 0.04),
    'movement_cost': (1.0, 0.4),
}
INITIAL_OMNIVORE_TRAITS = {
    'energy': (200.0, 60.0),
    'size': (1.4, 1.0),
    'max_age': (75, 30),
    'reproduction_rate': (0.05, 0.08),
    'reproduction_energy': (190.0, 40.0),
    'hunting_efficiency': (0.5, 0.3),
    'metabolism_rate': (0.07, 0.04),
    'movement_cost': (0.8, 0.4),
}
INITIAL_DECOMPOSER_TRAITS = {
    'energy': (100.0, 30.0),
    'size': (0.4, 0.6),
    'max_age': (75, 15),
    'reproduction_rate': (0.25, 0.15),
    'reproduction_energy': (90.0, 40.0),
    'decomposition_rate': (0.25, 0.25),
    'nutrient_production_rate': (0.3, 0.2),
    'movement_cost': (0.2, 0.2),
}

# =============================================================================
# --- UI & COLORS ---
# =============================================================================
CELL_SIZE_PIXELS = 20
SIDE_PANEL_WIDTH = 300
UI_FONT_SIZE = 22
UI_LINE_SPACING = 22
UI_PANEL_MARGIN = 10
ORGANISM_DOT_RADIUS = 3
CHART_OUTPUT_DIR = "charts"

COLOR_WHITE = (255, 255, 255); COLOR_BLACK = (0, 0, 0); COLOR_VOID = (10, 0, 20)
COLOR_PANEL_BG = (25, 25, 35)
COLOR_LOWLAND = (34, 139, 34); COLOR_HIGHLAND = (139, 119, 101)
COLOR_WET = (70, 130, 180)
COLOR_DISTURBANCE = (255, 80, 0)
COLOR_PRODUCER = (120, 220, 60)
COLOR_HERBIVORE = (240, 220, 80)
COLOR_CARNIVORE = (220, 40, 40)
COLOR_OMNIVORE = (200, 120, 220)
COLOR_DECOMPOSER = (150, 100, 50)
COLOR_DEAD = (90, 90, 90)
