# environment.py

import constants as C
import logger as log


def _clamp(value, bounds):
    low, high = bounds
    return max(low, min(high, value))


class Disturbance:
    """A temporary catastrophe affecting an inclusive rectangle of cells."""
    def __init__(self, disturbance_type, intensity, duration, area, current=0, active=True):
        if disturbance_type not in C.DISTURBANCE_TYPES:
            raise ValueError(f"Unknown disturbance type: {disturbance_type!r}")
        self.type = disturbance_type
        self.intensity = intensity  # 0-1
        self.duration = duration  # Days
        self.current = current  # Days elapsed
        self.active = active
        self.area = dict(area)  # start_x, start_y, end_x, end_y, inclusive

    def to_dict(self):
        return {
            'type': self.type,
            'intensity': self.intensity,
            'duration': self.duration,
            'current': self.current,
            'active': self.active,
            'area': dict(self.area),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(data['type'], data['intensity'], data['duration'], data['area'],
                   current=data['current'], active=data['active'])

    def __repr__(self):
        return f"<Disturbance {self.type} I={self.intensity:.2f} {self.current}/{self.duration} {self.area}>"


class Environment:
    """
    Global climate: a 120-day year split into four seasons, with daily noise,
    plus the list of active disturbances.
    """
    def __init__(self, width, height, temperature=C.ENV_DEFAULT_TEMPERATURE,
                 rainfall=C.ENV_DEFAULT_RAINFALL, allow_random_disturbances=False):
        self.width = width
        self.height = height
        self.day = 0
        self.season = C.SEASON_SPRING
        self.temperature = temperature
        self.rainfall = rainfall
        self.seasonal_factor = C.ENV_DEFAULT_SEASONAL_FACTOR
        self.nutrient_level = C.ENV_DEFAULT_NUTRIENT_LEVEL
        self.sunlight_intensity = C.ENV_DEFAULT_SUNLIGHT
        self.pollution_level = C.ENV_DEFAULT_POLLUTION
        self.allow_random_disturbances = allow_random_disturbances
        self.disturbances = []
        log.log(f"Environment initialized: {temperature:.1f}C, {rainfall:.1f}% rainfall.")

    def update(self, rng):
        """Advances the climate by one day."""
        self.day += 1

        day_in_year = self.day % C.YEAR_LENGTH_DAYS
        season_index = int(day_in_year // C.SEASON_LENGTH_DAYS)
        self.season = C.SEASONS[season_index]

        self._update_seasonal_factors(rng)
        self._update_disturbances()

        if self.allow_random_disturbances and rng.random() < C.RANDOM_DISTURBANCE_CHANCE:
            self._generate_random_disturbance(rng)

    def _update_seasonal_factors(self, rng):
        # Position in the current season, 0-1
        p = (self.day % C.SEASON_LENGTH_DAYS) / C.SEASON_LENGTH_DAYS

        if self.season == C.SEASON_SPRING:
            self.temperature = 15 + 10 * p
            self.rainfall = 40 + 20 * p
            self.sunlight_intensity = 60 + 20 * p
            self.seasonal_factor = 0.7 + 0.3 * p
        elif self.season == C.SEASON_SUMMER:
            self.temperature = 25 + 5 * (1 - p)
            self.rainfall = 60 - 20 * p
            self.sunlight_intensity = 80 + 20 * (1 - p)
            self.seasonal_factor = 1.0
        elif self.season == C.SEASON_FALL:
            self.temperature = 25 - 15 * p
            self.rainfall = 40 - 10 * p
            self.sunlight_intensity = 60 - 20 * p
            self.seasonal_factor = 0.7 - 0.2 * p
        else:  # Winter
            self.temperature = 10 - 5 * p
            self.rainfall = 30 - 10 * (1 - p)
            self.sunlight_intensity = 40 + 20 * p
            self.seasonal_factor = 0.5 + 0.2 * p

        # Small daily variation
        self.temperature += rng.uniform(-C.ENV_TEMPERATURE_JITTER, C.ENV_TEMPERATURE_JITTER)
        self.rainfall += rng.uniform(-C.ENV_RAINFALL_JITTER, C.ENV_RAINFALL_JITTER)

        self.temperature = _clamp(self.temperature, C.ENV_TEMPERATURE_BOUNDS)
        self.rainfall = _clamp(self.rainfall, C.ENV_RAINFALL_BOUNDS)
        self.sunlight_intensity = _clamp(self.sunlight_intensity, C.ENV_SUNLIGHT_BOUNDS)

    def _update_disturbances(self):
        still_active = []
        for disturbance in self.disturbances:
            if not disturbance.active:
                continue
            disturbance.current += 1
            if disturbance.current >= disturbance.duration:
                disturbance.active = False
                log.log(f"Event: {disturbance.type} has ended.")
                continue
            still_active.append(disturbance)
        self.disturbances = still_active

    def _generate_random_disturbance(self, rng):
        disturbance_type = C.DISTURBANCE_TYPES[int(rng.integers(len(C.DISTURBANCE_TYPES)))]
        low, high = C.RANDOM_DISTURBANCE_INTENSITY_RANGE
        intensity = low + rng.random() * (high - low)
        duration = C.RANDOM_DISTURBANCE_MIN_DURATION_DAYS + int(rng.integers(C.RANDOM_DISTURBANCE_DURATION_SPREAD_DAYS))

        center_x = int(rng.integers(self.width))
        center_y = int(rng.integers(self.height))
        max_radius = min(self.width, self.height) / C.RANDOM_DISTURBANCE_RADIUS_DIVISOR
        radius = int(rng.random() * max_radius) + C.RANDOM_DISTURBANCE_MIN_RADIUS

        area = {
            'start_x': max(0, center_x - radius),
            'start_y': max(0, center_y - radius),
            'end_x': min(self.width - 1, center_x + radius),
            'end_y': min(self.height - 1, center_y + radius),
        }
        self.add_disturbance(disturbance_type, intensity, duration, area)

    def add_disturbance(self, disturbance_type, intensity, duration, area):
        """Registers a disturbance and applies its immediate effect on the global climate."""
        intensity = _clamp(intensity, (0.0, 1.0))
        duration = max(1, int(duration))
        disturbance = Disturbance(disturbance_type, intensity, duration, area)
        self.disturbances.append(disturbance)

        if disturbance_type == C.DISTURBANCE_FIRE:
            self.temperature += C.FIRE_TEMPERATURE_SHIFT * intensity
        elif disturbance_type == C.DISTURBANCE_DROUGHT:
            self.rainfall *= (1 - C.DROUGHT_RAINFALL_REDUCTION * intensity)
        elif disturbance_type == C.DISTURBANCE_FLOOD:
            self.rainfall += C.FLOOD_RAINFALL_INCREASE * intensity
        elif disturbance_type == C.DISTURBANCE_HUMAN_ACTIVITY:
            self.pollution_level += C.HUMAN_POLLUTION_INCREASE * intensity

        self.temperature = _clamp(self.temperature, C.ENV_DISTURBED_TEMPERATURE_BOUNDS)
        self.rainfall = _clamp(self.rainfall, C.ENV_DISTURBED_RAINFALL_BOUNDS)
        self.pollution_level = _clamp(self.pollution_level, C.ENV_POLLUTION_BOUNDS)

        log.log(f"Event: {disturbance_type} started (intensity {intensity:.2f}, {duration} days) "
                f"over x {area['start_x']}-{area['end_x']}, y {area['start_y']}-{area['end_y']}.")
        return disturbance

    def get_active_disturbances(self):
        return [d for d in self.disturbances if d.active]

    def get_config(self):
        """A plain-dict copy of the current climate, as handed to organisms and the grid."""
        return {
            'temperature': self.temperature,
            'rainfall': self.rainfall,
            'seasonal_factor': self.seasonal_factor,
            'nutrient_level': self.nutrient_level,
            'sunlight_intensity': self.sunlight_intensity,
            'pollution_level': self.pollution_level,
            'season': self.season,
            'day': self.day,
            'width': self.width,
            'height': self.height,
        }

    def to_dict(self):
        """Climate state only; disturbances are serialized separately by the world."""
        data = self.get_config()
        data['allow_random_disturbances'] = self.allow_random_disturbances
        return data

    @classmethod
    def from_dict(cls, data, disturbances=()):
        # Build without logging a fresh initialization.
        environment = cls.__new__(cls)
        environment.width = data['width']
        environment.height = data['height']
        environment.day = data['day']
        environment.season = data['season']
        environment.temperature = data['temperature']
        environment.rainfall = data['rainfall']
        environment.seasonal_factor = data['seasonal_factor']
        environment.nutrient_level = data['nutrient_level']
        environment.sunlight_intensity = data['sunlight_intensity']
        environment.pollution_level = data['pollution_level']
        environment.allow_random_disturbances = data.get('allow_random_disturbances', False)
        environment.disturbances = [Disturbance.from_dict(d) for d in disturbances]
        if environment.season not in C.SEASONS:
            raise ValueError(f"Unknown season: {environment.season!r}")
        return environment
