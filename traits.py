#traits.py

import constants as C

class ProducerTraits:
    """A data container for the traits only producers carry."""
    KEYS = ('growth_rate', 'photosynthesis_rate', 'water_consumption')

    def __init__(self, growth_rate=C.PRODUCER_DEFAULT_GROWTH_RATE,
                 photosynthesis_rate=C.PRODUCER_DEFAULT_PHOTOSYNTHESIS_RATE,
                 water_consumption=C.PRODUCER_DEFAULT_WATER_CONSUMPTION):
        self.growth_rate = growth_rate  # Size gained per tick at full resources
        self.photosynthesis_rate = photosynthesis_rate  # Energy fixing rate, unitless
        self.water_consumption = water_consumption  # Water drawn per unit size, unitless

    def copy(self):
        return ProducerTraits(self.growth_rate, self.photosynthesis_rate, self.water_consumption)

    def to_dict(self):
        return {key: getattr(self, key) for key in self.KEYS}

    @classmethod
    def from_dict(cls, data):
        return cls(**{key: data[key] for key in cls.KEYS if key in data})


class ConsumerTraits:
    """A data container for the traits only consumers carry."""
    KEYS = ('diet_guild', 'hunting_efficiency', 'metabolism_rate', 'diet')

    def __init__(self, diet_guild=C.GUILD_HERBIVORE,
                 hunting_efficiency=C.CONSUMER_DEFAULT_HUNTING_EFFICIENCY,
                 metabolism_rate=C.CONSUMER_DEFAULT_METABOLISM_RATE, diet=None):
        if diet_guild not in C.DIET_GUILDS:
            raise ValueError(f"Unknown diet guild: {diet_guild!r}")
        self.diet_guild = diet_guild  # Herbivore, Carnivore or Omnivore
        self.hunting_efficiency = hunting_efficiency  # Base chance of a successful hunt
        self.metabolism_rate = metabolism_rate  # Energy burned per unit size per tick
        self.diet = list(diet) if diet else []  # Species labels this consumer prefers

    def copy(self):
        return ConsumerTraits(self.diet_guild, self.hunting_efficiency, self.metabolism_rate, self.diet)

    def to_dict(self):
        data = {key: getattr(self, key) for key in self.KEYS}
        data['diet'] = list(self.diet)
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(**{key: data[key] for key in cls.KEYS if key in data})


class DecomposerTraits:
    """A data container for the traits only decomposers carry."""
    KEYS = ('decomposition_rate', 'nutrient_production_rate')

    def __init__(self, decomposition_rate=C.DECOMPOSER_DEFAULT_DECOMPOSITION_RATE,
                 nutrient_production_rate=C.DECOMPOSER_DEFAULT_NUTRIENT_PRODUCTION_RATE):
        self.decomposition_rate = decomposition_rate
        self.nutrient_production_rate = nutrient_production_rate

    def copy(self):
        return DecomposerTraits(self.decomposition_rate, self.nutrient_production_rate)

    def to_dict(self):
        return {key: getattr(self, key) for key in self.KEYS}

    @classmethod
    def from_dict(cls, data):
        return cls(**{key: data[key] for key in cls.KEYS if key in data})


TRAITS_BY_KIND = {
    C.KIND_PRODUCER: ProducerTraits,
    C.KIND_CONSUMER: ConsumerTraits,
    C.KIND_DECOMPOSER: DecomposerTraits,
}

def default_traits(kind):
    """Returns a fresh default payload for the given organism kind."""
    if kind not in TRAITS_BY_KIND:
        raise ValueError(f"Unknown organism kind: {kind!r}")
    return TRAITS_BY_KIND[kind]()

def traits_from_dict(kind, data):
    if kind not in TRAITS_BY_KIND:
        raise ValueError(f"Unknown organism kind: {kind!r}")
    return TRAITS_BY_KIND[kind].from_dict(data)
