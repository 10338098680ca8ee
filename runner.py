# runner.py

import numpy as np
import logger as log
from config import generate_random_config

class SimulationRunner:
    """
    Drives a World from real elapsed time and decides what happens when the
    ecosystem goes extinct.
    """
    def __init__(self, world, auto_restart=True, rng=None):
        self.world = world
        self.auto_restart = auto_restart
        self.rng = rng if rng is not None else np.random.default_rng()
        self.extinction_count = 0
        self.last_extinction_day = None
        self.last_result = None

    def advance(self, real_delta_seconds):
        """
        Runs however many steps are due for this much real time. Returns the
        list of StepResults produced, stopping early on extinction.
        """
        results = []
        for _ in range(self.world.time_manager.get_cycles_due(real_delta_seconds)):
            result = self.step_once()
            results.append(result)
            if result.extinct:
                break
        return results

    def step_once(self):
        result = self.world.step()
        self.last_result = result
        if result.extinct:
            self._handle_extinction(result)
        return result

    def _handle_extinction(self, result):
        self.extinction_count += 1
        self.last_extinction_day = result.snapshot['day']

        if not self.auto_restart:
            self.world.time_manager.set_paused(True)
            log.log("Simulation paused after extinction. Auto-restart is off.")
            return

        log.log(f"Auto-restarting after extinction #{self.extinction_count} with new parameters...")
        config = generate_random_config(self.rng)
        self.world.initialize(config)
        self.world.time_manager.set_paused(False)

    def toggle_auto_restart(self):
        self.auto_restart = not self.auto_restart
        log.log(f"Event: Auto-restart {'enabled' if self.auto_restart else 'disabled'}.")
