#time_manager.py

import constants as C

class TimeManager:
    """
    Converts real elapsed time into whole simulation steps at the requested
    rate, and mirrors the world's calendar for display and logging.
    """
    def __init__(self, cycles_per_second=C.DEFAULT_SIMULATION_SPEED):
        self.is_paused = False
        self.cycles_per_second = cycles_per_second
        self.accumulator = 0.0  # Fractional steps carried over between frames
        self.day = 0
        self.season = C.SEASON_SPRING

    def get_cycles_due(self, real_delta_seconds):
        """Returns how many steps to run for this frame, capped to avoid a catch-up spiral."""
        if self.is_paused:
            return 0
        self.accumulator += real_delta_seconds * self.cycles_per_second
        cycles = int(self.accumulator)
        if cycles >= C.MAX_CATCH_UP_CYCLES:
            # Drop the backlog rather than trying to catch up on it later.
            self.accumulator = 0.0
            return C.MAX_CATCH_UP_CYCLES
        self.accumulator -= cycles
        return cycles

    def sync(self, day, season):
        self.day = day
        self.season = season

    def toggle_pause(self):
        self.is_paused = not self.is_paused
        print(f"Event: Simulation {'paused' if self.is_paused else 'resumed'}.")

    def set_paused(self, paused):
        self.is_paused = paused

    def set_speed(self, level):
        if level in C.SPEED_LEVELS:
            self.set_cycles_per_second(C.SPEED_LEVELS[level])
            print(f"Event: Simulation speed set to level {level} ({self.cycles_per_second} cycles/s).")

    def set_cycles_per_second(self, cycles_per_second):
        if cycles_per_second > 0:
            self.cycles_per_second = cycles_per_second

    def get_display_string(self):
        time_str = f"Day: {self.day}, {self.season}"
        speed_str = f"Speed: {self.cycles_per_second:g} cycles/s"
        if self.is_paused:
            speed_str = "Speed: PAUSED"

        return f"{time_str} | {speed_str}"
