# logger.py

import constants as C

# This will hold a reference to the world's TimeManager instance.
_time_manager = None

def set_time_manager(tm):
    """Sets the global time manager for the logger to use."""
    global _time_manager
    _time_manager = tm

def log(message):
    """Prints a message with a simulation timestamp if available."""
    # Check if the time manager has been set and the simulation has started.
    if _time_manager and _time_manager.day > 0:
        time_str = f"[Day {_time_manager.day:03d} {_time_manager.season}]"
        print(f"{time_str} {message}")
    else:
        # For messages logged before the first step.
        print(f"[Sim Start] {message}")

def debug(message):
    """Prints a diagnostic message, only when debug logging is switched on."""
    if C.DEBUG_LOGGING:
        log(f"DEBUG: {message}")
