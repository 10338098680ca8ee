#main.py

import pygame
import cProfile
import pstats
import constants as C
from config import SimulationConfig, generate_random_config
from world import World
from runner import SimulationRunner
from graphing_manager import GraphingManager
from ui import draw_world, draw_side_panel, get_screen_size
import logger

DISTURBANCE_KEYS = {
    pygame.K_f: C.DISTURBANCE_FIRE,
    pygame.K_d: C.DISTURBANCE_DROUGHT,
    pygame.K_l: C.DISTURBANCE_FLOOD,
    pygame.K_h: C.DISTURBANCE_HUMAN_ACTIVITY,
}
SPEED_KEYS = {
    pygame.K_0: 0, pygame.K_1: 1, pygame.K_2: 2,
    pygame.K_3: 3, pygame.K_4: 4, pygame.K_5: 5,
}
USER_DISTURBANCE_INTENSITY = 0.6
USER_DISTURBANCE_DURATION_DAYS = 5

def initialize_simulation(config):
    logger.log("Attempting to initialize Pygame...")
    pygame.init()
    logger.log("Pygame initialized successfully.")
    screen_size = get_screen_size(config.grid_width, config.grid_height)
    logger.log(f"Creating display surface with size: {screen_size}")
    screen = pygame.display.set_mode(screen_size)
    pygame.display.set_caption("Grid Ecosystem")
    font = pygame.font.Font(None, C.UI_FONT_SIZE)
    logger.log("Display surface and font created.")
    return screen, font

def _resize_if_needed(screen, snapshot):
    grid_data = snapshot['grid']
    size = get_screen_size(grid_data['width'], grid_data['height'])
    if screen.get_size() != size:
        screen = pygame.display.set_mode(size)
    return screen

def run_simulation(config):
    screen, font = initialize_simulation(config)
    clock = pygame.time.Clock()
    world = World()
    logger.set_time_manager(world.time_manager)
    snapshot = world.initialize(config)
    runner = SimulationRunner(world, auto_restart=True, rng=world.rng)
    world.time_manager.set_paused(False)

    logger.log("Starting main simulation loop...")
    logger.log("CONTROLS: [SPACE] Pause, [0-5] Speed, [RIGHT] Step, [F/D/L/H] Disturbance, "
               "[R] Restart, [A] Auto-restart.")

    running = True
    while running:
        # Cap real time per frame to prevent a "spiral of death".
        real_delta_seconds = min(clock.tick(C.CLOCK_TICK_RATE) / C.MILLISECONDS_PER_SECOND,
                                 C.MAX_FRAME_DELTA_SECONDS)

        # --- Event Handling ---
        for event in pygame.event.get():
            if event.type == pygame.QUIT: running = False
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_SPACE: world.toggle_pause()
                if event.key in SPEED_KEYS: world.time_manager.set_speed(SPEED_KEYS[event.key])
                if event.key == pygame.K_RIGHT:
                    runner.step_once()
                    snapshot = world.serialize_snapshot()
                if event.key in DISTURBANCE_KEYS:
                    world.add_disturbance(DISTURBANCE_KEYS[event.key],
                                          USER_DISTURBANCE_INTENSITY, USER_DISTURBANCE_DURATION_DAYS)
                    snapshot = world.serialize_snapshot()
                if event.key == pygame.K_r:
                    logger.log("Event: Manual restart requested.")
                    snapshot = world.initialize(generate_random_config(runner.rng))
                    world.time_manager.set_paused(False)
                if event.key == pygame.K_a: runner.toggle_auto_restart()

        # --- Simulation Logic ---
        results = runner.advance(real_delta_seconds)
        if results:
            snapshot = world.serialize_snapshot() if results[-1].extinct else results[-1].snapshot

        # --- Drawing ---
        screen = _resize_if_needed(screen, snapshot)
        screen.fill(C.COLOR_VOID)
        draw_world(screen, snapshot)
        draw_side_panel(screen, font, snapshot, world.time_manager, runner)
        pygame.display.flip()

    logger.log("Main simulation loop ended.")
    return world

def shutdown_simulation(world):
    GraphingManager().generate_and_save_graphs(world.statistics)
    logger.log("Quitting Pygame...")
    pygame.quit()
    logger.log("Simulation ended cleanly.")

def main():
    logger.log("--- Simulation Start ---")
    config = SimulationConfig()
    world = run_simulation(config)
    shutdown_simulation(world)
    logger.log("--- Simulation Exit ---")

if __name__ == '__main__':
    if not C.PROFILER_ENABLED:
        main()
    else:
        profiler = cProfile.Profile()
        try:
            profiler.run('main()')
        except SystemExit:
            # This allows the simulation to exit cleanly without a profiler error
            pass
        finally:
            print("\n\n--- PROFILER REPORT ---")
            stats = pstats.Stats(profiler)
            stats.sort_stats(pstats.SortKey.CUMULATIVE)
            stats.print_stats(C.PROFILER_PRINT_LINE_COUNT)
