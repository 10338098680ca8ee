#ui.py

import numpy as np
import pygame
import constants as C

KIND_COLORS = {
    C.KIND_PRODUCER: C.COLOR_PRODUCER,
    C.KIND_DECOMPOSER: C.COLOR_DECOMPOSER,
}
GUILD_COLORS = {
    C.GUILD_HERBIVORE: C.COLOR_HERBIVORE,
    C.GUILD_CARNIVORE: C.COLOR_CARNIVORE,
    C.GUILD_OMNIVORE: C.COLOR_OMNIVORE,
}

def get_screen_size(grid_width, grid_height):
    return (grid_width * C.CELL_SIZE_PIXELS + C.SIDE_PANEL_WIDTH, grid_height * C.CELL_SIZE_PIXELS)

def _terrain_colors(grid_data):
    """Vectorized cell colouring: elevation blends lowland to highland, water tints towards blue."""
    cells = grid_data['cells']
    elevation = np.array([[cell['elevation'] for cell in row] for row in cells])
    water = np.array([[cell['water_level'] for cell in row] for row in cells])

    t = np.clip(elevation / C.ISLAND_PEAK_ELEVATION, 0.0, 1.0)[..., np.newaxis]
    colors = (1 - t) * np.array(C.COLOR_LOWLAND) + t * np.array(C.COLOR_HIGHLAND)
    wet = (np.clip(water / C.WATER_CEILING, 0.0, 1.0) * 0.5)[..., np.newaxis]
    colors = (1 - wet) * colors + wet * np.array(C.COLOR_WET)
    # pygame surfaces are indexed [x, y]
    return np.transpose(colors.astype(np.uint8), (1, 0, 2))

def draw_world(screen, snapshot):
    """Draws the terrain, disturbance outlines and every organism from a snapshot."""
    grid_data = snapshot['grid']
    size = C.CELL_SIZE_PIXELS

    terrain = pygame.surfarray.make_surface(_terrain_colors(grid_data))
    terrain = pygame.transform.scale(terrain, (grid_data['width'] * size, grid_data['height'] * size))
    screen.blit(terrain, (0, 0))

    for disturbance in snapshot['disturbances']:
        if not disturbance['active']:
            continue
        area = disturbance['area']
        rect = (area['start_x'] * size, area['start_y'] * size,
                (area['end_x'] - area['start_x'] + 1) * size,
                (area['end_y'] - area['start_y'] + 1) * size)
        pygame.draw.rect(screen, C.COLOR_DISTURBANCE, rect, 2)

    # Organisms sharing a cell are spread over a small 3x3 pattern.
    slots = {}
    for organism in snapshot['organisms'].values():
        x, y = organism['position']['x'], organism['position']['y']
        slot = slots.get((x, y), 0)
        slots[(x, y)] = slot + 1
        offset_x = (slot % 3 + 1) * size // 4
        offset_y = (slot // 3 % 3 + 1) * size // 4

        if organism['is_dead']:
            color = C.COLOR_DEAD
        elif organism['kind'] == C.KIND_CONSUMER:
            color = GUILD_COLORS[organism['diet_guild']]
        else:
            color = KIND_COLORS[organism['kind']]
        pygame.draw.circle(screen, color, (x * size + offset_x, y * size + offset_y), C.ORGANISM_DOT_RADIUS)

def draw_side_panel(screen, font, snapshot, time_manager, runner):
    """Text panel with the calendar, climate, latest statistics and controls."""
    panel_x = snapshot['grid']['width'] * C.CELL_SIZE_PIXELS
    pygame.draw.rect(screen, C.COLOR_PANEL_BG, (panel_x, 0, C.SIDE_PANEL_WIDTH, screen.get_height()))

    environment = snapshot['environment']
    statistics = snapshot['statistics']
    lines = [
        time_manager.get_display_string(),
        f"Temp: {environment['temperature']:.1f}C  Rain: {environment['rainfall']:.0f}%",
        f"Sun: {environment['sunlight_intensity']:.0f}%  Pollution: {environment['pollution_level']:.0f}%",
        "",
    ]
    if statistics['producers']:
        lines += [
            f"Producers: {statistics['producers'][-1]}",
            f"Herbivores: {statistics['herbivores'][-1]}",
            f"Carnivores: {statistics['carnivores'][-1]}",
            f"Omnivores: {statistics['omnivores'][-1]}",
            f"Decomposers: {statistics['decomposers'][-1]}",
            f"Biodiversity: {statistics['biodiversity_index'][-1]:.3f}",
            f"Stability: {statistics['stability_index'][-1]:.3f}",
        ]
    else:
        lines.append(f"Organisms: {len(snapshot['organisms'])}")
    lines += [
        f"Disturbances: {sum(1 for d in snapshot['disturbances'] if d['active'])}",
        f"Extinctions: {runner.extinction_count}  Auto-restart: {'on' if runner.auto_restart else 'off'}",
        "",
        "[SPACE] Pause  [0-5] Speed  [RIGHT] Step",
        "[F]ire [D]rought [L]Flood [H]uman",
        "[R]estart  [A]uto-restart",
    ]

    y = C.UI_PANEL_MARGIN
    for line in lines:
        if line:
            text_surface = font.render(line, True, C.COLOR_WHITE)
            screen.blit(text_surface, (panel_x + C.UI_PANEL_MARGIN, y))
        y += C.UI_LINE_SPACING
