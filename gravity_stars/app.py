"""pygame front-end: draws the simulation and feeds it pointer input."""
import asyncio
import logging
import random

import pygame

from .config import PhysicsMode
from .input_handler import InputHandler
from .simulation import GravitySimulation

logger = logging.getLogger(__name__)

# Colors
COLORS = {
    'background': (5, 5, 15),
    'text': (200, 200, 200),
    'text_dim': (100, 100, 120),
    'preview': (100, 255, 100),
    'ripple': (160, 200, 255),
    'trail_fade': 0.6,
}

# Mass gradient endpoints: light stars are blue-white, heavy ones amber
LIGHT_STAR = (150, 190, 255)
HEAVY_STAR = (255, 190, 90)


def star_color(mass, config):
    """Blend from LIGHT_STAR to HEAVY_STAR across the configured mass range."""
    span = config.max_mass - config.min_mass
    t = 0.0 if span <= 0 else (mass - config.min_mass) / span
    t = min(1.0, max(0.0, t))
    return tuple(int(lo + (hi - lo) * t) for lo, hi in zip(LIGHT_STAR, HEAVY_STAR))


def trail_segments(trail, color):
    """Yield (start, end, color) line segments that fade toward the tail."""
    points = [(p.x, p.y) for p in trail]
    trail_color = tuple(max(30, c // 2) for c in color)
    for i in range(len(points) - 1):
        # Skip the jump across a wrapped edge
        if abs(points[i][0] - points[i + 1][0]) > 100 or abs(points[i][1] - points[i + 1][1]) > 100:
            continue
        alpha = int(255 * (i / len(points)) * COLORS['trail_fade'])
        seg_color = tuple(min(255, c + alpha // 4) for c in trail_color)
        yield points[i], points[i + 1], seg_color


class BackgroundStar:
    """Background star for visual effect"""
    def __init__(self, width, height):
        self.x = random.randint(0, width)
        self.y = random.randint(0, height)
        self.brightness = random.randint(50, 150)
        self.size = random.choice([1, 1, 1, 2])

    def draw(self, surface):
        color = (self.brightness, self.brightness, self.brightness + 20)
        if self.size == 1:
            surface.set_at((self.x, self.y), color)
        else:
            pygame.draw.circle(surface, color, (self.x, self.y), self.size)


class Button:
    def __init__(self, x, y, width, height, text, font, color=(80, 80, 100)):
        self.rect = pygame.Rect(x, y, width, height)
        self.text = text
        self.font = font
        self.color = color
        self.hover_color = tuple(min(255, c + 40) for c in color)
        self.is_hovered = False

    def draw(self, surface):
        color = self.hover_color if self.is_hovered else self.color
        pygame.draw.rect(surface, color, self.rect, border_radius=4)
        pygame.draw.rect(surface, (120, 120, 140), self.rect, 1, border_radius=4)
        text_surf = self.font.render(self.text, True, (220, 220, 220))
        text_rect = text_surf.get_rect(center=self.rect.center)
        surface.blit(text_surf, text_rect)

    def update(self, mouse_pos):
        self.is_hovered = self.rect.collidepoint(mouse_pos)

    def is_clicked(self, mouse_pos):
        return self.rect.collidepoint(mouse_pos)


def draw_body(surface, body, config):
    color = star_color(body.mass, config)
    radius = max(2, int(round(body.radius)))
    sx, sy = int(body.x), int(body.y)

    for start, end, seg_color in trail_segments(body.trail, color):
        pygame.draw.line(surface, seg_color, start, end, 1)

    # Draw glow effect
    for i in range(3, 0, -1):
        glow_radius = radius + i * 3
        glow_alpha = 30 - i * 8
        glow_color = tuple(min(255, c // 4 + glow_alpha) for c in color)
        pygame.draw.circle(surface, glow_color, (sx, sy), int(glow_radius))

    # Draw main body
    pygame.draw.circle(surface, color, (sx, sy), radius)

    # Draw highlight
    highlight_offset = radius // 3
    highlight_radius = max(1, radius // 3)
    highlight_color = tuple(min(255, c + 80) for c in color)
    pygame.draw.circle(surface, highlight_color,
                       (sx - highlight_offset, sy - highlight_offset), highlight_radius)


def draw_ripples(surface, ripples, now):
    for ripple in ripples:
        progress = ripple.progress(now)
        radius = int(ripple.max_radius * progress)
        if radius < 1:
            continue
        fade = 1.0 - progress
        color = tuple(int(c * fade) for c in COLORS['ripple'])
        pygame.draw.circle(surface, color, (int(ripple.x), int(ripple.y)), radius, 1)


def draw_creation_preview(surface, preview, font):
    """Growing circle under the pointer while a star is being held."""
    center = (int(preview.x), int(preview.y))
    pygame.draw.circle(surface, COLORS['preview'], center, max(2, int(preview.radius)), 1)
    label = font.render(f"m={preview.mass:.1f}", True, COLORS['preview'])
    surface.blit(label, (center[0] + 12, center[1] - 8))


def hud_lines(simulation, paused):
    """Text rows for the heads-up display."""
    config = simulation.config
    diag = simulation.diagnostics()
    mode = "Orbit playground" if config.physics_mode is PhysicsMode.ORBIT_PLAYGROUND else "N-body"
    lines = [
        f"Stars: {diag.body_count}/{config.max_stars}",
        f"Mode: {mode}  Wrap: {'on' if config.wraps else 'off'}  "
        f"Merge: {'on' if config.merging_enabled else 'off'}",
        f"Energy: {diag.total_energy:.3e}",
        f"Momentum: ({diag.momentum[0]:.1f}, {diag.momentum[1]:.1f})",
    ]
    stats = simulation.debug_stats()
    if stats is not None:
        lines += [
            f"Hold drag: {stats.hold_drag_speed:.0f} px/s",
            f"Flick: {stats.release_flick_speed:.0f} -> {stats.compressed_speed:.0f} px/s",
            f"Launch: {stats.final_launch_speed:.0f} px/s",
            f"v_circ: {stats.estimated_v_circ:.0f}  v_esc: {stats.estimated_v_esc:.0f}",
        ]
    if paused:
        lines.insert(0, "PAUSED")
    return lines


def draw_hud(surface, simulation, paused, buttons, font):
    """Draw the heads-up display"""
    y_offset = 10
    for line in hud_lines(simulation, paused):
        text = font.render(line, True, COLORS['text'])
        surface.blit(text, (10, y_offset))
        y_offset += 18

    for button in buttons:
        button.draw(surface)

    help_text = font.render("hold + flick: star   W wrap   M mode   G merge   X clear   SPACE pause",
                            True, COLORS['text_dim'])
    surface.blit(help_text, (90, surface.get_height() - 34))


async def main(simulation, fps=60):
    pygame.init()
    screen = pygame.display.set_mode((int(simulation.width), int(simulation.height)), pygame.RESIZABLE)
    pygame.display.set_caption("Gravity Stars")

    font = pygame.font.SysFont('Monaco', 14)
    background_stars = [BackgroundStar(int(simulation.width), int(simulation.height)) for _ in range(200)]
    clear_button = Button(10, int(simulation.height) - 40, 60, 28, "Clear", font, (120, 60, 60))
    buttons = [clear_button]
    handler = InputHandler(simulation)
    clock = pygame.time.Clock()
    running = True
    logger.info("window %dx%d, %s", simulation.width, simulation.height, simulation.config.physics_mode.value)

    while running:
        mouse_pos = pygame.mouse.get_pos()
        for button in buttons:
            button.update(mouse_pos)

        for event in pygame.event.get():
            if (event.type == pygame.MOUSEBUTTONDOWN and event.button == 1
                    and clear_button.is_clicked(event.pos)):
                simulation.clear_all_bodies()
                continue
            if event.type == pygame.VIDEORESIZE:
                clear_button.rect.y = event.h - 40
            running = handler.handle_event(event) and running

        dt = clock.tick(fps) / 1000.0
        if not handler.paused:
            simulation.tick(dt)

        screen.fill(COLORS['background'])
        for star in background_stars:
            star.draw(screen)
        now = simulation.clock()
        draw_ripples(screen, simulation.ripples, now)
        for body in simulation.bodies:
            draw_body(screen, body, simulation.config)
        preview = simulation.creation_preview()
        if preview is not None:
            draw_creation_preview(screen, preview, font)
        draw_hud(screen, simulation, handler.paused, buttons, font)

        pygame.display.flip()
        await asyncio.sleep(0)

    pygame.quit()


def run(width, height, config, fps=60):
    simulation = GravitySimulation(width, height, config)
    asyncio.run(main(simulation, fps=fps))
