"""Maps pygame mouse and keyboard events onto the simulation."""
from dataclasses import replace

import pygame

from .config import BoundaryMode, PhysicsMode


class InputHandler:
    """Press-hold-drag-release with the left button creates a star."""

    def __init__(self, simulation):
        self.simulation = simulation
        self.paused = False

    def handle_event(self, event):
        """
        Handle a single pygame event.
        Returns False if the application should quit, True otherwise.
        """
        sim = self.simulation
        if event.type == pygame.QUIT:
            return False

        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                if not sim.is_creating:
                    return False
                sim.cancel_creation()
            elif event.key == pygame.K_SPACE:
                self.paused = not self.paused
            elif event.key in (pygame.K_x, pygame.K_DELETE):
                sim.clear_all_bodies()
            elif event.key == pygame.K_w:
                self.toggle_wrap()
            elif event.key == pygame.K_m:
                self.toggle_mode()
            elif event.key == pygame.K_g:
                sim.update_config(replace(sim.config, enable_merging=not sim.config.enable_merging))

        elif event.type == pygame.MOUSEBUTTONDOWN:
            if event.button == 1:
                sim.begin_creation(*event.pos)
            elif event.button == 3:
                sim.cancel_creation()

        elif event.type == pygame.MOUSEMOTION:
            if sim.is_creating:
                sim.update_creation(*event.pos)

        elif event.type == pygame.MOUSEBUTTONUP:
            if event.button == 1 and sim.is_creating:
                sim.update_creation(*event.pos)
                sim.finish_creation()

        elif event.type == pygame.VIDEORESIZE:
            sim.resize(event.w, event.h)

        return True

    def toggle_wrap(self):
        sim = self.simulation
        mode = BoundaryMode.NONE if sim.config.wraps else BoundaryMode.WRAP
        sim.update_config(replace(sim.config, boundary_mode=mode))

    def toggle_mode(self):
        sim = self.simulation
        if sim.config.physics_mode is PhysicsMode.N_BODY:
            mode = PhysicsMode.ORBIT_PLAYGROUND
        else:
            mode = PhysicsMode.N_BODY
        sim.update_config(replace(sim.config, physics_mode=mode))
