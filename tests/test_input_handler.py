from dataclasses import replace

import pygame
import pytest

from gravity_stars.config import BoundaryMode, DEFAULT_CONFIG, PhysicsMode
from gravity_stars.input_handler import InputHandler
from gravity_stars.simulation import GravitySimulation


@pytest.fixture
def sim(clock):
    config = replace(DEFAULT_CONFIG, angular_guidance_strength=0)
    return GravitySimulation(800, 600, config, clock=clock)


def event(kind, **attrs):
    return pygame.event.Event(kind, **attrs)


def key(k):
    return event(pygame.KEYDOWN, key=k)


def test_press_drag_release_creates_star(sim, clock):
    handler = InputHandler(sim)
    assert handler.handle_event(event(pygame.MOUSEBUTTONDOWN, button=1, pos=(100, 100)))
    assert sim.is_creating
    clock.advance(0.02)
    handler.handle_event(event(pygame.MOUSEMOTION, pos=(104, 100), rel=(4, 0), buttons=(1, 0, 0)))
    clock.advance(0.02)
    handler.handle_event(event(pygame.MOUSEBUTTONUP, button=1, pos=(108, 100)))
    assert not sim.is_creating
    assert sim.body_count == 1
    assert sim.bodies[0].vx > 0


def test_right_click_cancels(sim):
    handler = InputHandler(sim)
    handler.handle_event(event(pygame.MOUSEBUTTONDOWN, button=1, pos=(100, 100)))
    handler.handle_event(event(pygame.MOUSEBUTTONDOWN, button=3, pos=(100, 100)))
    handler.handle_event(event(pygame.MOUSEBUTTONUP, button=1, pos=(100, 100)))
    assert sim.body_count == 0


def test_escape_cancels_gesture_before_quitting(sim):
    handler = InputHandler(sim)
    handler.handle_event(event(pygame.MOUSEBUTTONDOWN, button=1, pos=(100, 100)))
    assert handler.handle_event(key(pygame.K_ESCAPE))
    assert not sim.is_creating
    assert not handler.handle_event(key(pygame.K_ESCAPE))


def test_quit_event():
    assert not InputHandler(GravitySimulation(10, 10)).handle_event(event(pygame.QUIT))


def test_toggles(sim):
    handler = InputHandler(sim)
    handler.handle_event(key(pygame.K_w))
    assert sim.config.boundary_mode is BoundaryMode.NONE
    handler.handle_event(key(pygame.K_m))
    assert sim.config.physics_mode is PhysicsMode.ORBIT_PLAYGROUND
    handler.handle_event(key(pygame.K_m))
    assert sim.config.physics_mode is PhysicsMode.N_BODY
    handler.handle_event(key(pygame.K_g))
    assert not sim.config.enable_merging
    handler.handle_event(key(pygame.K_SPACE))
    assert handler.paused


def test_clear_and_resize(sim):
    handler = InputHandler(sim)
    sim.add_body(10, 10, 1)
    handler.handle_event(key(pygame.K_x))
    assert sim.body_count == 0
    handler.handle_event(event(pygame.VIDEORESIZE, w=640, h=480, size=(640, 480)))
    assert (sim.width, sim.height) == (640, 480)
