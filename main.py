"""Entry point for the laser show."""
from __future__ import annotations

import itertools
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pygame
from pygame.math import Vector3

from lasershow.behaviors.presets import builtin_behaviors
from lasershow.control.console import LaserConsole
from lasershow.control.factory import BeamFactory
from lasershow.engine.host import BehaviorHost
from lasershow.engine.logger import GameLogger, init_logger
from lasershow.engine.loop import FixedTimestepLoop
from lasershow.engine.settings import ShowSettings
from lasershow.render.camera import ViewCamera
from lasershow.render.preview import ShowPreview
from lasershow.storage.config_store import ConfigurationStore
from lasershow.storage.kv import JsonFileStore
from lasershow.storage.resolver import ShowResolver
from lasershow.world.context import ShowContext
from lasershow.world.mesh import TargetModel, TriangleMesh
from lasershow.world.scene import HelperOverlay, SceneRoot


SETTINGS_PATH = Path("settings.json")
MODEL_SPIN_DEGREES_PER_SECOND = 10.0


@dataclass
class Show:
    context: ShowContext
    host: BehaviorHost
    store: ConfigurationStore
    resolver: ShowResolver
    console: LaserConsole
    factory: BeamFactory


def build_show(settings: ShowSettings, logger: GameLogger, seed: Optional[int] = None) -> Show:
    width, height = settings.resolution
    camera = ViewCamera(
        fov_deg=60.0,
        aspect=width / height if height else 16 / 9,
        position=Vector3(0.0, 4.0, 14.0),
        target=Vector3(),
    )
    model = TargetModel(TriangleMesh.box(4.0, 4.0, 4.0), yaw=30.0, name="stage_box")
    context = ShowContext(
        scene=SceneRoot(),
        camera=camera,
        model=model,
        controls_target=Vector3(),
        helpers=HelperOverlay(),
        rng=random.Random(seed),
    )
    host = BehaviorHost(context, logger)
    store = ConfigurationStore(
        JsonFileStore(settings.store_path),
        namespace=settings.namespace,
        builtins=builtin_behaviors(),
        logger=logger,
    )
    resolver = ShowResolver(store, host, context, logger)
    console = LaserConsole(store, resolver, host, context, logger)
    return Show(context, host, store, resolver, console, BeamFactory(console, host))


def main() -> None:
    settings = ShowSettings.from_settings(SETTINGS_PATH)
    logger = init_logger(SETTINGS_PATH)
    show = build_show(settings, logger)
    resolved = show.resolver.resolve_startup()
    loop_log = logger.channel("loop")
    loop_log.info("Starting with %s from %s", resolved.name, resolved.tier)

    def update(dt: float) -> None:
        if show.context.model is not None:
            show.context.model.yaw += MODEL_SPIN_DEGREES_PER_SECOND * dt
        show.host.step(dt)

    max_duration = settings.run_seconds or None

    if settings.headless:
        # Simulated clock: one fixed step per call, no waiting on wall time.
        ticks = itertools.count()
        loop = FixedTimestepLoop(
            update,
            lambda alpha: None,
            lambda: None,
            fixed_hz=settings.sim_hz,
            max_duration=max_duration,
            clock=lambda: next(ticks) / settings.sim_hz,
        )
        try:
            loop.run()
        except KeyboardInterrupt:
            loop_log.info("Interrupted")
        loop_log.info(
            "Ran %.2fs of show time, %d frames, %d beams active",
            show.host.clock.elapsed,
            show.host.clock.frame,
            show.host.beam_count(),
        )
        return

    pygame.init()
    screen = pygame.display.set_mode(settings.resolution)
    pygame.display.set_caption("Laser Show")
    clock = pygame.time.Clock()
    preview = ShowPreview(screen)

    def process_events() -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                loop.stop()
                return
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    loop.stop()
                elif event.key == pygame.K_h:
                    show.console.toggle_helpers()
                elif event.key == pygame.K_c:
                    show.console.load_behavior("corner_array")
                elif event.key == pygame.K_w:
                    show.console.load_behavior("wireframe")
                elif event.key == pygame.K_r:
                    show.console.load_behavior("red_default")

    def render(alpha: float) -> None:
        preview.draw(show.context)
        pygame.display.flip()
        clock.tick(settings.max_fps)

    loop = FixedTimestepLoop(
        update,
        render,
        process_events,
        fixed_hz=settings.sim_hz,
        max_duration=max_duration,
    )
    try:
        loop.run()
    finally:
        pygame.quit()
        print("\nKeys: H toggle helpers, R red_default, W wireframe, C corner_array, Esc quit.")


if __name__ == "__main__":
    main()
