"""Tests for the beam behaviors and the registry."""
from __future__ import annotations

import random
import sys
from pathlib import Path

import pytest
from pygame.math import Vector3

sys.path.append(str(Path(__file__).resolve().parents[1]))

from lasershow.behaviors.base import (
    FALLBACK_CORNERS,
    BeamParameters,
    StillnessTracker,
    UnknownBehaviorError,
    pulse_brightness,
)
from lasershow.behaviors.corner_array import CornerArrayBehavior, SurfaceAnchor, grid_offset
from lasershow.behaviors.default import DefaultBehavior
from lasershow.behaviors.registry import create_behavior
from lasershow.behaviors.start import StartBehavior
from lasershow.behaviors.wireframe import WireframeBehavior
from lasershow.render.camera import ViewCamera
from lasershow.world.context import ShowContext
from lasershow.world.mesh import TargetModel, TriangleMesh


def _context(with_model: bool = True, with_camera: bool = True, seed: int = 7) -> ShowContext:
    return ShowContext(
        camera=ViewCamera(position=Vector3(0.0, 2.0, 12.0)) if with_camera else None,
        model=TargetModel(TriangleMesh.box(4.0, 4.0, 4.0)) if with_model else None,
        rng=random.Random(seed),
    )


def test_default_behavior_owns_its_beams() -> None:
    context = _context()
    behavior = DefaultBehavior()
    behavior.init(context)
    assert len(behavior.beams) == 4
    assert list(context.scene.beams()) == behavior.beams

    behavior.update(1 / 60, 1 / 60, context)
    for beam in behavior.beams:
        assert len(beam.path) >= 2
        assert beam.color == 0xFF0000

    behavior.cleanup(context)
    assert behavior.beams == []
    assert len(context.scene) == 0


def test_default_origins_lie_on_sphere_and_aim_at_origin() -> None:
    context = _context()
    context.controls_target = Vector3(1.0, 0.0, 0.0)
    behavior = DefaultBehavior({"ORIGIN_SPHERE_RADIUS": 6})
    behavior.init(context)
    for origin, direction in zip(behavior.origins, behavior.directions):
        assert origin.distance_to(Vector3(1.0, 0.0, 0.0)) == pytest.approx(6.0)
        assert direction.dot((Vector3() - origin).normalize()) == pytest.approx(1.0)


def test_laser_count_controls_number_of_beams() -> None:
    context = _context()
    behavior = DefaultBehavior({"laserCount": 7})
    behavior.init(context)
    assert len(behavior.beams) == 7


def test_instances_never_share_state() -> None:
    context = _context()
    first = DefaultBehavior({"laserColor": 0x00FF00})
    second = DefaultBehavior()
    first.init(context)
    second.init(context)

    first.config["MAX_BOUNCES"] = 9
    assert "MAX_BOUNCES" not in second.config
    assert first.origins is not second.origins
    assert first.stillness is not second.stillness
    assert not any(beam in second.beams for beam in first.beams)
    assert WireframeBehavior.default_overrides["laserColor"] == 0x00FF00
    wire = WireframeBehavior({"laserColor": 0xFF0000})
    assert wire.params.color == 0xFF0000
    assert WireframeBehavior.default_overrides["laserColor"] == 0x00FF00


def test_still_camera_triggers_jump_after_limit() -> None:
    context = _context()
    behavior = DefaultBehavior({"STILLNESS_LIMIT": 0.1})
    behavior.init(context)
    before = [Vector3(origin) for origin in behavior.origins]

    behavior.update(0.06, 0.06, context)
    assert behavior.jumps == 0
    behavior.update(0.06, 0.12, context)
    assert behavior.jumps == 1
    assert any(a.distance_to(b) > 1e-6 for a, b in zip(before, behavior.origins))


def test_moving_camera_keeps_resetting_stillness_timer() -> None:
    context = _context()
    behavior = DefaultBehavior({"STILLNESS_LIMIT": 0.1})
    behavior.init(context)
    for step in range(10):
        context.camera.position += Vector3(0.5, 0.0, 0.0)
        behavior.update(0.06, 0.06 * (step + 1), context)
    assert behavior.jumps == 0


def test_stillness_tracker_rotation_threshold() -> None:
    camera = ViewCamera(position=Vector3(0.0, 0.0, 10.0))
    tracker = StillnessTracker(limit=1.0)
    tracker.reset(camera.pose())
    tracker.timer = 0.5

    camera.look_at(Vector3(1.0, 0.0, 0.0))  # about 5.7 degrees
    assert tracker.step(0.1, camera.pose()) is False
    assert tracker.timer == pytest.approx(0.6)

    camera.look_at(Vector3(10.0, 0.0, 0.0))  # 45 degrees
    assert tracker.step(0.1, camera.pose()) is False
    assert tracker.timer == 0.0


def test_stillness_tracker_without_camera_counts_as_still() -> None:
    tracker = StillnessTracker(limit=0.2)
    assert tracker.step(0.1, None) is False
    assert tracker.step(0.1, None) is True
    assert tracker.timer == 0.0


def test_pulse_brightness_maps_sine_onto_range() -> None:
    assert pulse_brightness(0.0, 0.5, 0.3, 2.5) == pytest.approx(1.4)
    assert pulse_brightness(0.5, 0.5, 0.3, 2.5) == pytest.approx(2.5)
    assert pulse_brightness(1.5, 0.5, 0.3, 2.5) == pytest.approx(0.3)
    for step in range(200):
        assert 0.3 - 1e-9 <= pulse_brightness(step * 0.037, 0.5, 0.3, 2.5) <= 2.5 + 1e-9


def test_behavior_brightness_is_uniform_across_beams() -> None:
    context = _context()
    behavior = DefaultBehavior({"MIN_BRIGHTNESS": 0.5, "MAX_BRIGHTNESS": 1.5})
    behavior.init(context)
    behavior.update(0.01, 0.5, context)
    assert all(beam.brightness == pytest.approx(1.5) for beam in behavior.beams)


def test_beam_parameters_accept_string_colors_and_clamp() -> None:
    params = BeamParameters.from_config({"laserColor": "#0080ff", "MAX_BOUNCES": -2, "laserCount": 0})
    assert params.color == 0x0080FF
    assert params.max_bounces == 0
    assert params.laser_count == 1
    assert BeamParameters.from_config({"laserColor": "0x00ff00"}).color == 0x00FF00


def test_wireframe_targets_model_face_centers() -> None:
    context = _context()
    behavior = WireframeBehavior()
    behavior.init(context)
    centers = [face.center for face in context.model_faces()]
    assert behavior.params.color == 0x00FF00
    assert behavior.params.stillness_limit == pytest.approx(0.5)
    assert len(behavior.target_faces) == 4
    for target in behavior.targets:
        assert any(target.distance_to(center) < 1e-9 for center in centers)

    behavior.update(0.6, 0.6, context)
    assert behavior.jumps == 1
    assert len(behavior.target_faces) == 4


def test_wireframe_without_model_aims_at_origin() -> None:
    context = _context(with_model=False, with_camera=False)
    behavior = WireframeBehavior()
    behavior.init(context)
    behavior.update(0.01, 0.01, context)
    assert all(target == Vector3() for target in behavior.targets)
    assert all(len(beam.path) == 2 for beam in behavior.beams)


def test_start_behavior_spans_corners_to_model_center() -> None:
    context = _context()
    context.model.position = Vector3(1.0, 1.0, 0.0)
    behavior = StartBehavior()
    behavior.init(context)
    behavior.update(0.1, 0.1, context)
    corners = context.camera.near_corners()
    assert len(behavior.beams) == 4
    for beam, corner in zip(behavior.beams, corners):
        assert beam.path[0].distance_to(corner) < 1e-9
        assert beam.path[-1].distance_to(context.model.center) < 1e-9
        assert len(beam.path) == 2


def test_start_behavior_falls_back_without_camera_or_model() -> None:
    context = _context(with_model=False, with_camera=False)
    behavior = StartBehavior()
    behavior.init(context)
    starts = [tuple(beam.path[0]) for beam in behavior.beams]
    assert starts == [tuple(corner) for corner in FALLBACK_CORNERS]
    assert all(beam.path[-1] == Vector3() for beam in behavior.beams)


def test_corner_array_grows_from_eight_to_sixty_four_beams() -> None:
    context = _context()
    behavior = CornerArrayBehavior()
    behavior.init(context)
    assert len(behavior.beams) == 8
    assert len(list(context.scene.beams())) == 8

    behavior.update(0.0, 5.0, context)  # timeline starts here
    behavior.update(0.5, 5.5, context)
    assert behavior.phase == "static"
    assert len(behavior.beams) == 8

    behavior.update(0.7, 6.2, context)
    assert behavior.phase == "spreading"
    assert len(behavior.beams) == 64
    assert len(list(context.scene.beams())) == 64

    behavior.update(3.0, 9.2, context)
    assert behavior.phase == "expanded"
    assert behavior.progress == 1.0
    behavior.cleanup(context)
    assert len(context.scene) == 0


def test_corner_array_anchors_land_on_model() -> None:
    context = _context()
    behavior = CornerArrayBehavior()
    behavior.init(context)
    assert len(behavior.anchors) == 8
    assert all(anchor.from_hit for anchor in behavior.anchors)
    for anchor in behavior.anchors:
        # Box is 4 units wide, so every surface point is within 2 of each axis.
        assert max(abs(anchor.point.x), abs(anchor.point.y), abs(anchor.point.z)) == pytest.approx(2.0)
        assert anchor.tangent1.dot(anchor.normal) == pytest.approx(0.0, abs=1e-9)
        assert anchor.tangent2.dot(anchor.normal) == pytest.approx(0.0, abs=1e-9)


def test_corner_array_degrades_without_camera_or_model() -> None:
    context = _context(with_model=False, with_camera=False)
    behavior = CornerArrayBehavior({"STATIC_DURATION": 0.0, "SPREAD_DURATION": 1.0})
    behavior.init(context)
    assert not any(anchor.from_hit for anchor in behavior.anchors)
    behavior.update(0.1, 0.0, context)
    behavior.update(0.5, 0.5, context)
    assert len(behavior.beams) == 64

    context.model = TargetModel(TriangleMesh.box(4.0, 4.0, 4.0))
    behavior.update(0.1, 0.6, context)
    assert all(anchor.from_hit for anchor in behavior.anchors)


def test_grid_offset_spans_tangent_plane() -> None:
    anchor = SurfaceAnchor(
        point=Vector3(),
        normal=Vector3(0.0, 1.0, 0.0),
        tangent1=Vector3(1.0, 0.0, 0.0),
        tangent2=Vector3(0.0, 0.0, 1.0),
    )
    assert grid_offset(0, 8, 3.0, anchor) == Vector3(-3.0, 0.0, -3.0)
    assert grid_offset(4, 8, 3.0, anchor) == Vector3(0.0, 0.0, 0.0)
    assert grid_offset(7, 8, 3.0, anchor) == Vector3(0.0, 0.0, 3.0)
    assert grid_offset(0, 1, 3.0, anchor) == Vector3()


def test_registry_dispatches_on_behavior_type() -> None:
    assert isinstance(create_behavior({}), DefaultBehavior)
    assert type(create_behavior({"behaviorType": "default"})) is DefaultBehavior
    assert isinstance(create_behavior({"behaviorType": "wireframe"}), WireframeBehavior)
    assert isinstance(create_behavior({"behaviorType": "corner_array"}), CornerArrayBehavior)
    assert isinstance(create_behavior({"behaviorType": "array_1"}), CornerArrayBehavior)
    assert isinstance(create_behavior({"behaviorType": "start"}), StartBehavior)
    assert create_behavior({}, behavior_id="my_blue").id == "my_blue"
    assert create_behavior({"behaviorType": "wireframe"}).id == "wireframe"


def test_registry_rejects_unknown_type() -> None:
    with pytest.raises(UnknownBehaviorError):
        create_behavior({"behaviorType": "laser_tornado"})
    with pytest.raises(KeyError):
        create_behavior({"behaviorType": "laser_tornado"})


def test_registry_copies_config() -> None:
    config = {"laserColor": 0x0080FF}
    behavior = create_behavior(config)
    behavior.config["laserColor"] = 0
    assert config == {"laserColor": 0x0080FF}
