import random
from dataclasses import replace

import numpy as np
import pytest

from impact_sim.core.config import SIM_CFG
from impact_sim.core.errors import SessionStateError
from impact_sim.core.model import CameraShake, ImpactorConfig, PlanetConfig, Stage
from impact_sim.core.session import ImpactSession
from impact_sim.core.timekeeping import FrameScheduler

FRAME = 1.0 / 60.0


def make_session(recorder=None, *, speed=20.0, angle=45.0, scheduler=None):
    listeners = [recorder] if recorder is not None else []
    return ImpactSession(
        PlanetConfig.default_earth(),
        ImpactorConfig(50, speed, angle),
        scheduler=scheduler or FrameScheduler(),
        rng=random.Random(7),
        listeners=listeners,
    )


def run_until_impact(session, max_frames=2000, dt=FRAME):
    for _ in range(max_frames):
        session.scheduler.tick(dt)
        if session.finished:
            return
    raise AssertionError("impact never happened")


def test_start_places_meteor_at_curve_start(recorder):
    session = make_session(recorder)
    trajectory = session.start(azimuth=0.0)

    assert session.stage is Stage.APPROACH
    assert np.allclose(session.state.position, trajectory.start)
    assert session.state.altitude_km > 0.0
    assert recorder.calls == ["start"]


def test_starting_twice_is_an_error():
    session = make_session()
    session.start(azimuth=0.0)

    with pytest.raises(SessionStateError):
        session.start(azimuth=0.0)


def test_idle_session_does_not_advance():
    session = make_session()
    session.tick()

    assert session.stage is Stage.IDLE
    assert session.state.progress == 0.0


def test_progress_advances_by_speed_over_four_thousand():
    session = make_session(speed=40.0)
    session.start(azimuth=0.0)
    session.scheduler.tick(FRAME)

    assert session.state.progress == pytest.approx(0.01)


def test_stages_and_progress_never_go_backwards(recorder):
    session = make_session(recorder)
    session.start(azimuth=0.0)
    run_until_impact(session)

    assert recorder.stages == sorted(recorder.stages)
    assert recorder.progress == sorted(recorder.progress)
    assert Stage.ENTRY.value in recorder.stages
    assert recorder.calls.index("entry") < recorder.calls.index("impact")


def test_entry_happens_inside_the_atmosphere_threshold(recorder):
    session = make_session(recorder)
    session.start(azimuth=0.0)

    while session.stage is Stage.APPROACH:
        session.scheduler.tick(FRAME)

    assert session.state.distance < 10.3
    assert session.state.effect_intensity == pytest.approx(0.02)
    assert session.state.sheath_opacity == pytest.approx(0.02)
    assert session.state.sheath_scale == pytest.approx(1.03)


def test_sheath_opacity_is_capped():
    session = make_session(speed=11.0, angle=0.0)
    session.start(azimuth=0.0)
    run_until_impact(session)

    assert session.state.sheath_opacity <= 0.9


def test_impact_runs_once_and_freezes_state(recorder):
    session = make_session(recorder)
    session.start(azimuth=0.0)
    run_until_impact(session)

    report = session.report
    assert report is not None
    assert session.state.progress == 1.0
    assert session.state.altitude_km == 0.0
    assert np.allclose(session.state.position, session.trajectory.target)
    frozen_position = session.state.position.copy()

    for _ in range(30):
        session.scheduler.tick(FRAME)

    assert recorder.calls.count("impact") == 1
    assert session.report is report
    assert np.array_equal(session.state.position, frozen_position)
    assert session.stage is Stage.IMPACT


def test_restart_is_revealed_three_seconds_after_impact(recorder):
    session = make_session(recorder)
    session.start(azimuth=0.0)
    run_until_impact(session)

    session.scheduler.tick(1.0)
    session.scheduler.tick(1.9)
    assert not session.restart_available
    assert "restart_available" not in recorder.calls

    session.scheduler.tick(0.2)
    assert session.restart_available
    assert recorder.calls.count("restart_available") == 1

    session.scheduler.tick(5.0)
    assert recorder.calls.count("restart_available") == 1


def test_close_cancels_pending_restart(recorder):
    session = make_session(recorder)
    session.start(azimuth=0.0)
    run_until_impact(session)
    session.close()

    for _ in range(5):
        session.scheduler.tick(1.0)

    assert not session.restart_available
    assert session.scheduler.pending_tasks() == []


def test_camera_shake_starts_on_impact_and_settles():
    session = make_session()
    session.start(azimuth=0.0)
    run_until_impact(session)

    assert session.camera_shake.active
    assert np.any(session.shake_offset != 0.0)

    for _ in range(500):
        session.scheduler.tick(FRAME)

    assert not session.camera_shake.active
    assert np.array_equal(session.shake_offset, np.zeros(3))


def test_camera_shake_tick_count_matches_geometric_decay():
    shake = CameraShake(decay=0.95, cutoff=0.01)
    shake.start(1.6)
    expected = shake.remaining_ticks()
    rng = random.Random(1)

    for _ in range(expected - 1):
        shake.step(rng)
    assert shake.active

    shake.step(rng)
    assert not shake.active
    assert shake.remaining_ticks() == 0


def test_shake_below_cutoff_never_starts():
    shake = CameraShake(decay=0.95, cutoff=0.01)
    shake.start(0.001)

    assert not shake.active
    assert np.array_equal(shake.step(random.Random(0)), np.zeros(3))


def test_single_tick_can_enter_and_impact(recorder):
    scheduler = FrameScheduler()
    session = ImpactSession(
        PlanetConfig.default_earth(),
        ImpactorConfig(50, 20, 45),
        cfg=replace(SIM_CFG, speed_scale=1.0),
        scheduler=scheduler,
        rng=random.Random(7),
        listeners=[recorder],
    )
    session.start(azimuth=0.0)

    scheduler.tick(FRAME)

    assert recorder.calls == ["start", "tick", "entry", "impact"]
    assert session.stage is Stage.IMPACT
    assert session.state.progress == 1.0
    assert len(recorder.reports) == 1


def test_advancing_without_a_trajectory_is_an_error():
    session = make_session()
    session.state.stage = Stage.APPROACH

    with pytest.raises(SessionStateError):
        session.tick()
