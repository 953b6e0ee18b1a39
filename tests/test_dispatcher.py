import random

import pytest

from impact_sim.core.errors import InvalidConfiguration, SessionStateError
from impact_sim.core.model import PlanetType, Stage
from impact_sim.core.session import CommandDispatcher, View
from impact_sim.core.timekeeping import FrameScheduler


@pytest.fixture
def dispatcher(recorder):
    return CommandDispatcher(
        scheduler=FrameScheduler(),
        rng=random.Random(11),
        listeners=[recorder],
    )


def test_starts_in_designer_view(dispatcher):
    assert dispatcher.state.view is View.DESIGNER
    assert dispatcher.state.planet is None
    assert dispatcher.state.target_name == ""


def test_default_planet_moves_to_setup(dispatcher):
    planet = dispatcher.dispatch("use_default_planet")

    assert planet.is_earth
    assert dispatcher.state.view is View.SETUP
    assert dispatcher.state.target_name == "Default Earth"


def test_confirm_custom_planet(dispatcher):
    planet = dispatcher.dispatch(
        "confirm_planet", planet_type="lava", color="#f03e3e", diameter_km=8000, atmosphere=0
    )

    assert planet.planet_type is PlanetType.LAVA
    assert planet.color == (0xF0, 0x3E, 0x3E)
    assert dispatcher.state.target_name == "Custom Lava Planet"


def test_planet_cannot_be_chosen_twice(dispatcher):
    dispatcher.use_default_planet()

    with pytest.raises(SessionStateError):
        dispatcher.use_default_planet()


def test_unknown_planet_type_is_rejected(dispatcher):
    with pytest.raises(InvalidConfiguration):
        dispatcher.confirm_planet("volcanic", "#ffffff", 5000, 0)
    assert dispatcher.state.view is View.DESIGNER


def test_start_impact_requires_a_planet(dispatcher):
    with pytest.raises(SessionStateError):
        dispatcher.start_impact(50, 20, 45)


def test_start_impact_runs_session(dispatcher, recorder):
    dispatcher.use_default_planet()
    session = dispatcher.dispatch("start_impact", size_m=50, speed_km_s=20, angle_deg=45, azimuth=0.0)

    assert dispatcher.state.view is View.SIMULATION
    assert dispatcher.state.session is session
    assert dispatcher.state.impactor.size_m == 50
    assert session.stage is Stage.APPROACH
    assert recorder.calls == ["start"]

    dispatcher.scheduler.tick(1 / 60)
    assert recorder.calls[-1] == "tick"


@pytest.mark.parametrize(
    "size, speed, angle",
    [(0, 20, 45), (50, -1, 45), (50, 20, 120), (float("nan"), 20, 45)],
)
def test_invalid_impactor_keeps_setup_view(dispatcher, size, speed, angle):
    dispatcher.use_default_planet()

    with pytest.raises(InvalidConfiguration):
        dispatcher.start_impact(size, speed, angle)

    assert dispatcher.state.view is View.SETUP
    assert dispatcher.state.session is None


def test_restart_discards_session(dispatcher):
    dispatcher.use_default_planet()
    session = dispatcher.start_impact(50, 20, 45, azimuth=0.0)

    state = dispatcher.dispatch("restart")

    assert state.view is View.DESIGNER
    assert state.planet is None
    assert state.session is None
    dispatcher.scheduler.tick(1 / 60)
    assert session.state.progress == 0.0


def test_unknown_command(dispatcher):
    with pytest.raises(SessionStateError):
        dispatcher.dispatch("launch_rocket")
