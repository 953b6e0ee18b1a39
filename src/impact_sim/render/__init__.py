"""Rendering and audio collaborators for the impact simulator."""

from .camera import OrbitCamera
from .assets import (
    AssetLibrary,
    get_text_surface,
    load_font,
)
from .draw import (
    draw_atmosphere_shell,
    draw_heating_glow,
    draw_meteor,
    draw_planet,
    draw_shock_ring,
    draw_starfield,
    draw_trajectory_line,
    generate_starfield,
    is_occluded,
)
from .scene import ImpactScene
from .textures import (
    PlanetTexture,
    SphereGeometry,
    generate_planet_texture,
    precompute_sphere,
    render_sphere,
)
from .ui import (
    Button,
    ButtonVisualStyle,
    Slider,
    SwatchRow,
    build_text_panel,
    set_hud_alpha,
)

__all__ = [
    "AssetLibrary",
    "Button",
    "ButtonVisualStyle",
    "ImpactScene",
    "OrbitCamera",
    "PlanetTexture",
    "Slider",
    "SphereGeometry",
    "SwatchRow",
    "build_text_panel",
    "draw_atmosphere_shell",
    "draw_heating_glow",
    "draw_meteor",
    "draw_planet",
    "draw_shock_ring",
    "draw_starfield",
    "draw_trajectory_line",
    "generate_planet_texture",
    "generate_starfield",
    "get_text_surface",
    "is_occluded",
    "load_font",
    "precompute_sphere",
    "render_sphere",
    "set_hud_alpha",
]
