"""Configuration dataclasses for the impact simulation."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SimulationCfg:
    # Scene geometry, in scene units
    planet_radius: float = 10.0
    start_distance: float = 50.0
    arc_offset: float = 15.0
    up_axis: tuple[float, float, float] = (0.0, 1.0, 0.0)
    # Stage machine
    speed_scale: float = 4000.0
    entry_margin: float = 0.3
    altitude_scale: float = 637.1
    effect_intensity_step: float = 0.02
    sheath_opacity_step: float = 0.02
    sheath_max_opacity: float = 0.9
    sheath_growth: float = 1.03
    # Impact analysis
    impactor_density: float = 1500.0
    joules_per_megaton: float = 4.184e15
    crater_coefficient: float = 25.0
    crater_exponent: float = 3.4
    # Camera shake
    shake_decay: float = 0.95
    shake_cutoff: float = 0.01
    shake_energy_divisor: float = 5.0
    shake_scale: float = 0.5
    # Deferred UI
    restart_delay: float = 3.0
    view_fade_duration: float = 0.5
    # Planet shells and scale of the meteor proxy
    earth_atmosphere_margin: float = 0.25
    cloud_margin: float = 0.05
    atmosphere_divisor: float = 200.0
    meteor_scale_divisor: float = 10_000.0
    planet_spin: float = 0.0005
    cloud_spin: float = 0.0007

    @property
    def entry_threshold(self) -> float:
        return self.planet_radius + self.entry_margin

    @property
    def impact_point(self) -> tuple[float, float, float]:
        return (self.planet_radius, 0.0, 0.0)


@dataclass(frozen=True)
class RenderCfg:
    width: int = 1280
    height: int = 800
    fps: int = 60
    background_color: tuple[int, int, int] = (4, 6, 16)
    field_of_view_deg: float = 45.0
    near_plane: float = 0.1
    camera_position: tuple[float, float, float] = (-30.0, 20.0, 50.0)
    camera_damping: float = 0.05
    camera_min_distance: float = 14.0
    camera_max_distance: float = 160.0
    camera_rotate_speed: float = 0.005
    camera_zoom_step: float = 1.1
    light_direction: tuple[float, float, float] = (0.5, -0.4, 0.8)
    ambient_light: float = 0.12
    texture_size: tuple[int, int] = (256, 128)
    star_count: int = 260
    meteor_color: tuple[int, int, int] = (136, 136, 136)
    meteor_min_pixels: int = 3
    plasma_color: tuple[int, int, int] = (255, 165, 0)
    plasma_outer_alpha: int = 110
    plasma_inner_alpha: int = 210
    plasma_radius_factor: float = 1.2
    atmosphere_color: tuple[int, int, int] = (0, 170, 255)
    earth_atmosphere_color: tuple[int, int, int] = (128, 178, 255)
    atmosphere_alpha: int = 60
    cloud_shell_color: tuple[int, int, int] = (255, 255, 255)
    cloud_shell_alpha: int = 30
    trajectory_color: tuple[int, int, int, int] = (255, 214, 130, 90)
    trajectory_samples: int = 64
    hud_text_color: tuple[int, int, int] = (234, 241, 255)
    hud_label_color: tuple[int, int, int] = (180, 198, 228)
    panel_color: tuple[int, int, int, int] = (12, 18, 30, int(255 * 0.75))
    title_color: tuple[int, int, int] = (255, 214, 130)
    button_color: tuple[int, int, int, int] = (8, 32, 64, int(255 * 0.78))
    button_hover_color: tuple[int, int, int, int] = (18, 52, 94, int(255 * 0.88))
    button_selected_color: tuple[int, int, int, int] = (36, 96, 170, 235)
    button_text_color: tuple[int, int, int] = (234, 241, 255)
    button_border_color: tuple[int, int, int, int] = (88, 140, 255, int(255 * 0.55))
    button_radius: int = 14
    slider_track_color: tuple[int, int, int] = (60, 78, 110)
    slider_fill_color: tuple[int, int, int] = (88, 140, 255)
    slider_knob_color: tuple[int, int, int] = (234, 241, 255)
    shock_ring_color: tuple[int, int, int] = (255, 120, 60)
    shock_ring_duration: float = 2.5
    shock_ring_expansion_factor: float = 6.0
    shock_ring_width: int = 6


@dataclass(frozen=True)
class AudioCfg:
    sample_rate: int = 22_050
    noise_seconds: float = 2.0
    noise_start_db: float = -60.0
    noise_entry_db: float = -20.0
    noise_ramp_seconds: float = 1.0
    impact_base_frequency: float = 32.70  # C1
    impact_octaves: float = 10.0
    impact_pitch_decay: float = 0.08
    impact_attack: float = 0.001
    impact_decay: float = 0.8
    impact_sustain: float = 0.01
    impact_hold: float = 1.0
    impact_release: float = 2.0


SIM_CFG = SimulationCfg()
RENDER_CFG = RenderCfg()
AUDIO_CFG = AudioCfg()


__all__ = [
    "AUDIO_CFG",
    "AudioCfg",
    "RENDER_CFG",
    "RenderCfg",
    "SIM_CFG",
    "SimulationCfg",
]
