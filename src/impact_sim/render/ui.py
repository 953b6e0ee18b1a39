from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import pygame

from impact_sim.data.presets import InputRange

from .assets import Color, get_text_surface


CURRENT_HUD_ALPHA: float = 255.0


def set_hud_alpha(value: float) -> None:
    global CURRENT_HUD_ALPHA
    CURRENT_HUD_ALPHA = value


def _with_hud_alpha(surface: pygame.Surface) -> pygame.Surface:
    if CURRENT_HUD_ALPHA < 255:
        surface = surface.copy()
        surface.set_alpha(int(CURRENT_HUD_ALPHA))
    return surface


@dataclass(frozen=True)
class ButtonVisualStyle:
    base_color: Color
    hover_color: Color
    text_color: tuple[int, int, int]
    radius: int
    border_color: Color | None = None
    border_width: int = 0


class Button:
    """Simple rectangular button with hover feedback and callbacks."""

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        callback: Callable[[], None],
        *,
        style: ButtonVisualStyle | None = None,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self._text = text
        self._callback = callback
        self._cached_text_surface: pygame.Surface | None = None
        self._cached_text: str | None = None
        self._cached_font_id: int | None = None
        self._style = style

    def get_text(self) -> str:
        return self._text

    def draw(
        self,
        surface: pygame.Surface,
        font: pygame.font.Font,
        mouse_pos: tuple[int, int] | None = None,
        *,
        style: ButtonVisualStyle | None = None,
    ) -> None:
        if mouse_pos is None:
            mouse_pos = pygame.mouse.get_pos()
        hovered = self.rect.collidepoint(mouse_pos)
        effective_style = style or self._style
        if effective_style is None:
            raise ValueError("Button style must be provided")
        color = effective_style.hover_color if hovered else effective_style.base_color
        button_surface = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        pygame.draw.rect(
            button_surface,
            color,
            button_surface.get_rect(),
            border_radius=effective_style.radius,
        )
        if effective_style.border_color is not None and effective_style.border_width > 0:
            pygame.draw.rect(
                button_surface,
                effective_style.border_color,
                button_surface.get_rect(),
                effective_style.border_width,
                border_radius=effective_style.radius,
            )
        surface.blit(_with_hud_alpha(button_surface), self.rect.topleft)
        text_value = self.get_text()
        font_id = id(font)
        if (
            self._cached_text_surface is None
            or text_value != self._cached_text
            or font_id != self._cached_font_id
        ):
            self._cached_text_surface = get_text_surface(font, text_value, effective_style.text_color)
            self._cached_text = text_value
            self._cached_font_id = font_id
        text_surf = _with_hud_alpha(self._cached_text_surface)
        text_rect = text_surf.get_rect(center=self.rect.center)
        surface.blit(text_surf, text_rect)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self._callback()


class Slider:
    """Horizontal slider bound to an :class:`InputRange`."""

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        input_range: InputRange,
        *,
        value: float | None = None,
        on_change: Callable[[float], None] | None = None,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.input_range = input_range
        self._value = input_range.clamp(input_range.default if value is None else value)
        self._on_change = on_change
        self._dragging = False

    @property
    def value(self) -> float:
        return self._value

    @property
    def label(self) -> str:
        return f"{self.input_range.label}: {self.input_range.format(self._value)}"

    def set_value(self, value: float) -> None:
        clamped = self.input_range.clamp(value)
        if clamped == self._value:
            return
        self._value = clamped
        if self._on_change is not None:
            self._on_change(clamped)

    def _set_from_x(self, x: int) -> None:
        fraction = (x - self.rect.left) / max(1, self.rect.width)
        self.set_value(self.input_range.value_at(fraction))

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.inflate(0, 16).collidepoint(event.pos):
                self._dragging = True
                self._set_from_x(event.pos[0])
        elif event.type == pygame.MOUSEMOTION and self._dragging:
            self._set_from_x(event.pos[0])
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self._dragging = False

    def draw(
        self,
        surface: pygame.Surface,
        font: pygame.font.Font,
        *,
        track_color: tuple[int, int, int],
        fill_color: tuple[int, int, int],
        knob_color: tuple[int, int, int],
        text_color: tuple[int, int, int],
    ) -> None:
        label = _with_hud_alpha(get_text_surface(font, self.label, text_color))
        surface.blit(label, (self.rect.left, self.rect.top - label.get_height() - 6))
        track = pygame.Rect(self.rect.left, self.rect.centery - 3, self.rect.width, 6)
        pygame.draw.rect(surface, track_color, track, border_radius=3)
        knob_x = self.rect.left + int(self.input_range.fraction(self._value) * self.rect.width)
        filled = pygame.Rect(track.left, track.top, knob_x - track.left, track.height)
        pygame.draw.rect(surface, fill_color, filled, border_radius=3)
        pygame.draw.circle(surface, knob_color, (knob_x, self.rect.centery), 9)


class SwatchRow:
    """Row of colour swatches; the selected swatch gets an outline."""

    def __init__(
        self,
        origin: tuple[int, int],
        colors: Sequence[tuple[int, int, int]],
        *,
        size: int = 30,
        gap: int = 10,
        on_select: Callable[[tuple[int, int, int]], None] | None = None,
    ) -> None:
        self.colors = list(colors)
        self.selected = self.colors[0]
        self._on_select = on_select
        self.rects = [
            pygame.Rect(origin[0] + i * (size + gap), origin[1], size, size)
            for i in range(len(self.colors))
        ]

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.MOUSEBUTTONDOWN or event.button != 1:
            return
        for rect, color in zip(self.rects, self.colors):
            if rect.collidepoint(event.pos):
                self.selected = color
                if self._on_select is not None:
                    self._on_select(color)
                return

    def draw(self, surface: pygame.Surface, *, outline_color: tuple[int, int, int]) -> None:
        for rect, color in zip(self.rects, self.colors):
            pygame.draw.rect(surface, color, rect, border_radius=6)
            if color == self.selected:
                pygame.draw.rect(surface, outline_color, rect.inflate(6, 6), 2, border_radius=8)


def build_text_panel(
    font: pygame.font.Font,
    lines: Sequence[tuple[str, tuple[int, int, int]]],
    *,
    background_color: Color,
    padding: tuple[int, int] = (14, 14),
    alpha: int | None = None,
) -> pygame.Surface:
    if not lines:
        raise ValueError("lines must not be empty")
    padding_x, padding_y = padding
    line_height = font.get_linesize()
    width = max(font.size(text)[0] for text, _ in lines) + padding_x * 2
    height = line_height * len(lines) + padding_y * 2
    panel_surface = pygame.Surface((width, height), pygame.SRCALPHA)
    pygame.draw.rect(
        panel_surface,
        background_color,
        panel_surface.get_rect(),
        border_radius=12,
    )
    for idx, (text, color) in enumerate(lines):
        if not text:
            continue
        text_surf = get_text_surface(font, text, color)
        if alpha is not None and alpha < 255:
            text_surf = text_surf.copy()
            text_surf.set_alpha(alpha)
        panel_surface.blit(text_surf, (padding_x, padding_y + idx * line_height))
    if alpha is not None and alpha < 255:
        panel_surface.set_alpha(alpha)
    return panel_surface
