"""Pygame UI shell for the Lunar Phase Trainer.

- Phase Quiz: drag the Moon to where each named phase happens, then submit.
- Free Orbit: watch the Moon orbit the Earth and adjust the orbital speed.

Deterministic scoring/RNG/state lives in lunar_phase_trainer/* (core modules).
This module only translates pygame input into quiz actions and renders the
presenter callbacks.
"""

from __future__ import annotations

import math
import random
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

import pygame

from .orbit import OrbitSimulation, RealClock, illuminated_fraction
from .phase_core import Point2D, QuizStatus, Report
from .phase_quiz import QuizState


class Screen(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def render(self, surface: pygame.Surface) -> None: ...
    def close(self) -> None: ...


@dataclass(frozen=True, slots=True)
class MenuItem:
    label: str
    action: Callable[[], None]


WINDOW_SIZE = (960, 540)
TARGET_FPS = 60

SPEED_STEP_DEG_PER_S = 5.0
MAX_SPEED_DEG_PER_S = 120.0

# Orbital angle each phase sprite depicts (Sun along +X).
PHASE_SPRITE_ANGLES: dict[str, float] = {
    "new_moon": 0.0,
    "first_quarter": 90.0,
    "full_moon": 180.0,
}

BG = (3, 9, 78)
PANEL_BG = (8, 18, 104)
HEADER_BG = (18, 30, 118)
BORDER = (226, 236, 255)
TEXT_MAIN = (238, 245, 255)
TEXT_MUTED = (186, 200, 224)
MOON_LIT = (232, 232, 220)
MOON_DARK = (44, 46, 58)


class App:
    def __init__(self, surface: pygame.Surface, font: pygame.font.Font) -> None:
        self._surface = surface
        self._font = font
        self._screens: list[Screen] = []
        self._running = True

    @property
    def running(self) -> bool:
        return self._running

    @property
    def font(self) -> pygame.font.Font:
        return self._font

    @property
    def surface(self) -> pygame.Surface:
        return self._surface

    def push(self, screen: Screen) -> None:
        self._screens.append(screen)

    def pop(self) -> None:
        # Never pop the last/root screen; root handles its own quit/back behavior.
        if len(self._screens) > 1:
            self._screens.pop()

    def quit(self) -> None:
        self._running = False

    def close(self) -> None:
        """Close every screen, topmost first. Called once when the window goes away."""
        while self._screens:
            self._screens.pop().close()

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.quit()
            return
        if not self._screens:
            return
        self._screens[-1].handle_event(event)

    def render(self) -> None:
        if not self._screens:
            return
        self._screens[-1].render(self._surface)


def _draw_frame(surface: pygame.Surface, title: str, tag: str, title_font: pygame.font.Font, tag_font: pygame.font.Font) -> tuple[pygame.Rect, pygame.Rect]:
    """Background, bordered frame and header bar. Returns (frame, header)."""

    w, h = surface.get_size()
    surface.fill(BG)

    margin = max(10, min(24, w // 34))
    frame = pygame.Rect(margin, margin, max(280, w - margin * 2), max(220, h - margin * 2))
    pygame.draw.rect(surface, PANEL_BG, frame)
    pygame.draw.rect(surface, BORDER, frame, 2)

    header_h = max(34, min(52, h // 8))
    header = pygame.Rect(frame.x + 2, frame.y + 2, frame.w - 4, header_h)
    pygame.draw.rect(surface, HEADER_BG, header)
    pygame.draw.line(surface, BORDER, (header.x, header.bottom), (header.right, header.bottom), 1)

    tag_surf = tag_font.render(tag, True, TEXT_MUTED)
    surface.blit(tag_surf, (header.x + 12, header.y + (header.h - tag_surf.get_height()) // 2))
    title_surf = title_font.render(title, True, TEXT_MAIN)
    surface.blit(title_surf, title_surf.get_rect(center=(frame.centerx, header.centery)))
    return frame, header


def draw_phase_disc(surface: pygame.Surface, center: tuple[int, int], radius: int, angle_deg: float) -> None:
    """Draw the Moon as seen from Earth at the given orbital angle.

    Waxing (0-180) is lit on the right, waning on the left.
    """

    angle = float(angle_deg) % 360.0
    lit_fraction = illuminated_fraction(angle)
    pygame.draw.circle(surface, MOON_DARK, center, radius)

    if lit_fraction >= 0.999:
        pygame.draw.circle(surface, MOON_LIT, center, radius)
    elif lit_fraction > 0.001:
        waxing = angle < 180.0
        pygame.draw.circle(
            surface,
            MOON_LIT,
            center,
            radius,
            draw_top_right=waxing,
            draw_bottom_right=waxing,
            draw_top_left=not waxing,
            draw_bottom_left=not waxing,
        )
        # Terminator: ellipse that either eats into (crescent) or extends (gibbous) the lit half.
        half_w = int(round(abs(math.cos(math.radians(angle))) * radius))
        if half_w > 0:
            terminator = pygame.Rect(center[0] - half_w, center[1] - radius, half_w * 2, radius * 2)
            pygame.draw.ellipse(surface, MOON_DARK if lit_fraction < 0.5 else MOON_LIT, terminator)

    pygame.draw.circle(surface, (120, 124, 140), center, radius, 1)


class MenuScreen:
    def __init__(self, app: App, title: str, items: list[MenuItem], *, is_root: bool = False) -> None:
        self._app = app
        self._title = title
        self._items = items
        self._selected = 0
        self._is_root = is_root
        self._title_font = pygame.font.Font(None, 42)
        self._item_font = pygame.font.Font(None, 32)
        self._hint_font = pygame.font.Font(None, 22)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        if event.key in (pygame.K_UP, pygame.K_w):
            self._move(-1)
        elif event.key in (pygame.K_DOWN, pygame.K_s):
            self._move(1)
        elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
            self._activate()
        elif event.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            self._back()

    def _move(self, delta: int) -> None:
        if not self._items:
            return
        self._selected = (self._selected + delta) % len(self._items)

    def _activate(self) -> None:
        if not self._items:
            return
        self._items[self._selected].action()

    def close(self) -> None:
        pass

    def _back(self) -> None:
        if self._is_root:
            self._app.quit()
        else:
            self._app.pop()

    def render(self, surface: pygame.Surface) -> None:
        frame, header = _draw_frame(surface, self._title, "MENU", self._title_font, self._hint_font)
        w, h = surface.get_size()

        content_top = header.bottom + max(16, h // 30)
        content_bottom = frame.bottom - max(44, h // 12)
        list_rect = pygame.Rect(
            frame.x + max(14, w // 44),
            content_top,
            frame.w - max(28, w // 22),
            max(120, content_bottom - content_top),
        )
        pygame.draw.rect(surface, (6, 13, 92), list_rect)
        pygame.draw.rect(surface, (78, 102, 170), list_rect, 1)

        item_count = max(1, len(self._items))
        gap = max(4, min(10, list_rect.h // max(10, item_count * 3)))
        row_h = max(30, min(44, (list_rect.h - gap * (item_count + 1)) // item_count))
        total_h = row_h * item_count + gap * (item_count - 1)
        y = list_rect.y + max(8, (list_rect.h - total_h) // 2)

        for idx, item in enumerate(self._items):
            row = pygame.Rect(list_rect.x + 12, y, list_rect.w - 24, row_h)
            selected = idx == self._selected
            if selected:
                pygame.draw.rect(surface, (244, 248, 255), row)
                pygame.draw.rect(surface, (120, 142, 196), row, 2)
            else:
                pygame.draw.rect(surface, (9, 20, 106), row)
                pygame.draw.rect(surface, (62, 84, 152), row, 1)

            color = (14, 26, 74) if selected else TEXT_MAIN
            text = self._item_font.render(item.label, True, color)
            surface.blit(text, (row.x + 10, row.y + (row.h - text.get_height()) // 2))
            y += row_h + gap

        foot = self._hint_font.render("Enter/Space: Select  |  Esc/Backspace: Back", True, TEXT_MUTED)
        surface.blit(foot, foot.get_rect(midbottom=(frame.centerx, frame.bottom - 10)))


class OrbitScreen:
    """Orbit view plus quiz panel. Acts as the quiz's presenter.

    The Moon is the only draggable body; its collider is the drawn disc.
    """

    def __init__(self, app: App, *, orbit: OrbitSimulation, seed: int) -> None:
        self._app = app
        self._orbit = orbit
        self._quiz = QuizState(seed=seed, presenter=self)

        self._title_font = pygame.font.Font(None, 36)
        self._small_font = pygame.font.Font(None, 28)
        self._tiny_font = pygame.font.Font(None, 22)
        self._grade_font = pygame.font.Font(None, 64)

        self._question: tuple[int, int, str, str] | None = None
        self._feedback: tuple[str, float] | None = None
        self._report: Report | None = None
        self._dragging = False
        self._show_debug = False

        self._orbit_center = (0, 0)
        self._orbit_px = 1
        self._moon_px = 1
        self._layout(app.surface.get_size())

    @property
    def quiz(self) -> QuizState:
        return self._quiz

    @property
    def orbit(self) -> OrbitSimulation:
        return self._orbit

    @property
    def dragging(self) -> bool:
        return self._dragging

    def close(self) -> None:
        # Window closing mid-quiz counts as abandoning the session.
        self._quiz.abandon()

    def start_quiz(self) -> None:
        self._report = None
        self._feedback = None
        self._quiz.start()

    # Presenter callbacks.

    def on_session_start(self) -> None:
        self._orbit.pause()

    def on_question_shown(self, index: int, total: int, name: str, sprite_key: str) -> None:
        self._question = (index, total, name, sprite_key)
        self._feedback = None

    def on_feedback(self, message: str, displacement_deg: float) -> None:
        self._feedback = (message, displacement_deg)

    def on_completed(self, report: Report) -> None:
        self._report = report
        self._question = None
        self._feedback = None

    def on_session_end(self) -> None:
        self._dragging = False
        self._orbit.restore_default_speed()

    # Coordinate mapping between world units (Y up) and screen pixels (Y down).

    def world_to_screen(self, p: Point2D) -> tuple[int, int]:
        scale = self._orbit_px / self._orbit.config.orbit_radius
        cx, cy = self._orbit_center
        return int(round(cx + p.x * scale)), int(round(cy - p.y * scale))

    def screen_to_world(self, pos: tuple[int, int]) -> Point2D:
        scale = self._orbit_px / self._orbit.config.orbit_radius
        cx, cy = self._orbit_center
        return Point2D((pos[0] - cx) / scale, (cy - pos[1]) / scale)

    def _moon_hit(self, pos: tuple[int, int]) -> bool:
        mx, my = self.world_to_screen(self._orbit.moon_position())
        # Slightly generous collider so small moons stay easy to grab.
        return math.hypot(pos[0] - mx, pos[1] - my) <= self._moon_px + 4

    def _can_drag(self) -> bool:
        return self._quiz.status is QuizStatus.IN_PROGRESS and not self._quiz.has_submitted_current

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self._can_drag() and self._moon_hit(event.pos):
                self._dragging = True
            return
        if event.type == pygame.MOUSEMOTION:
            if self._dragging:
                self._orbit.set_moon_position(self.screen_to_world(event.pos))
            return
        if event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self._dragging = False
            return
        if event.type != pygame.KEYDOWN:
            return

        if event.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            self._quiz.abandon()
            self._app.pop()
        elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
            self._confirm()
        elif event.key == pygame.K_q:
            if self._quiz.status is not QuizStatus.IN_PROGRESS:
                self.start_quiz()
        elif event.key == pygame.K_F3:
            self._show_debug = not self._show_debug
        elif event.key in (pygame.K_UP, pygame.K_DOWN):
            if self._quiz.status is QuizStatus.IN_PROGRESS:
                return
            step = SPEED_STEP_DEG_PER_S if event.key == pygame.K_UP else -SPEED_STEP_DEG_PER_S
            speed = min(MAX_SPEED_DEG_PER_S, self._orbit.speed_deg_per_s + step)
            self._orbit.set_speed(speed)

    def _confirm(self) -> None:
        status = self._quiz.status
        if status is not QuizStatus.IN_PROGRESS:
            self.start_quiz()
            return
        self._dragging = False
        if self._quiz.has_submitted_current:
            self._quiz.advance()
        else:
            self._quiz.submit_position(self._orbit.moon_position())

    def _layout(self, size: tuple[int, int]) -> pygame.Rect:
        w, h = size
        margin = max(10, min(24, w // 34))
        header_h = max(34, min(52, h // 8))
        top = margin + 2 + header_h + 10
        bottom = h - margin - 40
        view_w = int((w - margin * 2) * 0.58)
        view = pygame.Rect(margin + 12, top, max(120, view_w - 12), max(120, bottom - top))

        self._orbit_center = view.center
        self._orbit_px = max(40, min(view.w, view.h) // 2 - 36)
        self._moon_px = max(8, self._orbit_px // 9)
        return view

    def render(self, surface: pygame.Surface) -> None:
        self._orbit.update()

        title = "Lunar Phase Quiz" if self._quiz.status is not QuizStatus.NOT_STARTED else "Free Orbit"
        frame, header = _draw_frame(surface, title, "ORBIT", self._title_font, self._tiny_font)
        view = self._layout(surface.get_size())
        panel = pygame.Rect(view.right + 12, view.y, frame.right - view.right - 26, view.h)

        self._render_orbit_view(surface, view)
        self._render_panel(surface, panel)
        if self._show_debug:
            self._render_debug_overlay(surface, view)

        if self._quiz.status is QuizStatus.IN_PROGRESS:
            if self._quiz.has_submitted_current:
                footer = "Enter: Next question  |  Esc: Abandon quiz"
            else:
                footer = "Drag the Moon  |  Enter: Submit  |  Esc: Abandon quiz"
        else:
            footer = "Enter/Q: Start quiz  |  Up/Down: Orbit speed  |  F3: Debug  |  Esc: Back"
        foot = self._tiny_font.render(footer, True, TEXT_MUTED)
        surface.blit(foot, foot.get_rect(midbottom=(frame.centerx, frame.bottom - 12)))

    def _render_orbit_view(self, surface: pygame.Surface, view: pygame.Rect) -> None:
        pygame.draw.rect(surface, (4, 6, 30), view)
        pygame.draw.rect(surface, (78, 102, 170), view, 1)

        # Sunlight arrives from +X (screen right).
        for i in range(5):
            y = view.y + (i + 1) * view.h // 6
            start = (view.right - 8, y)
            end = (view.right - 48, y)
            pygame.draw.line(surface, (255, 214, 90), start, end, 2)
            pygame.draw.polygon(surface, (255, 214, 90), [end, (end[0] + 8, y - 5), (end[0] + 8, y + 5)])
        sun_lbl = self._tiny_font.render("Sunlight", True, (255, 214, 90))
        surface.blit(sun_lbl, sun_lbl.get_rect(topright=(view.right - 8, view.y + 6)))

        cx, cy = self._orbit_center
        pygame.draw.circle(surface, (70, 80, 120), (cx, cy), self._orbit_px, 1)

        earth_px = max(12, self._orbit_px // 5)
        pygame.draw.circle(surface, (30, 60, 130), (cx, cy), earth_px)
        pygame.draw.circle(surface, (70, 140, 230), (cx, cy), earth_px, draw_top_right=True, draw_bottom_right=True)

        moon = self.world_to_screen(self._orbit.moon_position())
        pygame.draw.circle(surface, MOON_DARK, moon, self._moon_px)
        # Top-down view: the sun-facing half is always lit.
        pygame.draw.circle(surface, MOON_LIT, moon, self._moon_px, draw_top_right=True, draw_bottom_right=True)
        ring = (255, 214, 90) if self._dragging else (140, 150, 180)
        pygame.draw.circle(surface, ring, moon, self._moon_px + 2, 1)

        inset_r = max(14, view.h // 12)
        inset_c = (view.x + inset_r + 12, view.bottom - inset_r - 12)
        draw_phase_disc(surface, inset_c, inset_r, self._orbit.moon_angle_deg)
        lbl = self._tiny_font.render("View from Earth", True, TEXT_MUTED)
        surface.blit(lbl, lbl.get_rect(midbottom=(inset_c[0], inset_c[1] - inset_r - 4)))

    def _render_panel(self, surface: pygame.Surface, panel: pygame.Rect) -> None:
        pygame.draw.rect(surface, (9, 20, 106), panel)
        pygame.draw.rect(surface, (62, 84, 152), panel, 1)
        x = panel.x + 12
        y = panel.y + 12

        if self._report is not None and self._quiz.status is QuizStatus.COMPLETED:
            self._render_results(surface, panel, self._report)
            return

        if self._question is None:
            lines = [
                "Drag the Moon to the orbit position",
                "that produces each named phase.",
                "",
                f"Orbit speed: {self._orbit.speed_deg_per_s:.0f} deg/s",
            ]
            for line in lines:
                surf = self._tiny_font.render(line, True, TEXT_MAIN)
                surface.blit(surf, (x, y))
                y += self._tiny_font.get_linesize() + 2
            return

        index, total, name, sprite_key = self._question
        counter = self._tiny_font.render(f"Question {index + 1} of {total}", True, TEXT_MUTED)
        surface.blit(counter, (x, y))
        y += counter.get_height() + 8

        prompt = self._small_font.render(f"Place the Moon at: {name}", True, TEXT_MAIN)
        surface.blit(prompt, (x, y))
        y += prompt.get_height() + 12

        sprite_r = max(18, min(40, panel.w // 7))
        sprite_angle = PHASE_SPRITE_ANGLES.get(sprite_key)
        if sprite_angle is not None:
            draw_phase_disc(surface, (panel.centerx, y + sprite_r), sprite_r, sprite_angle)
        y += sprite_r * 2 + 16

        angle = self._tiny_font.render(f"Moon angle: {self._orbit.moon_angle_deg:5.1f} deg", True, TEXT_MUTED)
        surface.blit(angle, (x, y))
        y += angle.get_height() + 12

        if self._feedback is not None:
            message, displacement = self._feedback
            off = self._small_font.render(f"Off by {displacement:.1f} deg", True, (255, 214, 90))
            surface.blit(off, (x, y))
            y += off.get_height() + 6
            self._draw_wrapped(surface, message, pygame.Rect(x, y, panel.w - 24, panel.bottom - y - 8))

    def _render_results(self, surface: pygame.Surface, panel: pygame.Rect, report: Report) -> None:
        x = panel.x + 12
        y = panel.y + 12
        heading = self._small_font.render("Results", True, TEXT_MAIN)
        surface.blit(heading, (x, y))
        y += heading.get_height() + 10

        for attempt in self._quiz.attempts:
            row = f"{attempt.question.name}: off by {attempt.displacement_deg:.1f} deg"
            surf = self._tiny_font.render(row, True, TEXT_MAIN)
            surface.blit(surf, (x, y))
            y += surf.get_height() + 6

        y += 6
        total = self._tiny_font.render(f"Total error: {report.total_displacement:.1f} deg", True, TEXT_MUTED)
        surface.blit(total, (x, y))
        y += total.get_height() + 10
        grade_surf = self._grade_font.render(f"Grade: {report.grade}", True, (255, 214, 90))
        surface.blit(grade_surf, (x, y))

    def _render_debug_overlay(self, surface: pygame.Surface, view: pygame.Rect) -> None:
        snap = self._quiz.snapshot()
        last = "-" if snap.last_displacement is None else f"{snap.last_displacement:.2f}"
        lines = [
            f"status: {snap.status.value}",
            f"question: {snap.current_index}/{snap.question_count} {snap.current_name or '-'}",
            f"submitted: {snap.submitted_current}",
            f"total: {snap.total_displacement:.2f}  last: {last}",
            f"moon: {self._orbit.moon_angle_deg:.2f} deg @ {self._orbit.speed_deg_per_s:.0f} deg/s",
        ]
        y = view.y + 6
        for line in lines:
            surf = self._tiny_font.render(line, True, (150, 230, 150))
            surface.blit(surf, (view.x + 6, y))
            y += surf.get_height() + 2

    def _draw_wrapped(self, surface: pygame.Surface, text: str, rect: pygame.Rect) -> None:
        font = self._tiny_font
        lines: list[str] = []
        cur = ""
        for word in str(text).split():
            trial = word if cur == "" else f"{cur} {word}"
            if font.size(trial)[0] <= rect.w:
                cur = trial
                continue
            if cur:
                lines.append(cur)
            cur = word
        if cur:
            lines.append(cur)

        y = rect.y
        line_h = font.get_linesize() + 2
        for line in lines:
            if y + line_h > rect.bottom:
                break
            surface.blit(font.render(line, True, TEXT_MAIN), (rect.x, y))
            y += line_h


def _new_seed() -> int:
    return random.SystemRandom().randint(1, 2**31 - 1)


def run(*, max_frames: int | None = None, event_injector: Callable[[int], None] | None = None) -> int:
    pygame.init()

    pygame.display.set_caption("Lunar Phase Trainer")
    surface = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)

    font = pygame.font.Font(None, 36)
    clock = pygame.time.Clock()

    app = App(surface=surface, font=font)
    orbit = OrbitSimulation(clock=RealClock())

    def open_quiz() -> None:
        screen = OrbitScreen(app, orbit=orbit, seed=_new_seed())
        app.push(screen)
        screen.start_quiz()

    def open_free_orbit() -> None:
        app.push(OrbitScreen(app, orbit=orbit, seed=_new_seed()))

    main_items = [
        MenuItem("Phase Quiz", open_quiz),
        MenuItem("Free Orbit", open_free_orbit),
        MenuItem("Quit", app.quit),
    ]
    app.push(MenuScreen(app, "Lunar Phase Trainer", main_items, is_root=True))

    frame = 0
    try:
        while app.running:
            if event_injector is not None:
                event_injector(frame)

            for event in pygame.event.get():
                app.handle_event(event)

            app.render()

            pygame.display.flip()

            frame += 1
            if max_frames is not None and frame >= max_frames:
                break

            clock.tick(TARGET_FPS)
    finally:
        app.close()
        pygame.quit()

    return 0
