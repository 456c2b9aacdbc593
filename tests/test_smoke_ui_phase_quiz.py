from __future__ import annotations

import os


def test_ui_smoke_open_quiz_answer_all_and_go_back() -> None:
    # Headless SDL for CI.
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

    import pygame

    from lunar_phase_trainer.app import run

    def key(k: int) -> None:
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, {"key": k, "unicode": ""}))

    # Main Menu -> Phase Quiz, then submit/advance three times, toggle debug, retry, abandon.
    script = {
        1: pygame.K_RETURN,
        2: pygame.K_RETURN,
        3: pygame.K_RETURN,
        4: pygame.K_RETURN,
        5: pygame.K_RETURN,
        6: pygame.K_RETURN,
        7: pygame.K_RETURN,
        8: pygame.K_F3,
        9: pygame.K_q,
        10: pygame.K_ESCAPE,
    }

    def inject(frame: int) -> None:
        if frame in script:
            key(script[frame])

    assert run(max_frames=16, event_injector=inject) == 0


def test_ui_smoke_free_orbit_speed_controls() -> None:
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

    import pygame

    from lunar_phase_trainer.app import run

    def inject(frame: int) -> None:
        keys = {1: pygame.K_DOWN, 2: pygame.K_RETURN, 3: pygame.K_UP, 4: pygame.K_UP, 5: pygame.K_DOWN, 6: pygame.K_ESCAPE}
        if frame in keys:
            pygame.event.post(pygame.event.Event(pygame.KEYDOWN, {"key": keys[frame], "unicode": ""}))

    assert run(max_frames=10, event_injector=inject) == 0


def test_ui_window_close_mid_quiz_resumes_orbit(monkeypatch) -> None:
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

    import pygame

    from lunar_phase_trainer import app as app_module

    opened: list[app_module.OrbitScreen] = []
    session_ends: list[float] = []

    class RecordingOrbitScreen(app_module.OrbitScreen):
        def __init__(self, *args, **kwargs) -> None:
            super().__init__(*args, **kwargs)
            opened.append(self)

        def on_session_end(self) -> None:
            super().on_session_end()
            session_ends.append(self.orbit.speed_deg_per_s)

    monkeypatch.setattr(app_module, "OrbitScreen", RecordingOrbitScreen)

    def inject(frame: int) -> None:
        if frame == 1:
            pygame.event.post(pygame.event.Event(pygame.KEYDOWN, {"key": pygame.K_RETURN, "unicode": ""}))
        elif frame == 3:
            pygame.event.post(pygame.event.Event(pygame.QUIT, {}))

    assert app_module.run(max_frames=10, event_injector=inject) == 0

    assert len(opened) == 1
    assert opened[0].quiz.status.value == "not_started"
    assert len(session_ends) == 1
    assert session_ends[0] > 0.0
