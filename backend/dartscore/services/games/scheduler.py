import time
from typing import Set, Tuple

from dartscore import socketio
from dartscore.models import Phase
from dartscore.registry import get_match
from .engine import IntroComplete, ResolveTurn


_scheduled_phase_keys: Set[Tuple[str, int, str, int]] = set()


def phase_delay(app, state) -> float:
    """Seconds the current transient phase is held before auto-advancing."""
    if state.phase == Phase.INTRO:
        return float(app.config.get('INTRO_DURATION_SEC', 4))
    if state.phase == Phase.TURN_RESOLVING:
        delay_ms = int(app.config.get('TURN_CHANGE_DELAY_MS', 1500))
        if state.last_achievement is not None:
            delay_ms += int(app.config.get('ACHIEVEMENT_DISPLAY_MS', 2000))
        return delay_ms / 1000.0
    return 0.0


def schedule_phase_timer(app, match_code: str) -> None:
    """Schedule auto-advance out of the current transient phase of a match.

    - No-ops in TESTING mode unless ENABLE_SCHEDULER_IN_TESTS is set
    - Sets match.deadline so clients can render countdowns
    - Ensures a single timer per (match, generation, phase, token)
    - Advances: intro -> awaiting_throw, turn_resolving -> next player
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return

    match = get_match(match_code)
    if not match:
        return

    with match.lock:
        state = match.state
        if state.phase not in (Phase.INTRO, Phase.TURN_RESOLVING):
            return
        phase = state.phase
        token = state.resolution_token
        key = (match.code, match.generation, phase.value, token)
        if key in _scheduled_phase_keys:
            app.logger.info(f"[timer-skip] match={match.code} phase={phase.value} token={token} already scheduled")
            return
        _scheduled_phase_keys.add(key)
        duration = phase_delay(app, state)
        match.deadline = time.time() + duration

    app.logger.info(
        f"[timer-set] match={match.code} phase={phase.value} token={token} duration={duration}s deadline={match.deadline}"
    )

    def _worker(timer_key: Tuple[str, int, str, int], delay: float):
        code, generation, expected_phase, expected_token = timer_key
        hb = int(app.config.get('TIMER_HEARTBEAT_SEC', 0))
        if hb > 0:
            slept = 0.0
            while slept < delay:
                step = min(hb, delay - slept)
                time.sleep(step)
                slept += step
                app.logger.info(f"[timer-heartbeat] match={code} phase={expected_phase} remaining={max(0.0, delay - slept)}s")
        elif delay > 0:
            time.sleep(delay)

        with app.app_context():
            _scheduled_phase_keys.discard(timer_key)
            m = get_match(code)
            if not m:
                return
            with m.lock:
                actual = m.state
                app.logger.info(
                    f"[timer-fire] match={code} expected_phase={expected_phase} expected_token={expected_token} "
                    f"actual_phase={actual.phase.value} actual_token={actual.resolution_token}"
                )
                if (m.generation != generation or actual.phase.value != expected_phase
                        or actual.resolution_token != expected_token):
                    app.logger.info(f"[timer-abort] match={code} mismatch generation/phase/token")
                    return
                if expected_phase == Phase.INTRO.value:
                    events = m.dispatch(IntroComplete())
                else:
                    events = m.dispatch(ResolveTurn(token=expected_token))

            from dartscore.socketio_events import broadcast
            broadcast(m, events)
            schedule_phase_timer(app, code)

    if app.config.get('TESTING'):
        _worker(key, duration)
    else:
        socketio.start_background_task(_worker, key, duration)
