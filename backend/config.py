import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Match defaults (overridable per match on create)
    DEFAULT_START_SCORE = int(os.environ.get('DEFAULT_START_SCORE', '501'))
    DEFAULT_IN_MODE = os.environ.get('DEFAULT_IN_MODE', 'open')
    DEFAULT_OUT_MODE = os.environ.get('DEFAULT_OUT_MODE', 'double')
    # Usable undos per game
    MAX_UNDOS = int(os.environ.get('MAX_UNDOS', '3'))
    # Auto-advance timers
    INTRO_DURATION_SEC = float(os.environ.get('INTRO_DURATION_SEC', '4'))
    TURN_CHANGE_DELAY_MS = int(os.environ.get('TURN_CHANGE_DELAY_MS', '1500'))
    ACHIEVEMENT_DISPLAY_MS = int(os.environ.get('ACHIEVEMENT_DISPLAY_MS', '2000'))
    # Checkout suggestions are not offered above this remaining score
    CHECKOUT_MAX_SCORE = int(os.environ.get('CHECKOUT_MAX_SCORE', '149'))
    # Optional: debounce controller actions (ms). 0 disables.
    CONTROLLER_DEBOUNCE_MS = int(os.environ.get('CONTROLLER_DEBOUNCE_MS', '0'))
    # Optional: heartbeat interval for timer worker logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
    # Matches idle longer than this are dropped on the next create (sec). 0 keeps them forever.
    MATCH_TTL_SEC = int(os.environ.get('MATCH_TTL_SEC', '21600'))
