from flask import Blueprint, jsonify, request, current_app
import time
from dartscore.models import GameConfig, Phase
from dartscore.registry import create_match, get_match, prune
from dartscore.services.games import engine
from dartscore.services.games.checkout import format_checkout, suggest
from dartscore.services.games.scheduler import phase_delay, schedule_phase_timer as svc_schedule_phase_timer
from dartscore.socketio_events import broadcast


matches = Blueprint('matches', __name__)

_last_controller_action: dict[str, float] = {}


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes')


def _max_score() -> int:
    return int(current_app.config.get('CHECKOUT_MAX_SCORE', 149))


def _schedule_phase_timer(app, match_code: str) -> None:
    svc_schedule_phase_timer(app, match_code)


def _debounced(action: str, match_code: str) -> bool:
    debounce_ms = int(current_app.config.get('CONTROLLER_DEBOUNCE_MS', 0))
    if debounce_ms <= 0:
        return False
    key = f"{action}:{match_code.upper()}"
    now = time.time() * 1000.0
    last = _last_controller_action.get(key, 0)
    if now - last < debounce_ms:
        return True
    _last_controller_action[key] = now
    return False


def _state_payload(match):
    payload = match.to_dict(_max_score())
    cfg = current_app.config
    payload['durations'] = {
        'intro': float(cfg.get('INTRO_DURATION_SEC', 4)),
        'turn_change_ms': int(cfg.get('TURN_CHANGE_DELAY_MS', 1500)),
        'achievement_ms': int(cfg.get('ACHIEVEMENT_DISPLAY_MS', 2000)),
        'current': phase_delay(current_app._get_current_object(), match.state),
    }
    return payload


def _dispatch(match, event):
    events = match.dispatch(event)
    if events:
        broadcast(match, events)
    _schedule_phase_timer(current_app._get_current_object(), match.code)
    return jsonify(_state_payload(match))


def _match_or_404(match_code):
    match = get_match(match_code)
    if not match:
        return None, (jsonify({'error': 'Match not found'}), 404)
    return match, None


@matches.route('/create', methods=['POST'])
def create():
    data = request.get_json(silent=True) or {}
    cfg = current_app.config
    for code in prune(float(cfg.get('MATCH_TTL_SEC', 0))):
        current_app.logger.info(f"[prune] match={code} reason=idle")
    names = data.get('players') or []
    if not isinstance(names, list) or len(names) > 2:
        return jsonify({'error': 'players must be a list of at most two names'}), 400
    try:
        config = GameConfig(
            start_score=int(data.get('start_score', cfg.get('DEFAULT_START_SCORE', 501))),
            in_mode=data.get('in_mode', cfg.get('DEFAULT_IN_MODE', 'open')),
            out_mode=data.get('out_mode', cfg.get('DEFAULT_OUT_MODE', 'double')),
            split_bull=_parse_bool(data.get('split_bull', False)),
        )
        match = create_match(config, names, data.get('starting_player'),
                             max_undos=int(cfg.get('MAX_UNDOS', 3)))
    except (TypeError, ValueError) as exc:
        return jsonify({'error': str(exc)}), 400
    current_app.logger.info(
        f"[create] match={match.code} start={config.start_score} in={config.in_mode} out={config.out_mode} split_bull={config.split_bull}"
    )
    _schedule_phase_timer(current_app._get_current_object(), match.code)
    payload = _state_payload(match)
    payload['message'] = 'New match created!'
    return jsonify(payload), 201


@matches.route('/<string:match_code>/state', methods=['GET'])
def get_state(match_code):
    match, error = _match_or_404(match_code)
    if error:
        return error
    return jsonify(_state_payload(match))


@matches.route('/<string:match_code>/throw', methods=['POST'])
def throw(match_code):
    match, error = _match_or_404(match_code)
    if error:
        return error
    data = request.get_json(silent=True) or {}
    timestamp = data.get('timestamp')
    event = engine.Throw(
        segment_type=data.get('segment_type') or '',
        base_value=data.get('base_value', 0),
        multiplier=data.get('multiplier', 0),
        throw_id=str(timestamp) if timestamp is not None else None,
    )
    current_app.logger.info(
        f"[throw] match={match.code} type={event.segment_type} value={event.base_value} x{event.multiplier} ts={event.throw_id}"
    )
    return _dispatch(match, event)


@matches.route('/<string:match_code>/end-turn', methods=['POST'])
def end_turn(match_code):
    match, error = _match_or_404(match_code)
    if error:
        return error
    data = request.get_json(silent=True) or {}
    timestamp = data.get('timestamp')
    return _dispatch(match, engine.EndTurn(throw_id=str(timestamp) if timestamp is not None else None))


@matches.route('/<string:match_code>/undo', methods=['POST'])
def undo(match_code):
    match, error = _match_or_404(match_code)
    if error:
        return error
    if _debounced('undo', match_code):
        return jsonify({'message': 'debounced'}), 202
    return _dispatch(match, engine.Undo())


@matches.route('/<string:match_code>/advance', methods=['POST'])
def advance(match_code):
    """Skip the intro ceremony or the turn-resolution delay."""
    match, error = _match_or_404(match_code)
    if error:
        return error
    if _debounced('advance', match_code):
        return jsonify({'message': 'debounced'}), 202
    if match.state.phase == Phase.INTRO:
        return _dispatch(match, engine.IntroComplete())
    return _dispatch(match, engine.ResolveTurn())


@matches.route('/<string:match_code>/rematch', methods=['POST'])
def rematch(match_code):
    match, error = _match_or_404(match_code)
    if error:
        return error
    current_app.logger.info(f"[rematch] match={match.code}")
    return _dispatch(match, engine.Rematch())


@matches.route('/checkout', methods=['GET'])
def checkout():
    try:
        score = int(request.args.get('score', ''))
        darts = int(request.args.get('darts', 3))
    except ValueError:
        return jsonify({'error': 'score and darts must be integers'}), 400
    out_mode = request.args.get('out_mode', 'double')
    if out_mode not in ('open', 'master', 'double'):
        return jsonify({'error': 'out_mode must be open, master or double'}), 400
    split_bull = _parse_bool(request.args.get('split_bull', ''))
    route = suggest(score, darts, out_mode, split_bull, max_score=_max_score())
    return jsonify({
        'score': score,
        'darts': darts,
        'out_mode': out_mode,
        'split_bull': split_bull,
        'route': list(route) if route else None,
        'checkout': format_checkout(route),
    })
