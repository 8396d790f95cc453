from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from dartscore.main import main
    flask_app.register_blueprint(main)

    from dartscore.api.matches import matches
    # Mount match routes under /api to match frontend API client
    flask_app.register_blueprint(matches, url_prefix='/api/matches')

    # Register Socket.IO event handlers
    from dartscore.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('checkout')
    @click.argument('score', type=int)
    @click.option('--darts', default=3, show_default=True, type=click.IntRange(1, 3),
                  help='Darts left in the turn.')
    @click.option('--out-mode', default='double', show_default=True,
                  type=click.Choice(['open', 'master', 'double']))
    @click.option('--split-bull', is_flag=True, help='Treat 25 and 50 as separate bulls.')
    def checkout_command(score, darts, out_mode, split_bull):
        """Prints the suggested finish for SCORE."""
        from dartscore.services.games.checkout import format_checkout, suggest
        route = suggest(score, darts, out_mode, split_bull,
                        max_score=flask_app.config.get('CHECKOUT_MAX_SCORE', 149))
        click.echo(format_checkout(route) or 'no checkout')

    flask_app.cli.add_command(checkout_command)

    return flask_app
