from flask import Flask, request
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def allowed_origins(config):
    origins = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
    frontend = config.get('FRONTEND_URL')
    if frontend and frontend not in origins:
        origins.insert(0, frontend)
    return origins


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    origins = allowed_origins(flask_app.config)
    db.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=origins)
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    from fungame.auth import init_login_manager
    init_login_manager(login_manager)

    from fungame.errors import register_error_handlers
    register_error_handlers(flask_app)

    # Import and register blueprints here
    from fungame.main import main
    flask_app.register_blueprint(main)

    from fungame.api.auth import auth
    flask_app.register_blueprint(auth, url_prefix='/api/auth')

    from fungame.api.users import users
    flask_app.register_blueprint(users, url_prefix='/api/users')

    from fungame.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    from fungame.api.leaderboard import leaderboard
    flask_app.register_blueprint(leaderboard, url_prefix='/api/leaderboard')

    from fungame.api.shares import shares
    flask_app.register_blueprint(shares, url_prefix='/api/shares')

    # Socket.IO handlers bind to the initialized socketio instance
    from fungame.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @flask_app.after_request
    def log_request(response):
        flask_app.logger.info(
            f"[http] {request.remote_addr} {request.method} {request.full_path.rstrip('?')} {response.status_code}"
        )
        return response

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from fungame.models import User, Post, Comment
        from fungame.services.games.state import new_game_state, STATUS_COMPLETED
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed users, each with one finished game on the leaderboard
            seeds = [('testuser1', 120), ('testuser2', 250), ('testuser3', 90)]
            for username, score in seeds:
                user = User(username=username, email=f'{username}@example.com', password_hash='password')
                db.session.add(user)
                db.session.flush()
                state = new_game_state('normal')
                state.update(score=score, time_remaining=0, status=STATUS_COMPLETED)
                game = Post(user_id=user.id, title='normal')
                game.game_state = state
                db.session.add(game)
                db.session.flush()
                db.session.add(Comment(user_id=user.id, post_id=game.id, content=str(score)))

            db.session.commit()
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
