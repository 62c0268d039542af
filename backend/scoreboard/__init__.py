from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

TEAMS = (
    # (name, short_name, color_code)
    ('The Aviators', 'aviators', '#004A7F'),
    ('The Producers', 'producers', '#800000'),
)


def seed_reference_data(config):
    """Create the two teams, the seed admin and a first tournament if missing."""
    from datetime import date
    from scoreboard.models import Team, Tournament, User

    for name, short_name, color in TEAMS:
        if not Team.query.filter_by(short_name=short_name).first():
            db.session.add(Team(name=name, short_name=short_name, color_code=color))

    username = config.get('ADMIN_USERNAME', 'superadmin')
    if not User.query.filter_by(username=username).first():
        admin = User(username=username, is_admin=True, needs_password_change=True)
        admin.set_passcode(config.get('ADMIN_PASSCODE', '1111'))
        db.session.add(admin)

    if not Tournament.query.first():
        year = date.today().year
        db.session.add(Tournament(
            name=f"{config.get('DEFAULT_TOURNAMENT_NAME', 'Rowdy Cup')} {year}",
            year=year,
            aviator_score=0.0,
            producer_score=0.0,
            is_active=True,
        ))


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS', [])

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Import and register blueprints here
    from scoreboard.main import main
    flask_app.register_blueprint(main, url_prefix='/api')

    from scoreboard.api.tournaments import tournaments
    flask_app.register_blueprint(tournaments, url_prefix='/api')

    from scoreboard.api.matches import matches
    flask_app.register_blueprint(matches, url_prefix='/api')

    from scoreboard.api.players import players
    flask_app.register_blueprint(players, url_prefix='/api')

    from scoreboard.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    from scoreboard.services.scoring.errors import ScoringError

    @flask_app.errorhandler(ScoringError)
    def handle_scoring_error(exc):
        db.session.rollback()
        return jsonify(exc.to_dict()), exc.status_code

    # Flask-Login user loader
    from scoreboard.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Authentication required'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            seed_reference_data(flask_app.config)
            db.session.commit()
            print('Database has been reset and seeded!')

    @click.command('reconcile-stats')
    def reconcile_stats_command():
        """Rebuilds every player record from completed matches."""
        from scoreboard.services.scoring.stats import reconcile_player_stats
        from scoreboard.services.tournaments import active_tournament
        with flask_app.app_context():
            summary = reconcile_player_stats(tournament=active_tournament())
            print(f"Replayed {summary['matches_replayed']} completed matches.")

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(reconcile_stats_command)

    return flask_app
