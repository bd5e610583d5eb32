from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
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

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from sequence_memory.main import main
    flask_app.register_blueprint(main)

    from sequence_memory.api.rounds import rounds
    flask_app.register_blueprint(rounds, url_prefix='/api')

    # Tables must exist before the run history is loaded below
    from sequence_memory import models  # noqa: F401
    with flask_app.app_context():
        db.create_all()

    from sequence_memory.services.sequence import build_round_machine
    build_round_machine(flask_app)

    from sequence_memory.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the database, wiping the run history."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
        flask_app.extensions['round_machine'].stats.load()
        print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
