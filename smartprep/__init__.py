from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_socketio import SocketIO
from smartprep.config import Config
from flask_migrate import Migrate


db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
login_manager.login_view = 'users.login'
login_manager.login_message_category = 'info'
socketio = SocketIO(async_mode="eventlet")


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    db.init_app(app)
    login_manager.init_app(app)
    socketio.init_app(app)
    migrate.init_app(app, db)

    from smartprep.provider.groq_provider import GroqContentProvider
    app.extensions['content_provider'] = GroqContentProvider(
        api_key=app.config.get('GROQ_API_KEY'),
        model=app.config.get('GROQ_MODEL', 'llama-3.3-70b-versatile'),
    )

    from smartprep.users.routes import users
    from smartprep.main.routes import main
    from smartprep.assessment.routes import assessment
    from smartprep.roadmap.routes import roadmap
    from smartprep import sockets  # noqa: F401  registers socket handlers

    app.register_blueprint(users)
    app.register_blueprint(main)
    app.register_blueprint(assessment)
    app.register_blueprint(roadmap)

    # ── Session state context processor ─────────────────────────────────────
    # Every template sees the browser session's AppState as `state`.
    @app.context_processor
    def inject_state():
        from smartprep.sessions import current_context
        return {"state": current_context().state}

    return app
