# THIS MUST BE THE ABSOLUTE FIRST LINE
import eventlet
eventlet.monkey_patch()

import os

from smartprep import create_app, socketio, db
from flask_migrate import upgrade, init, migrate
from sqlalchemy import inspect

app = create_app()


def setup_database():
    """Initialize and run migrations if needed"""
    with app.app_context():
        tables = inspect(db.engine).get_table_names()
        app.logger.info("Found tables: %s", tables)

        if tables:
            try:
                upgrade()
            except Exception as e:
                app.logger.error("Migration error: %s", e)
            return

        try:
            if not os.path.exists('migrations'):
                init()
            migrate(message="Initial migration")
            upgrade()
            app.logger.info("Tables now: %s", inspect(db.engine).get_table_names())
        except Exception as e:
            # Let the app try to run anyway
            app.logger.error("Setup error: %s", e)


if os.environ.get('DATABASE_URL') or os.environ.get('SETUP_DATABASE'):
    setup_database()
else:
    with app.app_context():
        db.create_all()

if __name__ == '__main__':
    socketio.run(app, debug=True)
