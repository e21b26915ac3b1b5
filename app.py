"""
app.py — Flask entry point for the garden planner.

Builds the key/value store, registers all route blueprints and, on
startup, backfills schedules for legacy plant records and marks plants
whose harvest date has passed.

Run: python app.py → localhost:5000
"""

import os
import logging
from flask import Flask, jsonify
from flask_wtf.csrf import CSRFProtect

from database import KeyValueStore, STORE_EXTENSION
from garden import backfill_schedules, sweep_harvested
from models import Climate
from routes.garden import garden_bp
from routes.tasks import tasks_bp
from routes.projects import projects_bp
from routes.preferences import preferences_bp


def create_app(test_config=None):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.secret_key = 'garden-planner-local-app-secret-key'
    app.config['WTF_CSRF_CHECK_DEFAULT'] = True
    app.config['CLIMATE'] = Climate.TEMPERATE.value
    # Group and column order is part of the response
    app.json.sort_keys = False

    if test_config:
        app.config.update(test_config)

    csrf = CSRFProtect(app)

    # An injected store wins over a database path
    store = app.config.get('STORE')
    if store is None:
        store = KeyValueStore(app.config.get('DATABASE'))
    store.init_db()
    app.extensions[STORE_EXTENSION] = store

    backfill_schedules(store, app.config['CLIMATE'])
    sweep_harvested(store)

    # Register blueprints
    app.register_blueprint(garden_bp)
    app.register_blueprint(tasks_bp)
    app.register_blueprint(projects_bp)
    app.register_blueprint(preferences_bp)

    @app.route('/health')
    def health():
        return jsonify({'success': True, 'status': 'ok'})

    return app


if __name__ == '__main__':
    logging.basicConfig(
        level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    app = create_app()
    # Debug mode: enabled by default for development (auto-reload on file changes)
    # Set FLASK_DEBUG=0 to disable for production
    debug = os.environ.get('FLASK_DEBUG', '1') != '0'
    app.run(host='localhost', port=5000, debug=debug)
