#!/usr/bin/env python3
"""
BananaStudio web application
Upload a product photo (and optionally a style reference), generate a scene
prompt with Gemini, edit it, and render the final studio shot.
"""

from flask import Flask, render_template, jsonify
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

from bananastudio.config import Config, load_environment, get_gemini_api_key
from bananastudio.controller import ControllerRegistry
from bananastudio.settings import options as settings_options

# Load environment variables before the app reads its configuration
load_environment()

from api import api_bp, create_error_response, state_payload


def create_app(config=None, registry=None):
    """
    Build the Flask application

    Args:
        config: mapping of overrides applied on top of Config
        registry: ControllerRegistry to use (one per process by default)

    Returns:
        Flask: configured application
    """
    app = Flask(__name__)
    settings = Config()
    app.config.update(settings.to_dict())
    if config:
        app.config.update(config)

    # Configure CORS
    CORS(app, resources={
        r"/api/*": {
            "origins": app.config['CORS_ORIGINS'],
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type"]
        }
    })

    if registry is None:
        registry = ControllerRegistry(max_sessions=app.config['MAX_SESSIONS'],
                                      idle_timeout=app.config['SESSION_IDLE_MINUTES'] * 60)
    app.extensions['bananastudio'] = registry
    app.register_blueprint(api_bp)

    @app.route('/')
    def index():
        """Main page"""
        return render_template('index.html', state=state_payload(), options=settings_options())

    @app.route('/health')
    def health_check():
        return jsonify({
            'status': 'healthy',
            'gemini_configured': bool(get_gemini_api_key()),
        })

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e):
        limit_mb = app.config['MAX_CONTENT_LENGTH'] // (1024 * 1024)
        return jsonify(create_error_response('VALIDATION_003', f"Maximum upload size: {limit_mb}MB")), 413

    return app


app = create_app()

if __name__ == '__main__':
    if not get_gemini_api_key():
        print("Warning: GEMINI_API_KEY not set. Prompt and render requests will fail.")

    app.run(debug=app.config['DEBUG'], host=app.config['HOST'], port=app.config['PORT'], threaded=True)
