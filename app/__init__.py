# app/__init__.py
import json
import os
from datetime import timedelta
from flask import Flask, jsonify
from .extensions import db
from flask_migrate import Migrate
from dotenv import load_dotenv
from flask_jwt_extended import JWTManager
from flask_cors import CORS

load_dotenv()


def _clinic_token_map(app, raw):
    if isinstance(raw, dict):
        return raw
    try:
        parsed = json.loads(raw or "{}")
    except json.JSONDecodeError:
        app.logger.error("CLINIC_TOKEN_MAP is not valid JSON; clinic dashboards are disabled")
        return {}
    if not isinstance(parsed, dict):
        app.logger.error("CLINIC_TOKEN_MAP must be a JSON object")
        return {}
    return {str(k): str(v) for k, v in parsed.items()}


def create_app(test_config=None):
    app = Flask(__name__)

    app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv('DATABASE_URL', 'sqlite:///nextweight.db')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['FRONTEND_URL'] = os.getenv('FRONTEND_URL', 'http://localhost:3000')
    app.config['CLINIC_TOKEN_MAP'] = os.getenv('CLINIC_TOKEN_MAP', '{}')
    app.config['SIGNAL_WINDOW_DAYS'] = 7
    app.config['WEEKLY_WINDOW_WEEKS'] = 4

    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'super-secret')
    app.config['JWT_ACCESS_TOKEN_EXPIRES'] = timedelta(days=int(os.getenv('SESSION_DURATION_DAYS', '30')))

    if test_config:
        app.config.update(test_config)

    app.config['CLINIC_TOKEN_MAP'] = _clinic_token_map(app, app.config['CLINIC_TOKEN_MAP'])

    db.init_app(app)
    Migrate(app, db)
    jwt = JWTManager(app)

    CORS(app,
         origins=[app.config['FRONTEND_URL']],
         supports_credentials=True,
         methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
         allow_headers=["Content-Type", "Authorization", "X-Clinic-Token", "X-Requested-With"])

    @app.errorhandler(Exception)
    def handle_error(e):
        from werkzeug.exceptions import HTTPException
        if isinstance(e, HTTPException):
            return jsonify(success=False, message=e.description), e.code
        app.logger.exception("Unhandled error")
        return jsonify(success=False, message=str(e)), 500

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"success": False, "message": "Token expired"}), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(err_msg):
        return jsonify({"success": False, "message": f"Invalid token: {err_msg}"}), 422

    @jwt.unauthorized_loader
    def missing_token_callback(err_msg):
        return jsonify({"success": False, "message": f"Missing token: {err_msg}"}), 401

    from .routes.auth_routes import auth_bp
    from .routes.log_routes import logs_bp
    from .routes.report_routes import report_bp
    from .routes.clinic_routes import clinic_bp
    from .routes.roadmap_routes import roadmap_bp
    from .routes.share_routes import share_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(logs_bp)
    app.register_blueprint(report_bp)
    app.register_blueprint(clinic_bp)
    app.register_blueprint(roadmap_bp)
    app.register_blueprint(share_bp)

    return app
