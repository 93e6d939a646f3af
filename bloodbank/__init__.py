import logging

from flask import Flask
from werkzeug.exceptions import HTTPException

from bloodbank.config import Config
from bloodbank.extensions import bcrypt, cors, db, jwt, migrate
from bloodbank.errors import error_response

# Import models so Flask-Migrate sees every table
from bloodbank import models  # noqa: F401
from bloodbank import security  # noqa: F401  registers the JWT callbacks
from bloodbank.commands import register_commands

# Import controllers (blueprints) for each module
from bloodbank.controllers.public_controller import public_bp
from bloodbank.controllers.admin_controller import admin_bp
from bloodbank.controllers.donor_controller import donor_bp
from bloodbank.controllers.recipient_controller import recipient_bp
from bloodbank.controllers.donation_controller import donation_bp
from bloodbank.controllers.blood_request_controller import blood_request_bp


def create_app(config_object=Config):
    """Flask application factory"""
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    bcrypt.init_app(app)
    jwt.init_app(app)
    cors.init_app(app, resources={r'/*': {'origins': app.config['CORS_ORIGINS']}})

    # Public routes live at the root, everything an admin does under /admin
    app.register_blueprint(public_bp)
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(donor_bp, url_prefix='/admin')
    app.register_blueprint(recipient_bp, url_prefix='/admin')
    app.register_blueprint(donation_bp, url_prefix='/admin')
    app.register_blueprint(blood_request_bp, url_prefix='/admin')

    register_commands(app)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return error_response(e)

    return app
