from flask import Flask, jsonify, request

from .extensions import db, login_manager, migrate, rq
from .logging_config import setup_logging


def create_app(config_object='config.Config'):
    """App factory; tests pass their own config class."""
    app = Flask(__name__)
    app.config.from_object(config_object)
    setup_logging(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    login_manager.login_view = 'auth.login'
    login_manager.login_message = 'Faça login para acessar a área administrativa.'
    rq.init_app(app)

    from .models.user import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    from .blueprints.main import bp as main_bp
    from .blueprints.auth import bp as auth_bp
    from .blueprints.survey import bp as survey_bp
    from .blueprints.admin import bp as admin_bp
    from .blueprints.api import bp as api_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(survey_bp, url_prefix='/formulario')
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(api_bp, url_prefix='/api')

    @app.errorhandler(404)
    def not_found(e):
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Not found'}), 404
        return e

    @app.errorhandler(500)
    def internal_error(e):
        # Flask has already logged the exception
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Internal server error'}), 500
        return e

    return app
