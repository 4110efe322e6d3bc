"""
Flask Main Application
Room chat API: rooms, invite codes and messages over MongoDB
"""

from flask import Flask, request, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from pymongo.database import Database
from werkzeug.exceptions import HTTPException
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging
import time

from .core.config import settings
from .database import connect_to_mongo, check_database_health, db_manager
from .core.exceptions import CustomHTTPException

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.DEBUG else logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Erreur interne du serveur"

HTTP_ERROR_MESSAGES = {
    400: "Requête invalide",
    404: "Route non trouvée",
    405: "Méthode non autorisée",
    413: "Requête trop volumineuse",
    415: "Type de contenu non supporté",
    429: "Trop de requêtes",
}

def create_app(config: Optional[Dict[str, Any]] = None, database: Optional[Database] = None):
    """Create and configure Flask application"""
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = settings.SECRET_KEY
    app.config['JWT_SECRET_KEY'] = settings.SECRET_KEY
    app.config['JWT_ALGORITHM'] = settings.JWT_ALGORITHM
    app.config['JWT_ACCESS_TOKEN_EXPIRES'] = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    app.config['JWT_TOKEN_LOCATION'] = ['headers']
    app.config['JWT_HEADER_NAME'] = 'Authorization'
    app.config['JWT_HEADER_TYPE'] = 'Bearer'
    app.config['JWT_ERROR_MESSAGE_KEY'] = 'message'
    if config:
        app.config.update(config)
    app.json.ensure_ascii = False

    # Initialize extensions
    jwt = JWTManager(app)
    CORS(app, origins=settings.ALLOWED_ORIGINS, supports_credentials=True)

    if database is not None:
        db_manager.use_database(database)

    # JWT Error Handlers
    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({
            "message": "Le jeton a expiré, veuillez vous reconnecter"
        }), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return jsonify({
            "message": "Le jeton est invalide ou mal formé"
        }), 422

    @jwt.unauthorized_loader
    def missing_token_callback(error):
        return jsonify({
            "message": "Authentification requise"
        }), 401

    # Startup initialization (Flask 3 compatible)
    app.config.setdefault('APP_INITIALIZED', False)

    @app.before_request
    def ensure_initialized():
        """Connect to MongoDB on the first incoming request"""
        if app.config.get('APP_INITIALIZED'):
            return
        startup_time = time.time()
        if connect_to_mongo():
            app.config['APP_INITIALIZED'] = True
            logger.info(f"✅ Initialization completed in {time.time() - startup_time:.2f}s")
        else:
            logger.error("❌ MongoDB unavailable, request will fail")

    # Global exception handlers
    @app.errorhandler(CustomHTTPException)
    def handle_custom_exception(error):
        if error.status_code >= 500:
            logger.error(f"CustomHTTPException: {error.detail} (Status: {error.status_code})")
        else:
            logger.info(f"{request.method} {request.path} -> {error.status_code}: {error.detail}")
        return jsonify(error.to_response_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        message = HTTP_ERROR_MESSAGES.get(error.code, INTERNAL_ERROR if error.code >= 500 else "Requête refusée")
        return jsonify({"message": message}), error.code

    @app.errorhandler(Exception)
    def handle_general_exception(error):
        logger.exception(f"Unhandled exception: {type(error).__name__}: {error}")
        return jsonify({"message": INTERNAL_ERROR}), 500

    # Health check endpoint
    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint"""
        db_status = check_database_health()
        healthy = db_status.get("status") == "healthy"
        return jsonify({
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": db_status
        }), 200 if healthy else 503

    @app.route('/', methods=['GET'])
    def root():
        """Root endpoint"""
        return jsonify({
            "message": f"Bienvenue sur {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "endpoints": {
                "health": "/health",
                "rooms": "/api/rooms",
                "messages": "/api/messages"
            }
        })

    # Register blueprints (routes)
    from .routers.flask_rooms import rooms_bp
    from .routers.flask_messages import messages_bp

    app.register_blueprint(rooms_bp, url_prefix='/api/rooms')
    app.register_blueprint(messages_bp, url_prefix='/api/messages')
    logger.debug("Room and message blueprints registered")

    return app

if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=settings.PORT, debug=settings.DEBUG)
