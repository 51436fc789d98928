# auth.py

from bson import ObjectId
from bson.errors import InvalidId
from flask import Blueprint, current_app, jsonify, request
from flask_login import LoginManager, current_user, login_required, login_user, logout_user

from .database import get_db
from .models import USERS_COLLECTION, User

login_manager = LoginManager()

# Define the Blueprint
bp = Blueprint('auth', __name__)


def setup_auth(app):
    """
    Mounts session-based authentication on the app.

    Flask-Login keeps the user id in the server-side session, so this must run
    after the session interface is installed.
    """
    login_manager.init_app(app)

    # A JSON API has no login page to redirect to
    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"message": "Authentication required."}), 401

    @login_manager.user_loader
    def load_user(user_id):
        try:
            object_id = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        return User.from_document(get_db()[USERS_COLLECTION].find_one({'_id': object_id}))


@bp.route('/login', methods=['POST'])
def login():
    """
    Starts a session for a user identified by username or email.

    Accepts JSON or a url-encoded form with 'username' (or 'email') and
    'password'.

    Response:
        200: User details
        400: Missing credentials
        401: Unknown user or wrong password
    """
    data = request.get_json(silent=True) or request.form
    identifier = data.get('username') or data.get('email')
    password = data.get('password')

    if not identifier or not password:
        return jsonify({"message": "Username and password are required."}), 400

    document = get_db()[USERS_COLLECTION].find_one(
        {'$or': [{'username': identifier}, {'email': identifier}]}
    )
    user = User.from_document(document)

    if user is None or not user.check_password(password):
        current_app.logger.info(f"Failed login attempt for '{identifier}'")
        return jsonify({"message": "Invalid username or password."}), 401

    login_user(user)
    return jsonify({"is_authenticated": True, **user.to_dict()}), 200


@bp.route('/logout', methods=['POST'])
def logout():
    logout_user()
    return jsonify({"is_authenticated": False}), 200


@bp.route('/me', methods=['GET'])
@login_required
def get_current_user():
    """Returns the profile of the user bound to the current session."""
    return jsonify({"is_authenticated": True, **current_user.to_dict()}), 200
