# models.py

from flask_login import UserMixin
from pymongo import ASCENDING
from werkzeug.security import generate_password_hash, check_password_hash

# Documents are plain dicts in MongoDB; these classes wrap them for
# Flask-Login and give the collections their indexes.

USERS_COLLECTION = 'users'


class User(UserMixin):
    """
    A document from the 'users' collection.
    Inherits from UserMixin for Flask-Login functionality.
    """

    def __init__(self, username, email, password_hash=None, role='STUDENT', _id=None):
        self._id = _id
        self.username = username
        self.email = email
        self.password_hash = password_hash
        self.role = role

    @classmethod
    def from_document(cls, document):
        if document is None:
            return None
        return cls(
            username=document['username'],
            email=document.get('email'),
            password_hash=document.get('password_hash'),
            role=document.get('role', 'STUDENT'),
            _id=document.get('_id'),
        )

    def get_id(self):
        # Flask-Login keeps this string in the session
        return str(self._id) if self._id is not None else None

    def set_password(self, password):
        """Hashes the password and stores the hash."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Checks a plaintext password against the stored hash."""
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'user_id': self.get_id(),
            'username': self.username,
            'email': self.email,
            'role': self.role,
        }

    def __repr__(self):
        return f'<User {self.username} ({self.role})>'


def register_models(database):
    """Creates the indexes the models rely on. Safe to call repeatedly."""
    users = database[USERS_COLLECTION]
    users.create_index([('username', ASCENDING)], unique=True)
    users.create_index([('email', ASCENDING)], unique=True, sparse=True)
