"""
Flask extensions initialization.
"""
import uuid

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

# Database
db = SQLAlchemy()

# Migrations
migrate = Migrate()


def generate_id() -> str:
    """Primary key generator shared by all models (32-char hex)."""
    return uuid.uuid4().hex
