"""
WSGI entry point and Flask-Migrate / Alembic CLI target.

Usage:
    flask --app wsgi db init       # first time only (creates migrations/)
    flask --app wsgi db migrate -m "description"
    flask --app wsgi db upgrade
    flask --app wsgi seed-reference-data
"""

from complaint_registry import create_app

app = create_app()
