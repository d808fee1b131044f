"""
story_service package

This package contains the backend for the story platform.
It includes:

- FastAPI application and routers (`main.py`, `routes/`)
- SQLAlchemy models, database integration and record stores (`models.py`, `db.py`, `store.py`)
- Password hashing and session tokens (`passwords.py`, `tokens.py`)
- Registration/login and profile services (`auth.py`, `users.py`)
- Pydantic schemas and settings (`schemas.py`, `config.py`)

Used as the entry point for the story platform API.
"""
