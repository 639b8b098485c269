"""
Bookstore Application Package

An API gateway and the backend services it fronts, in one package.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- main.py: Application factories, one per service
- dependencies.py: Dependency injection (auth pipeline, collaborators)
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers for every service
- services/: Business logic (tokens, permissions, book facade)
"""

__version__ = "0.1.0"
