#!/usr/bin/env python3
"""
Database Seed Script

Populates the database at DATABASE_URL with sample data for development.

USAGE:
    # Everything into one database (simplest local setup)
    python scripts/seed_data.py

    # Only the auth service's data, or only the catalog
    DATABASE_URL=... python scripts/seed_data.py --only auth
    DATABASE_URL=... python scripts/seed_data.py --only catalog

This script:
1. Creates tables if they don't exist
2. Clears existing data (unless --keep)
3. Creates an admin and a regular user (auth)
4. Creates sample books, each with its author and category record (catalog)
"""

import argparse
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from bookstore.database import SessionLocal, create_tables
from bookstore.models import Author, Book, Category, RefreshToken, Role, User
from bookstore.services.security import hash_password

USERS = [
    {"name": "admin", "email": "admin@example.com", "password": "admin-password", "role": Role.ADMIN},
    {"name": "reader", "email": "reader@example.com", "password": "reader-password", "role": Role.USER},
]

BOOKS = [
    {
        "isbn": "9780451524935",
        "title": "1984",
        "price": Decimal("12.99"),
        "author_name": "George Orwell",
        "genre": "Dystopian",
        "pub_date": date(1949, 6, 8),
    },
    {
        "isbn": "9780141439518",
        "title": "Pride and Prejudice",
        "price": Decimal("8.99"),
        "author_name": "Jane Austen",
        "genre": "Romance",
        "pub_date": date(1813, 1, 28),
    },
    {
        "isbn": "9780062693662",
        "title": "Murder on the Orient Express",
        "price": Decimal("14.99"),
        "author_name": "Agatha Christie",
        "genre": "Mystery",
        "pub_date": date(1934, 1, 1),
    },
    {
        "isbn": "9780553293357",
        "title": "Foundation",
        "price": Decimal("15.99"),
        "author_name": "Isaac Asimov",
        "genre": "Science Fiction",
        "pub_date": date(1951, 5, 1),
    },
    {
        "isbn": "9780547928227",
        "title": "The Hobbit",
        "price": Decimal("14.99"),
        "author_name": "J.R.R. Tolkien",
        "genre": "Fantasy",
        "pub_date": date(1937, 9, 21),
    },
]


def clear_auth(db: Session) -> None:
    db.execute(delete(RefreshToken))
    db.execute(delete(User))
    db.commit()


def clear_catalog(db: Session) -> None:
    db.execute(delete(Category))
    db.execute(delete(Author))
    db.execute(delete(Book))
    db.commit()


def create_users(db: Session) -> list[User]:
    """Create one admin and one regular user."""
    print("Creating users...")
    users = [
        User(
            name=data["name"],
            email=data["email"],
            password_hash=hash_password(data["password"]),
            role=data["role"].value,
        )
        for data in USERS
    ]
    db.add_all(users)
    db.commit()

    for data in USERS:
        print(f"  - {data['name']} / {data['password']} ({data['role'].value})")
    return users


def create_catalog(db: Session) -> list[Book]:
    """Create sample books with their author and category records."""
    print("Creating books...")
    books = []
    for data in BOOKS:
        book = Book(**data)
        db.add(book)
        db.add(Author(isbn=data["isbn"], author_name=data["author_name"]))
        db.add(Category(isbn=data["isbn"], genre=data["genre"]))
        books.append(book)
    db.commit()

    print(f"Created {len(books)} books.")
    return books


def seed_database(only: str | None = None, clear_existing: bool = True) -> None:
    """
    Seed the database.

    Args:
        only: "auth" or "catalog" to seed just one part; None for both
        clear_existing: If True, clears existing data before seeding
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    create_tables()
    db = SessionLocal()

    try:
        if only in (None, "auth"):
            if clear_existing:
                clear_auth(db)
            create_users(db)

        if only in (None, "catalog"):
            if clear_existing:
                clear_catalog(db)
            create_catalog(db)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nStart the services with: python -m bookstore <service>")
        print("Gateway documentation at http://localhost:3000/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the bookstore database")
    parser.add_argument("--only", choices=["auth", "catalog"], default=None)
    parser.add_argument("--keep", action="store_true", help="Keep existing data")
    args = parser.parse_args()
    seed_database(only=args.only, clear_existing=not args.keep)
