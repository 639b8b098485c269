"""
Services Package

Business logic kept apart from HTTP handling (routers).

Current services:
- book_facade.py: Composite create/read/list/delete across book, author
  and category services
- credentials.py: User and refresh-token persistence
- downstream.py: httpx client for backend services and its error variants
- errors.py: Service-level exceptions carrying HTTP statuses
- permissions.py: Role to permission-key resolution
- security.py: Password hashing and JWT signing
- session.py: Auth cookies and cookie session refresh
- tokens.py: Signup, login and the refresh-token lifecycle
"""
