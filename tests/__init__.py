"""
Test Suite for the Bookstore

Test Organization:
- conftest.py: Shared fixtures (test database, service clients, tokens, sample data)
- test_security.py, test_permissions.py, test_tokens.py: token and permission logic
- test_auth.py, test_users.py: auth service endpoints
- test_books.py, test_authors.py, test_categories.py: catalog services
- test_downstream.py, test_book_facade.py: gateway service layer
- test_gateway_*.py: gateway routes with mocked downstream services
- test_end_to_end.py: gateway wired to the real backend services

Running Tests:
    pytest                          # Run all tests
    pytest -v                       # Verbose output
    pytest tests/test_tokens.py     # Run specific file
    pytest -k "refresh"             # Run tests matching pattern
"""
