"""
Test Suite for Books Reviews API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_book_store.py: Rating recompute and repair
- test_review_store.py: Review persistence and the mutation transaction
- test_review_service.py: Business rules and ServiceResult outcomes
- test_reviews.py: /api/v1 review and book endpoints
- test_concurrency.py: Concurrent review writes against a shared database

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_review_service.py

    # Run with verbose output
    pytest -v
"""
