"""
Services Package

This package contains business logic services that are:
- Separate from HTTP handling (routers)
- Reusable across different parts of the application
- Easier to test in isolation

Current services:
- books.py: Book lookups and the transaction-scoped rating recompute
- users.py: User lookups
- reviews.py: Review persistence and the mutation transaction
- ratings.py: ReviewAggregationService, the entry point for review changes
- results.py: ServiceResult and Outcome returned by every operation
"""
