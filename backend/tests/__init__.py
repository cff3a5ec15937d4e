"""
Pytest test suite for the food ordering backend.

Test categories:
- Unit tests: status table, services, auth, rate limiter, poller
- API tests: Full FastAPI app with in-memory SQLite
- Integration tests: API client and poller driven against the app
"""
