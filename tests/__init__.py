# polycipher Test Suite
"""
Test suite including:
- Unit tests
- Integration tests
- Security tests (invalid inputs)

Run with: pytest
Coverage: coverage run -m pytest && coverage report
"""
