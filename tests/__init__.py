"""
Test suite for the OOH inventory engine.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_proximity_service.py -v
"""
