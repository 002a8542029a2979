"""
Test suite for sipengine

Contains:
- tests/unit/          : Unit tests for individual modules
"""
