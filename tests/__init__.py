"""
Test suite for vectorlib

Contains:
- tests/unit/          : Unit tests for individual modules
"""
