"""
Core domain models, date arithmetic and numerical primitives.

This module contains the foundational building blocks of vectorlib that are
independent of the expression engine.
"""
