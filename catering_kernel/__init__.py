"""
Catering Kernel - shared foundation for the event financial engine.

- Structured JSON logging
- Typed exception hierarchy
- Decimal value helpers
- Rule document and event input types
"""

__version__ = "0.1.0"
