"""
Utilities package for the analytics engine.

Common utility functions:
- time_utils: Day normalization, bucketing and window resolution
- constants: Engine constants
- logging_utils: Structured logging and call timing
"""
