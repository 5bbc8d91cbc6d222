"""
Genetic algorithm for closed tours over geographic points, stepped one generation at a time.
"""

__all__ = [
    "cli",
    "data",
    "evolutionary",
    "geo",
    "individual",
    "operators",
    "session",
]
