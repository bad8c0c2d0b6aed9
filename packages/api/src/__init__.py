# This project was developed with assistance from AI tools.
"""Loan portal API: team access, officer assignment and invite activation."""

__version__ = "0.1.0"
