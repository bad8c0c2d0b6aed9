# This project was developed with assistance from AI tools.
"""Request/response schemas for the HTTP layer."""
