# This project was developed with assistance from AI tools.
"""Domain services. Each module takes a ``RecordStore`` explicitly."""
