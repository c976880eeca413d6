"""FastAPI service for the Physical Name Generator.

This package exposes the name conversion engine over HTTP: the form and
TSV conversion endpoint, the JSON generation API and dictionary management.
"""

__version__ = "0.1.0"
