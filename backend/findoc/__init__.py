"""
Financial document extraction service.

Subpackages:
- api: FastAPI routes, dependencies and middleware
- core: settings, database, exception hierarchy
- models: record/provenance models and API schemas
- services: file processing, web scraping, connectors, persistence
- utils: extractors, normalizer, classifier, converters, logging
"""

__version__ = "1.0.0"
