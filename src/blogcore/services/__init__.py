"""Service layer — post use cases returning result statuses.

Services may import from domain and infrastructure layers.
Presentation code (web handlers, templates) lives outside this package.
"""
