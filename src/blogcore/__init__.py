"""blogcore — validated, transactional persistence for blog posts."""

__version__ = "0.1.0"
