"""create-backend: interactive generator for backend project skeletons."""

__version__ = "2.0.0"
