"""School chat backend: users, classes and chat rooms."""

__version__ = "1.0.0"
