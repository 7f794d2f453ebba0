"""newsreach - a small, strictly one-shot NNTP reader client."""

__version__ = "1.0.0"
