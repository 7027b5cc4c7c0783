"""
annosync - Store Recogito annotations in GitHub issues.

Each annotation lives as a JSON block embedded in the body of one issue;
the issue's open/closed state is the annotation's status.
"""

__version__ = "0.1.0"
