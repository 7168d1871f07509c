"""Discover e-mail addresses of GitHub users within an organization."""

__version__ = "0.1.0"