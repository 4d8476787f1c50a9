"""
Moodblog - A personal blog service with mood-driven theming.

This package serves blog posts over HTTP and maps a visitor's free-text mood
to one of a fixed palette of visual themes and to a few topic keywords used
to filter and suggest posts.
"""

__version__ = "0.1.0"
