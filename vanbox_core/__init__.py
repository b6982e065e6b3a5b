"""
Vanbox core package.

Note lifecycle, notifications, identity and offline shell caching for the
Vanbox note-capture app. The Streamlit views live in ``Welcome.py`` and
``pages/``; everything they touch is imported from here.
"""

__version__ = "0.3.0"
