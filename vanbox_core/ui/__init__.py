"""Streamlit helpers for the Vanbox pages."""
