"""Streamlit presentation layer for the review console."""
