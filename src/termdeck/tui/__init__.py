"""Textual front end for termdeck."""
