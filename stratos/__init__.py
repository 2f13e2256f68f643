"""Stratos - stacked-block strategy game with an alpha-beta AI."""
