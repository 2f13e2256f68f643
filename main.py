#!/usr/bin/env python3
"""
Stratos - stacked-block strategy game, Human vs Human or vs AI.
Run from a source checkout: python main.py [options]
"""

from stratos.app import main

if __name__ == "__main__":
    main()
