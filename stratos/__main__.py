"""Run the game with ``python -m stratos``."""

from stratos.app import main

main()
