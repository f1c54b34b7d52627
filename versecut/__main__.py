"""Entry point for python -m versecut execution.

This module allows running versecut as a module:
    python -m versecut classify lyrics.txt
    python -m versecut centroids centroids.npy
    python -m versecut --help
"""

from versecut.cli import run

if __name__ == "__main__":
    run()
