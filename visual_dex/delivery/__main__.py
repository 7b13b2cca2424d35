"""
Entry point for running Visual DeX as a module.

Usage:
    python -m visual_dex.delivery status
    python -m visual_dex.delivery capture photo.jpg
    python -m visual_dex.delivery --help
"""
from .cli import main

if __name__ == "__main__":
    main()
