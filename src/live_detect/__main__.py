"""
Entry point for running the live detection system as a module.

Usage:
    python -m live_detect [hours] --keyword car
"""

from .cli import main

if __name__ == "__main__":
    main()
