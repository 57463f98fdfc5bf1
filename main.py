#!/usr/bin/env python3
"""PaceKeeper entry point.

Run with:
    python main.py
    python -m pacekeeper
"""

from pacekeeper.__main__ import main


if __name__ == "__main__":
    main()
