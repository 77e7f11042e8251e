#!/usr/bin/env python3
"""
schemasync - Schema Synchronization Engine

Run from a source checkout: ``python main.py sync project.json``.
The installed console script is ``schemasync``.
"""

from schemasync.cli import main


if __name__ == "__main__":
    main()
