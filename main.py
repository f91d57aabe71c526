#!/usr/bin/env python3
"""
Entry point for running jobquarry as a script; same as the ``jobquarry`` command.
"""

from __future__ import annotations

from jobquarry.cli import main

if __name__ == "__main__":
    main()
