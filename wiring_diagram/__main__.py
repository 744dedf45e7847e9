#!/usr/bin/env python3
"""
Wiring-route CLI - Entry point for the wiring diagram router.

This module allows running the router as:
    python -m wiring_diagram layout.json
    wiring-route layout.json  (when installed via pip)
"""

from wiring_diagram.cli import main

if __name__ == "__main__":
    main()
