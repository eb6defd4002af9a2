#!/usr/bin/env python3
"""
RIVER RAID Launcher
====================
Run this script to start the game.
"""

from river_raid.main import main

if __name__ == "__main__":
    main()
