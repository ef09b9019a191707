#!/usr/bin/env python3
"""
RayForge - A Python Path Tracer

Main entry point for rendering scenes.
"""

import sys

from rayforge.cli import main


if __name__ == '__main__':
    sys.exit(main())
