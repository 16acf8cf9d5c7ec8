#!/usr/bin/env python3
"""Thin wrapper: run showref CLI. Usage: python main.py [options] [pattern...] (same as python -m showref)."""

import sys

if __name__ == "__main__":
    from showref.cli import main
    sys.exit(main())
