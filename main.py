#!/usr/bin/env python3
"""Thin wrapper: run mygit CLI. Usage: python main.py <cmd> ... (same as python -m mygit)."""

import sys

if __name__ == "__main__":
    from mygit.cli import main
    sys.exit(main())
