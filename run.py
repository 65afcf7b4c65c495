#!/usr/bin/env python3
"""Convenience runner for the Stroll exploration demo.

Usage:
    python run.py --sample-history
"""
import sys

from stroll.main import main

if __name__ == "__main__":
    sys.exit(main())
