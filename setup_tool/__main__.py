#!/usr/bin/env python3
"""
Entry point for the setup tool CLI.

Run with: python -m setup_tool --help
"""

from .cli import cli

if __name__ == '__main__':
    cli()
