"""
Main entry point for the 42-c-format package.

This allows the package to be run as a module:
python -m c_norm_formatter
"""

from .cli.commands import main

if __name__ == '__main__':
    main()
