"""
Entry point for running fancierlog as a Python module.

This module enables the package to be executed directly via:
    python -m fancierlog
"""

from .cli import main

if __name__ == "__main__":
    main()
