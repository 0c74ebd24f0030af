"""
Entry point for running the ortweb-e2e CLI as a module.

Usage: python -m ortweb_e2e.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
