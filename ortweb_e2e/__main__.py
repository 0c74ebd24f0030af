"""
Entry point for running ortweb-e2e as a module.

Usage: python -m ortweb_e2e [command] [options]
"""

from ortweb_e2e.cli.parser import main

if __name__ == "__main__":
    main()
