"""
Main entry point for the jobmatch package.

Usage:
    python -m jobmatch [command] [options]

See 'python -m jobmatch --help' for available commands.
"""

from jobmatch.cli import main

if __name__ == "__main__":
    main()
