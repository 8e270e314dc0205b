"""Main entry point for the sync-dot-files CLI tool.

Allows running the tool from a source checkout with ``python main.py``.
"""

from sync_dot_files.cli import main

if __name__ == "__main__":
    main()
