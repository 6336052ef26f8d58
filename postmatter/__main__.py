"""Entry point for the postmatter CLI.

Running ``python -m postmatter`` calls the main function from the cli module.
"""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
