"""Module entrypoint for ``python -m treesync``."""

from .cli import main


if __name__ == "__main__":
    main()
