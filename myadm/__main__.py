"""Entrypoint for `python -m myadm`."""

from .cli import main


if __name__ == "__main__":
    main()
