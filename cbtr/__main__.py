"""Module entrypoint for running cbtr as ``python -m cbtr``."""

from __future__ import annotations

from cbtr.cli import main


if __name__ == "__main__":
    main()
