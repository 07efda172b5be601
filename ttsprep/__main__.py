"""Module entrypoint for running ttsprep as ``python -m ttsprep``."""

from __future__ import annotations

from ttsprep.cli import main


if __name__ == "__main__":
    main()
