"""Module entrypoint for ``python -m confex``."""

from __future__ import annotations

from confex.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
