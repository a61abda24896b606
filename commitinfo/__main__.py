"""Run the resolver as ``python -m commitinfo``."""

from __future__ import annotations

from commitinfo import cli

PROG = "python -m commitinfo"


def main(argv: list[str] | None = None) -> int:
    return cli.main(argv, prog=PROG)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
