#!/usr/bin/env python
"""CI guard: the migration tree must have exactly one head."""

import sys
from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory


def find_up(name: str, start: Path) -> Path | None:
    p = start.resolve()
    while True:
        cand = p / name
        if cand.exists():
            return cand
        if p.parent == p:
            return None
        p = p.parent


def check(ini: Path) -> list[str]:
    cfg = Config(str(ini))
    # resolve script_location relative to the ini, not the caller's cwd
    cfg.set_main_option("script_location", str(ini.parent / "alembic"))
    return list(ScriptDirectory.from_config(cfg).get_heads())


def main() -> int:
    here = Path(__file__).resolve()
    ini = find_up("alembic.ini", here.parent)
    if not ini:
        print("Error: could not find alembic.ini by walking up from", here)
        return 1

    heads = check(ini)
    if len(heads) != 1:
        print(f"Error: expected 1 Alembic head, found {len(heads)}: {heads}")
        return 1
    print(f"Alembic head OK: {heads[0]}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
