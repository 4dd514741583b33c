"""Places proxy launcher.

Equivalent to ``python -m app.cli``; accepts the same ``--env`` flag.
"""

from __future__ import annotations

from app.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
