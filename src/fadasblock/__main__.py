"""Desktop entry point.

Run with: `python -m fadasblock`
"""

from __future__ import annotations

from .run_pygame import main


if __name__ == "__main__":
    main()
