"""Module entrypoint.

Allows:
    python -m log_seek_probe -l /var/log/messages -p ERROR
"""

from __future__ import annotations

from log_seek_probe.cli import main

if __name__ == "__main__":
    main()
