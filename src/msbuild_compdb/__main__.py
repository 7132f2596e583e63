"""Module entrypoint.

Allows:
    python -m msbuild_compdb
"""

from __future__ import annotations

from msbuild_compdb.server.compdb_server import main

if __name__ == "__main__":
    main()
