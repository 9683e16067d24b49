"""Run script.

Allows `python -m dumb_pelican_client ...` without the console script.
"""

from __future__ import annotations

from dumb_pelican_client.cli.main import run

if __name__ == "__main__":
    run()
