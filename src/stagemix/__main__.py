"""Run the StageMix CLI with ``python -m stagemix``."""

import sys

from stagemix import cli

if __name__ == "__main__":
    cli.main()
    sys.exit(0)
