"""Allow running as ``python -m sitescout``."""

from sitescout.cli import app

if __name__ == "__main__":
    app()
