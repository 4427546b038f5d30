"""crashsink - Entry Point.

Usage:
    python main.py tags
    python main.py ping --dsn https://key@o0.ingest.sentry.io/1
"""

from crashsink.cli import app

if __name__ == "__main__":
    app()
