"""
Entry point for python -m powert_core
"""

from powert_core.cli.main import app


if __name__ == "__main__":
    app()
