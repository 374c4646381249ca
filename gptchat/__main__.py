"""Allow running as `python -m gptchat`."""

from .cli import app

if __name__ == "__main__":
    app()
