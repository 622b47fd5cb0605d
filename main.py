# main.py
"""Development entry point: ``python main.py`` serves the API with reload."""

from pathlib import Path
from subprocess import run

from app.main import app

__all__ = ["app"]

HOST = "127.0.0.1"
PORT = "8000"


def main() -> None:
    uvicorn_path = Path(__file__).resolve().parent / ".venv" / "bin" / "uvicorn"
    command = [
        str(uvicorn_path) if uvicorn_path.exists() else "uvicorn",
        "app.main:app",
        "--host",
        HOST,
        "--port",
        PORT,
        "--reload",
        "--log-level",
        "info",
    ]
    run(command, check=True)


if __name__ == "__main__":
    main()
