"""Development entry point: `python app.py`.

Settings come from APP_ENV (development by default) and `.env`.
"""
from __future__ import annotations

import os

from class_attendance import create_app

app = create_app()


if __name__ == "__main__":
    app.run(host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "5000")))
