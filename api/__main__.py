"""
Development server: `python -m api`.
Under a WSGI server point it at `api:create_app()` instead.
"""
import os

from . import create_app

app = create_app()  # APP_ENV picks the config class

if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", str(app.config.get("DEBUG", True))).lower() in ("1", "true", "yes")
    app.run(
        host=os.getenv("FLASK_RUN_HOST", "0.0.0.0"),
        port=int(os.getenv("FLASK_RUN_PORT", "8000")),
        debug=debug,
    )
