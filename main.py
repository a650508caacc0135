"""Entry point for the network ticket printer service."""
import logging

from config.settings import SERVICE
from server.app import create_app

logging.basicConfig(
    level=SERVICE.get("log_level", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()

if __name__ == "__main__":
    app.run(host=SERVICE.get("host", "0.0.0.0"), port=SERVICE.get("port", 3000), debug=SERVICE.get("debug", False))
