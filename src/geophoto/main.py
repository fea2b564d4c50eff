import logging

import uvicorn

from geophoto import create_app
from geophoto.core.config import configs
from geophoto.core.logger import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

app = create_app()

if __name__ == "__main__":
    is_dev = configs.ENVIRONMENT != "production"

    run_config = {
        "app": "geophoto.main:app",
        "host": configs.APP_HOST,
        "port": configs.APP_PORT,
        "log_config": None,
    }

    if is_dev:
        run_config["reload"] = True
        run_config["workers"] = 1

    uvicorn.run(**run_config)
