__version__ = "0.1.0"

from mlcc.config.system import EngineSettings
from mlcc.logger import init_logger

# Initialize settings and logger
settings = EngineSettings.from_env()
logger = init_logger(settings)
