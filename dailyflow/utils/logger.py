import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional


def configure_logging(logging_config: Optional[Dict[str, Any]] = None) -> None:
    """Apply the dictConfig produced by FlowConfig.get_logging_config()"""
    if logging_config is None:
        from dailyflow.config import get_config
        logging_config = get_config().get_logging_config()

    # RotatingFileHandler does not create the directory itself
    file_handler = logging_config.get('handlers', {}).get('file')
    if file_handler:
        Path(file_handler['filename']).parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(logging_config)
    logging.getLogger(__name__).debug("Logging configured")
