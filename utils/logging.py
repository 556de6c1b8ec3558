import logging
from pathlib import Path
from typing import Optional
import sys

from config import config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(name: str, log_file: Optional[Path] = None) -> logging.Logger:
    """Get a logger with console output and optional file output"""
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)  # Set to DEBUG to capture all levels
    
    # Clear existing handlers to avoid duplicates
    if logger.handlers:
        logger.handlers = []
    
    # Console output goes to stderr so stdout stays clean for command output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(config.logging.level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)
    
    # Fall back to LOG_DIR when no explicit file is given
    if log_file is None and config.logging.log_dir:
        log_file = Path(config.logging.log_dir) / f"{name.replace('.', '_')}.log"
    
    if log_file:
        # Create logs directory if it doesn't exist
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)
    
    return logger
