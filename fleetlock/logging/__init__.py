from .logger import KVFormatter, get_logger, log, warn
