from .loader import LockSettings, check_int, load_settings, validate_settings
