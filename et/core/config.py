import logging
from pathlib import Path

from et.common.logger import log, get_logger
from et.core import clock


#region === Defaults ===

# Every setting the package understands, with its out-of-the-box value.
_SETTINGS_DEFAULTS = {
    "default_sleep_seconds": clock.BASE_SLEEP_TIME,
    "log_level": "INFO",
    "log_dir": None,
    "console_logging": False,
}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Helper to return a truly fresh copy of the defaults.
def build_default_settings():
    return dict(_SETTINGS_DEFAULTS)

#endregion === Defaults ===

#region === Validation ===

def _valid_sleep(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0

def _valid_level(value):
    return isinstance(value, str) and value.upper() in _LOG_LEVELS

def _valid_log_dir(value):
    return value is None or isinstance(value, (str, Path))

def _valid_bool(value):
    return isinstance(value, bool)

_VALIDATORS = {
    "default_sleep_seconds": _valid_sleep,
    "log_level": _valid_level,
    "log_dir": _valid_log_dir,
    "console_logging": _valid_bool,
}

# Builds a settings dict from the defaults plus whatever overrides were given. Bad values and unknown keys never
# raise: bad values fall back to their default, unknown keys are dropped, and either case is logged as a warning.
def load_settings(overrides=None):
    settings = build_default_settings()
    if not overrides:
        log.debug("No settings overrides given, using defaults.")
        return settings

    defaulted_values = set()
    ignored_keys = set()
    for key, value in overrides.items():
        if key not in _VALIDATORS:
            ignored_keys.add(str(key))
            continue
        if _VALIDATORS[key](value):
            settings[key] = value
        else:
            defaulted_values.add(key)

    settings["log_level"] = settings["log_level"].upper()
    if settings["log_dir"] is not None:
        settings["log_dir"] = Path(settings["log_dir"])

    if defaulted_values:
        log.warning(f"Loaded timer settings, but with invalid values that were defaulted: {', '.join(sorted(defaulted_values))}")
    if ignored_keys:
        log.warning(f"Ignored unknown timer settings: {', '.join(sorted(ignored_keys))}")
    return settings

#endregion === Validation ===

#region === Applying ===

# Pushes a settings dict (as returned by load_settings) into the clock and the package logger.
def apply_settings(settings):
    clock.set_default_sleep(settings["default_sleep_seconds"])
    # Same named logger every module already holds; its previous handlers are replaced, not added to
    get_logger(
        level=getattr(logging, settings["log_level"]),
        log_dir=settings["log_dir"],
        console=settings["console_logging"],
    )
    log.info(f"Applied timer settings: {settings}")
    return settings

# Convenience for load_settings() followed by apply_settings().
def configure(**overrides):
    return apply_settings(load_settings(overrides))

#endregion === Applying ===
