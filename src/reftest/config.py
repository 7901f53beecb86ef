"""Contains the environment-based configuration of the comparison helpers.
Two environment variables are read:

* `REFTEST_TOLERANCE` - the maximum per-channel difference between an output surface and its
  reference that is still accepted (0-255, defaults to 2). It is read once per process.
* `REFTEST_OUT_DIR` - the directory diagnostic images are written to. If it is not set,
  a subdirectory of the platform's temporary directory is used.
"""

import logging
import os
import tempfile
import threading
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from reftest.types import ToleranceByte

log = logging.getLogger(__name__)

TOLERANCE_ENV_VAR = "REFTEST_TOLERANCE"
OUTPUT_DIR_ENV_VAR = "REFTEST_OUT_DIR"
OUTPUT_SUBDIR_NAME = "reftest-output"

DEFAULT_TOLERANCE = 2

_tolerance_adapter: TypeAdapter[int] = TypeAdapter(ToleranceByte)


class ToleranceConfigError(ValueError):
    pass


class OutputDirectoryError(OSError):
    pass


def _read_tolerance() -> int:
    raw_value = os.environ.get(TOLERANCE_ENV_VAR)
    if raw_value is None:
        return DEFAULT_TOLERANCE

    try:
        value = _tolerance_adapter.validate_python(raw_value)
    except ValidationError as e:
        raise ToleranceConfigError(
            f"{TOLERANCE_ENV_VAR} should be an unsigned integer between 0 and 255, got {raw_value!r}",
        ) from e

    log.info(f"Using tolerance {value} from {TOLERANCE_ENV_VAR}")
    return value


class ToleranceProvider:
    """Holds the tolerance for the lifetime of the process.

    The value is read from the environment on first access only. Concurrent first accesses
    are serialized so that exactly one of them reads the environment.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tolerance: int | None = None

    def get_tolerance(self, reload: bool = False) -> int:
        tolerance = self._tolerance
        if tolerance is not None and not reload:
            return tolerance

        with self._lock:
            if self._tolerance is None or reload:
                self._tolerance = None
                self._tolerance = _read_tolerance()
                log.debug(f"Resolved tolerable difference: {self._tolerance}")
            return self._tolerance


_tolerance_provider = ToleranceProvider()


def tolerable_difference(reload: bool = False) -> int:
    """:param reload: if True, the tolerance will be read from the environment again
    :return: the maximum per-channel difference for which a comparison still passes
    """
    return _tolerance_provider.get_tolerance(reload=reload)


def output_dir() -> Path:
    """Creates a directory for test output and returns its path.

    The location is taken from the `REFTEST_OUT_DIR` environment variable if that is set;
    an empty value counts as unset.
    Otherwise, a subdirectory of the platform dependent location for temporary files is used.
    The directory is resolved anew on every call.
    """
    env_value = os.environ.get(OUTPUT_DIR_ENV_VAR)
    if env_value:
        path = Path(env_value)
    else:
        path = Path(tempfile.gettempdir()) / OUTPUT_SUBDIR_NAME

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputDirectoryError(f"Could not create output directory for tests: {path}") from e

    log.debug(f"Using output directory {path}")
    return path
