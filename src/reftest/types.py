import os
import re
from pathlib import Path
from typing import Annotated

from pydantic import BeforeValidator, Field

PathLike = str | Path | os.PathLike[str]


def ensure_unsigned_int_str(value: object) -> object:
    """Ensures that a string consists of decimal digits with an optional leading plus sign, returning its integer value or raising an error otherwise.

    Non-string values are passed through unchanged and left to the integer validation.
    """
    if not isinstance(value, str):
        return value
    if not re.fullmatch(r"\+?[0-9]+", value):
        raise ValueError("Not an unsigned integer")
    return int(value)


ToleranceByte = Annotated[int, Field(ge=0, le=255), BeforeValidator(ensure_unsigned_int_str)]
