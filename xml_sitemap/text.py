"""
1.0 Text Helpers
Filename normalization used before ignore/replacement matching.

Filesystem names come back from os.listdir() as str, with any bytes that are
not valid in the filesystem encoding smuggled through as lone surrogates
(PEP 383). Config values are plain UTF-8 text, so names are normalized to the
same form before they are compared.
"""

import os
from typing import Union


def normalize_name(value: Union[str, bytes]) -> str:
    """
    1.1 Best-effort conversion of a filesystem name to clean UTF-8 text.

    - Valid UTF-8 passes through unchanged.
    - Otherwise the raw bytes are read as Latin-1 (a legacy single-byte
      encoding), which maps every byte to a character.
    - Anything that still cannot be represented is dropped, never raised.
    """
    if isinstance(value, str):
        try:
            raw = os.fsencode(value)
        except UnicodeError:
            return value.encode("utf-8", "ignore").decode("utf-8", "ignore")
    else:
        raw = value

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass

    text = raw.decode("latin-1")
    return text.encode("utf-8", "ignore").decode("utf-8", "ignore")
