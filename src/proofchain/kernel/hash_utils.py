"""Hash utilities with explicit serialization rules for stable fingerprints.

Every fingerprint produced here has the same self-describing format:
``0x`` followed by the 64 lowercase hex characters of a SHA-256 digest.

Key rules for hash bases (the output of JavaScript ``JSON.stringify``):
- Object keys keep insertion order (never sorted), except that array-index
  keys ("0", "1", ...) come first in ascending numeric order. Callers build
  the basis dict in the fixed key order of the wire contract.
- Compact separators, no whitespace
- Non-ASCII characters emitted verbatim (UTF-8 on hashing); lone surrogates
  escaped as ``\\udxxx``
- Numbers in ECMAScript Number::toString form: ``1.0`` -> ``1``,
  ``1e21`` -> ``1e+21``, ``1e-7`` -> ``1e-7``. Integers outside the
  double-precision safe range are rounded to the nearest double first.
- NaN and infinities BANNED (hard validation error)
"""

import hashlib
import json
import math
import re
from pathlib import Path
from typing import Any, BinaryIO, List, Union

FINGERPRINT_PREFIX = "0x"
DEFAULT_CHUNK_SIZE = 64 * 1024

MAX_SAFE_INTEGER = 2 ** 53 - 1
_MAX_ARRAY_INDEX = 2 ** 32 - 2

_ARRAY_INDEX_RE = re.compile(r"0|[1-9][0-9]*")
_SURROGATE_RE = re.compile("[\ud800-\udbff][\udc00-\udfff]|[\ud800-\udfff]")


class CanonicalizationError(ValueError):
    """Raised when an object cannot be serialized into a hash basis."""
    pass


def _format_number(value: float) -> str:
    """Format a finite double the way ECMAScript Number::toString does."""
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    text = repr(abs(value))
    mantissa, _, exponent = text.partition("e")
    whole, _, fraction = mantissa.partition(".")
    digits = whole + fraction
    # value == 0.<digits> * 10**point
    point = len(whole) + (int(exponent) if exponent else 0)
    stripped = digits.lstrip("0")
    point -= len(digits) - len(stripped)
    digits = stripped.rstrip("0")
    k = len(digits)

    if k <= point <= 21:
        return sign + digits + "0" * (point - k)
    if 0 < point <= 21:
        return sign + digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return sign + "0." + "0" * -point + digits
    e = point - 1
    exp = f"e{'+' if e >= 0 else '-'}{abs(e)}"
    if k == 1:
        return sign + digits + exp
    return sign + digits[0] + "." + digits[1:] + exp


def _escape_surrogate(match) -> str:
    pair = match.group()
    if len(pair) == 2:
        high, low = ord(pair[0]), ord(pair[1])
        return chr(0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00))
    return f"\\u{ord(pair):04x}"


def _quote(text: str) -> str:
    return _SURROGATE_RE.sub(_escape_surrogate, json.dumps(text, ensure_ascii=False))


def _is_array_index(key: str) -> bool:
    return len(key) <= 10 and bool(_ARRAY_INDEX_RE.fullmatch(key)) and int(key) <= _MAX_ARRAY_INDEX


def _ordered_keys(obj: dict) -> List[str]:
    indices = sorted((k for k in obj if _is_array_index(k)), key=int)
    return indices + [k for k in obj if not _is_array_index(k)]


def _encode(obj: Any, path: str = "") -> str:
    """Validate and serialize one value. Dict insertion order is preserved."""
    if obj is None:
        return "null"
    elif isinstance(obj, bool):
        return "true" if obj else "false"
    elif isinstance(obj, str):
        return _quote(obj)
    elif isinstance(obj, int):
        if abs(obj) <= MAX_SAFE_INTEGER:
            return str(obj)
        try:
            return _format_number(float(obj))
        except OverflowError:
            raise CanonicalizationError(
                f"Invalid number at {path or '<root>'}: integer out of double range"
            )
    elif isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            raise CanonicalizationError(
                f"Invalid number at {path or '<root>'}: NaN or Inf not allowed"
            )
        return _format_number(obj)
    elif isinstance(obj, dict):
        for key in obj:
            if not isinstance(key, str):
                raise CanonicalizationError(
                    f"Dictionary keys must be strings at {path or '<root>'}, got {type(key).__name__}"
                )
        members = [
            f"{_quote(key)}:{_encode(obj[key], f'{path}.{key}' if path else key)}"
            for key in _ordered_keys(obj)
        ]
        return "{" + ",".join(members) + "}"
    elif isinstance(obj, (list, tuple)):
        items = [
            _encode(item, f"{path}[{i}]" if path else f"[{i}]")
            for i, item in enumerate(obj)
        ]
        return "[" + ",".join(items) + "]"
    else:
        raise CanonicalizationError(
            f"Non-JSON type at {path or '<root>'}: {type(obj).__name__}. "
            f"Only None, bool, int, float, str, dict, and list are allowed."
        )


def ordered_dumps(obj: Any) -> str:
    """Serialize to compact JSON exactly as ``JSON.stringify`` would.

    Args:
        obj: JSON-compatible object

    Returns:
        Compact JSON string

    Raises:
        CanonicalizationError: If obj contains NaN/Inf or non-JSON types
    """
    return _encode(obj)


def _fingerprint(digest) -> str:
    return f"{FINGERPRINT_PREFIX}{digest.hexdigest()}"


def _utf8(text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError:
        # Lone surrogates become U+FFFD, as in Node's Buffer.from(text)
        return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace").encode("utf-8")


def hash_string(text: str) -> str:
    """Compute the fingerprint of a string's UTF-8 bytes."""
    return _fingerprint(hashlib.sha256(_utf8(text)))


def hash_bytes(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Compute the fingerprint of a binary stream, reading it incrementally.

    The stream is consumed to EOF in ``chunk_size`` pieces, so inputs larger
    than memory are fine.

    Args:
        stream: Readable binary file-like object
        chunk_size: Bytes per read

    Returns:
        Fingerprint string (``0x`` + 64 hex chars)

    Raises:
        OSError: If the stream cannot be read
    """
    digest = hashlib.sha256()
    for chunk in iter(lambda: stream.read(chunk_size), b""):
        digest.update(chunk)
    return _fingerprint(digest)


def hash_file(path: Union[str, Path], chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Compute the fingerprint of a file's contents."""
    with open(path, "rb") as f:
        return hash_bytes(f, chunk_size=chunk_size)


def hash_json(obj: Any) -> str:
    """Compute the fingerprint of ``ordered_dumps(obj)``."""
    return hash_string(ordered_dumps(obj))


def is_fingerprint(value: Any) -> bool:
    """Check that a value has the ``0x`` + 64 lowercase hex format."""
    if not isinstance(value, str) or len(value) != 66:
        return False
    if not value.startswith(FINGERPRINT_PREFIX):
        return False
    return all(c in "0123456789abcdef" for c in value[2:])
