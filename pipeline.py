#!/usr/bin/env python3
"""
pipeline.py - Base64 -> JSON transform pipeline for B64View.

Two pure stages, chained by run_pipeline():

    decode_base64(raw)   strict standard-alphabet Base64 -> UTF-8 text
    format_json(text)    JSON text -> 2-space indented JSON

run_pipeline() never raises. It returns exactly one of:

    Empty()                      blank input, nothing ran
    Success(output)              both stages succeeded
    Failure(kind, message)       first failing stage, or an unexpected error
"""

import base64
import binascii
import json
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

INVALID_ENCODING_MESSAGE = "Invalid Base64 string. Please check your input."
INVALID_JSON_MESSAGE     = "Decoded data is not valid JSON. Please check your input."
UNKNOWN_ERROR_MESSAGE    = "An unknown error occurred."

INDENT = 2

_WHITESPACE = re.compile(r"[\t\n\f\r ]+")
_ALPHABET   = re.compile(r"[A-Za-z0-9+/]*")


# ─── Errors ───────────────────────────────────────────────────────────────────

class ErrorKind(Enum):
    INVALID_ENCODING = "InvalidEncoding"
    INVALID_JSON     = "InvalidJson"
    UNKNOWN          = "Unknown"


class PipelineError(Exception):
    """Base exception for a recognised pipeline stage failure."""

    kind = ErrorKind.UNKNOWN
    user_message = UNKNOWN_ERROR_MESSAGE


class InvalidEncodingError(PipelineError):
    """Raised when the input is not a standard Base64 string."""

    kind = ErrorKind.INVALID_ENCODING
    user_message = INVALID_ENCODING_MESSAGE


class InvalidJsonError(PipelineError):
    """Raised when the decoded text is not a single valid JSON document."""

    kind = ErrorKind.INVALID_JSON
    user_message = INVALID_JSON_MESSAGE


# ─── Result variant ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Empty:
    """Blank input: no output, no error."""


@dataclass(frozen=True)
class Success:
    output: str


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str


Result = Union[Empty, Success, Failure]


# ─── Stages ───────────────────────────────────────────────────────────────────

def decode_base64(raw: str) -> str:
    """
    Decode standard Base64 the way a browser's atob() reads it.

    ASCII whitespace is ignored, trailing '=' padding is optional, and any
    character outside A-Z a-z 0-9 + / is rejected (no URL-safe variant).
    The bytes are read as UTF-8; bytes that are not UTF-8 cannot be JSON
    and raise InvalidJsonError.
    """
    data = _WHITESPACE.sub("", raw)
    if len(data) % 4 == 0:
        if data.endswith("=="):
            data = data[:-2]
        elif data.endswith("="):
            data = data[:-1]
    if len(data) % 4 == 1:
        raise InvalidEncodingError(f"bad length {len(data)} after padding removal")
    if not _ALPHABET.fullmatch(data):
        raise InvalidEncodingError("character outside the Base64 alphabet")

    padded = data + "=" * (-len(data) % 4)
    try:
        raw_bytes = base64.b64decode(padded, validate=True)
    except binascii.Error as exc:
        raise InvalidEncodingError(str(exc)) from exc

    try:
        return raw_bytes.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidJsonError(f"decoded bytes are not UTF-8: {exc}") from exc


def _reject_constant(name: str):
    raise InvalidJsonError(f"non-standard literal {name}")


def _finite_or_none(value: float):
    # out-of-range numbers print as null, like JSON.stringify
    return value if math.isfinite(value) else None


def _parse_float(text: str):
    return _finite_or_none(float(text))


def _parse_int(text: str):
    try:
        return int(text)
    except ValueError:
        # past the interpreter's int string-conversion limit
        return _finite_or_none(float(text))


def format_json(text: str) -> str:
    """Parse one JSON document and re-serialise it with 2-space indentation."""
    try:
        data = json.loads(
            text,
            parse_constant=_reject_constant,
            parse_float=_parse_float,
            parse_int=_parse_int,
        )
    except json.JSONDecodeError as exc:
        raise InvalidJsonError(str(exc)) from exc
    return json.dumps(data, indent=INDENT, ensure_ascii=False, allow_nan=False)


# ─── Pipeline ─────────────────────────────────────────────────────────────────

def run_pipeline(raw: str) -> Result:
    if not raw.strip():
        return Empty()
    try:
        return Success(format_json(decode_base64(raw)))
    except PipelineError as exc:
        return Failure(exc.kind, exc.user_message)
    except Exception as exc:
        return Failure(ErrorKind.UNKNOWN, str(exc) or UNKNOWN_ERROR_MESSAGE)
