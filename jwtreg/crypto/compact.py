"""Compact serialization: segment splitting and base64url decoding."""

import binascii
import re
from typing import NamedTuple

from jwt.utils import base64url_decode
from pydantic import ValidationError

from jwtreg.crypto.errors import MalformedTokenError
from jwtreg.crypto.types import Claims, TokenHeader

_SEGMENT = re.compile(rb"[A-Za-z0-9_-]*")


class CompactToken(NamedTuple):
    """Decoded segments of a compact token."""

    header: TokenHeader
    # Exact bytes covered by the signature: header segment, dot, payload segment.
    content: bytes
    payload: bytes
    signature: bytes


def _decode_segment(segment: bytes, name: str) -> bytes:
    if _SEGMENT.fullmatch(segment) is None:
        raise MalformedTokenError(f"{name} segment is not base64url")
    try:
        return base64url_decode(segment)
    except (binascii.Error, ValueError) as exc:
        raise MalformedTokenError(f"{name} segment is not base64url") from exc


def parse_header(raw: bytes) -> TokenHeader:
    """Parse the JOSE header JSON."""
    try:
        header = TokenHeader.model_validate_json(raw)
    except ValidationError as exc:
        raise MalformedTokenError("invalid header JSON") from exc
    if header.crit:
        raise MalformedTokenError(
            f"unsupported critical header extensions {header.crit!r}"
        )
    return header


def parse_claims(raw: bytes) -> Claims:
    """Parse the payload JSON into a claims set."""
    try:
        return Claims.model_validate_json(raw)
    except ValidationError as exc:
        raise MalformedTokenError("invalid claims JSON") from exc


def split(token: bytes | str) -> CompactToken:
    """Split ``token`` into its segments and decode them.

    The payload is decoded from base64url only; interpreting it as claims
    happens after the signature checks out.
    """
    if isinstance(token, str):
        token = token.encode()
    parts = token.split(b".")
    if len(parts) != 3:
        raise MalformedTokenError(f"expected 3 segments, got {len(parts)}")
    header_seg, payload_seg, sig_seg = parts

    header = parse_header(_decode_segment(header_seg, "header"))
    payload = _decode_segment(payload_seg, "payload")
    signature = _decode_segment(sig_seg, "signature")
    return CompactToken(
        header=header,
        content=header_seg + b"." + payload_seg,
        payload=payload,
        signature=signature,
    )
