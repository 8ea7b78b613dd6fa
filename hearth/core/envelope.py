from __future__ import annotations

import re
from dataclasses import dataclass

from hearth.core.crypto import NONCE_SIZE, SALT_SIZE, TAG_SIZE
from hearth.core.errors import EnvelopeFormatError


SEPARATOR = ":"

# bytes.fromhex() skips whitespace; envelopes must not.
_HEX_RE = re.compile(r"[0-9a-fA-F]+")

_FIELDS = ("salt", "nonce", "auth_tag", "ciphertext")
_FIXED_SIZES = {"salt": SALT_SIZE, "nonce": NONCE_SIZE, "auth_tag": TAG_SIZE}


@dataclass(frozen=True)
class Envelope:
    salt: bytes
    nonce: bytes
    auth_tag: bytes
    ciphertext: bytes

    def encode(self) -> str:
        return encode_envelope(self.salt, self.nonce, self.auth_tag, self.ciphertext)


def encode_envelope(salt: bytes, nonce: bytes, auth_tag: bytes, ciphertext: bytes) -> str:
    return SEPARATOR.join(b.hex() for b in (salt, nonce, auth_tag, ciphertext))


def decode_envelope(text: str) -> Envelope:
    """
    Strict parse of `<salt>:<nonce>:<tag>:<ciphertext>`.

    Exactly four non-empty, even-length hex fields; salt/nonce/tag must also have
    their fixed sizes. Nothing is partially decoded.
    """
    if not isinstance(text, str):
        raise EnvelopeFormatError("Envelope must be a string.")
    parts = text.split(SEPARATOR)
    if len(parts) != len(_FIELDS):
        raise EnvelopeFormatError(f"Envelope must have {len(_FIELDS)} fields.", field_count=len(parts))

    decoded = {}
    for name, part in zip(_FIELDS, parts):
        if not part:
            raise EnvelopeFormatError("Envelope field is empty.", field=name)
        if len(part) % 2:
            raise EnvelopeFormatError("Envelope field has odd-length hex.", field=name)
        if not _HEX_RE.fullmatch(part):
            raise EnvelopeFormatError("Envelope field is not valid hex.", field=name)
        raw = bytes.fromhex(part)
        size = _FIXED_SIZES.get(name)
        if size is not None and len(raw) != size:
            raise EnvelopeFormatError("Envelope field has the wrong size.", field=name, expected=size, actual=len(raw))
        decoded[name] = raw
    return Envelope(**decoded)
