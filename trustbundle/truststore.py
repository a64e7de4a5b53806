"""Binary trust store encoders (JKS and PKCS#12) for a list of certificates."""

from __future__ import annotations

import hashlib
import struct
from datetime import datetime, timezone
from typing import Iterable, List

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.serialization import pkcs12

_JKS_MAGIC = 0xFEEDFEED
_JKS_VERSION = 2
_TRUSTED_CERT_TAG = 2
_JKS_WHITENER = b"Mighty Aphrodite"


def cert_alias(der_data: bytes, friendly_name: str) -> str:
    """Return an alias unique to the certificate, followed by a readable name."""
    return hashlib.sha256(der_data).hexdigest()[:8] + "|" + friendly_name


def _subject(cert: x509.Certificate) -> str:
    return cert.subject.rfc4514_string()


def _not_before(cert: x509.Certificate) -> datetime:
    moment = getattr(cert, "not_valid_before_utc", None)
    if moment is None:
        moment = cert.not_valid_before.replace(tzinfo=timezone.utc)
    return moment


def _utf(text: str) -> bytes:
    encoded = text.encode("utf-8")
    if len(encoded) > 0xFFFF:
        raise ValueError(f"string too long for trust store: {len(encoded)} bytes")
    return struct.pack(">H", len(encoded)) + encoded


class JKSEncoder:
    """Encode certificates as a JKS trust store, with deterministic ordering."""

    def __init__(self, password: str = "") -> None:
        self.password = password

    def encode(self, certificates: Iterable[x509.Certificate]) -> bytes:
        """Return the JKS file holding every certificate as a trusted entry."""
        entries = {}
        for cert in certificates:
            der = cert.public_bytes(serialization.Encoding.DER)
            alias = cert_alias(der, _subject(cert)).lower()
            millis = int(_not_before(cert).timestamp() * 1000)
            entries[alias] = (millis, der)

        body = bytearray(struct.pack(">III", _JKS_MAGIC, _JKS_VERSION, len(entries)))
        for alias in sorted(entries):
            millis, der = entries[alias]
            body += struct.pack(">I", _TRUSTED_CERT_TAG)
            body += _utf(alias)
            body += struct.pack(">q", millis)
            body += _utf("X509")
            body += struct.pack(">I", len(der)) + der

        digest = hashlib.sha1(
            self.password.encode("utf-16-be") + _JKS_WHITENER + bytes(body)
        ).digest()
        return bytes(body) + digest


class PKCS12Encoder:
    """Encode certificates as a PKCS#12 trust store."""

    def __init__(self, password: str = "") -> None:
        self.password = password

    def encode(self, certificates: Iterable[x509.Certificate]) -> bytes:
        """Return the PKCS#12 file holding every certificate with its alias."""
        cas: List[pkcs12.PKCS12Certificate] = []
        for cert in certificates:
            der = cert.public_bytes(serialization.Encoding.DER)
            name = cert_alias(der, _subject(cert)).encode("utf-8")
            cas.append(pkcs12.PKCS12Certificate(cert, name))

        if self.password:
            encryption = (
                serialization.PrivateFormat.PKCS12.encryption_builder()
                .kdf_rounds(2048)
                .key_cert_algorithm(pkcs12.PBES.PBESv1SHA1And3KeyTripleDESCBC)
                .build(self.password.encode("utf-8"))
            )
        else:
            encryption = serialization.NoEncryption()

        return pkcs12.serialize_key_and_certificates(None, None, None, cas or None, encryption)