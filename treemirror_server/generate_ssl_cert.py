"""
TreeMirror Server - Self-Signed Certificate Generation

Creates the cert.pem / key.pem pair the server loads in --ssl mode.
Uses Python's cryptography library, no external OpenSSL binary required.
"""

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Tuple, Union

from cryptography import x509
from cryptography.x509.oid import NameOID
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

logger = logging.getLogger(__name__)

CERT_FILENAME = "cert.pem"
KEY_FILENAME = "key.pem"
VALID_DAYS = 3650


def GetCertificatePaths(cert_dir: Union[str, Path]) -> Tuple[Path, Path]:
    """Get the (certificate, key) file paths inside a certificate directory"""
    cert_dir = Path(cert_dir)
    return cert_dir / CERT_FILENAME, cert_dir / KEY_FILENAME


def GenerateSSLCertificate(cert_dir: Union[str, Path], common_name: str = "localhost",
                           overwrite: bool = False) -> Tuple[Path, Path]:
    """
    Generate a self-signed certificate and RSA key

    Args:
        cert_dir: Directory receiving cert.pem and key.pem
        common_name: Certificate common name, also added as a DNS SAN
        overwrite: Replace an existing pair instead of keeping it

    Returns:
        (cert_path, key_path)
    """
    cert_path, key_path = GetCertificatePaths(cert_dir)

    if cert_path.exists() and key_path.exists() and not overwrite:
        logger.info(f"SSL certificates already exist in {cert_path.parent}, keeping them")
        return cert_path, key_path

    cert_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"Generating self-signed SSL certificate for '{common_name}' ({VALID_DAYS} days)")

    private_key = rsa.generate_private_key(
        public_exponent=65537,
        key_size=2048,
    )

    # Subject and issuer are the same for self-signed
    subject = issuer = x509.Name([
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "TreeMirror"),
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])

    now = datetime.now(timezone.utc)
    alt_names = [x509.DNSName(common_name)]
    if common_name != "localhost":
        alt_names.append(x509.DNSName("localhost"))

    cert = x509.CertificateBuilder().subject_name(
        subject
    ).issuer_name(
        issuer
    ).public_key(
        private_key.public_key()
    ).serial_number(
        x509.random_serial_number()
    ).not_valid_before(
        now
    ).not_valid_after(
        now + timedelta(days=VALID_DAYS)
    ).add_extension(
        x509.SubjectAlternativeName(alt_names),
        critical=False,
    ).sign(private_key, hashes.SHA256())

    with open(key_path, "wb") as f:
        f.write(private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption()
        ))

    with open(cert_path, "wb") as f:
        f.write(cert.public_bytes(serialization.Encoding.PEM))

    logger.info(f"SSL certificate written: {cert_path}")
    logger.info(f"SSL key written: {key_path}")
    return cert_path, key_path
