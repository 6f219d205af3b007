"""Create the self-signed certificate used by the TLS listener."""

import subprocess
import sys
from pathlib import Path

CERT_SUBJECT = "/C=US/ST=State/L=City/O=Autocomplete/OU=Dictionary/CN=localhost"
KEY_BITS = 2048
VALID_DAYS = 365


def _remove_partial_files(*paths: Path) -> None:
    """Delete whatever a failed OpenSSL run left behind."""
    for path in paths:
        path.unlink(missing_ok=True)


def generate_certificate_and_key(
    gen_path: Path,
    cert_name: str = "cert.pem",
    key_name: str = "key.pem",
) -> bool:
    """Generate a self-signed SSL certificate and key using OpenSSL.

    Nothing is generated when both files already exist.

    Args:
        gen_path (Path): The directory where the certificate and key
            files will be created.
        cert_name (str, optional): The name of the certificate file.
            Defaults to "cert.pem".
        key_name (str, optional): The name of the key file.
            Defaults to "key.pem".

    Returns:
        bool: True if the certificate and key are available afterwards.

    """
    cert_path = gen_path / cert_name
    key_path = gen_path / key_name

    if cert_path.exists() and key_path.exists():
        print(
            f"[SSL_UTILS] SSL cert and key already exist: "
            f"{cert_path}, {key_path}",
        )
        return True

    print(
        f"[SSL_UTILS] Generating self-signed SSL certificate and key in "
        f"{gen_path}...",
    )
    commands = [
        ["openssl", "genrsa", "-out", str(key_path), str(KEY_BITS)],
        [
            "openssl",
            "req",
            "-new",
            "-x509",
            "-key",
            str(key_path),
            "-out",
            str(cert_path),
            "-days",
            str(VALID_DAYS),
            "-nodes",
            "-subj",
            CERT_SUBJECT,
        ],
    ]
    try:
        gen_path.mkdir(parents=True, exist_ok=True)
        for command in commands:
            subprocess.run(command, check=True, capture_output=True, text=True)

    except FileNotFoundError:
        print(
            "[SSL_UTILS ERROR] OpenSSL not found. Please install OpenSSL.",
            file=sys.stderr,
        )
        _remove_partial_files(cert_path, key_path)
        return False

    except subprocess.CalledProcessError as e:
        print(
            f"[SSL_UTILS ERROR] OpenSSL command failed: {e}",
            file=sys.stderr,
        )
        print(f"Stderr: {e.stderr}", file=sys.stderr)
        _remove_partial_files(cert_path, key_path)
        return False

    print(f"[SSL_UTILS] Successfully generated {cert_path} and {key_path}")
    return True
