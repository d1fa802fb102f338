# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module builds the X509 certificates used as attestation material by the provisioning
tests: self-signed device certificates, intermediate CA certificates issued from a root, and
device certificates carrying their chain of intermediates.

Every certificate is created in memory, returned as a new :class:`CertificateRecord`, and never
written to disk by this module.
"""

import collections
import datetime
import logging
import uuid
from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID
from ..exceptions import (
    InvalidArgumentError,
    InvalidParentError,
    KeyGenerationFailedError,
    SigningFailedError,
)

logger = logging.getLogger(__name__)

PUBLIC_EXPONENT = 65537
DEFAULT_KEY_SIZE = 2048
DEFAULT_VALIDITY_DAYS = 365
# Certificates are backdated to tolerate clock skew between the test host and the service
CLOCK_SKEW_ALLOWANCE = datetime.timedelta(hours=1)

INTERMEDIATE_1_COMMON_NAME = "Intermediate CA 1"
INTERMEDIATE_2_COMMON_NAME = "Intermediate CA 2"


class CertificateRecord(object):
    """
    An immutable pairing of a PEM encoded certificate (or certificate chain) with the PEM
    encoded private key of its first certificate.
    """

    __slots__ = ("_certificate_pem", "_private_key_pem")

    def __init__(self, certificate_pem, private_key_pem):
        """
        :param str certificate_pem: The PEM encoded certificate. For a device certificate with a
         chain, this is the leaf followed by its intermediates.
        :param str private_key_pem: The PEM encoded (unencrypted) private key of the first
         certificate.
        """
        self._certificate_pem = certificate_pem
        self._private_key_pem = private_key_pem

    @property
    def certificate_pem(self):
        return self._certificate_pem

    @property
    def private_key_pem(self):
        return self._private_key_pem

    @property
    def subject(self):
        """The RFC 4514 subject of the first certificate"""
        return self.load_certificates()[0].subject.rfc4514_string()

    @property
    def issuer(self):
        """The RFC 4514 issuer of the first certificate"""
        return self.load_certificates()[0].issuer.rfc4514_string()

    @property
    def is_ca(self):
        return _is_ca(self.load_certificates()[0])

    def load_certificates(self):
        """Parse every certificate in the PEM bundle, in the order they appear

        :rtype: list of :class:`x509.Certificate`
        """
        return x509.load_pem_x509_certificates(self._certificate_pem.encode("utf-8"))

    def __eq__(self, other):
        if not isinstance(other, CertificateRecord):
            return NotImplemented
        return (self._certificate_pem, self._private_key_pem) == (
            other._certificate_pem,
            other._private_key_pem,
        )

    def __hash__(self):
        return hash((self._certificate_pem, self._private_key_pem))


CertificateFixtures = collections.namedtuple(
    "CertificateFixtures",
    ["self_signed", "without_chain", "intermediate1", "intermediate2", "with_chain"],
)


def create_self_signed_certificate(
    subject_name, key_size=DEFAULT_KEY_SIZE, days=DEFAULT_VALIDITY_DAYS
):
    """
    Create a self-signed device (non-CA) certificate with a freshly generated key.

    :param str subject_name: The common name of the certificate. For device certificates this
     must be the registration id.
    :param int key_size: The RSA key size to use. The default is 2048.
    :param int days: The number of days for which the certificate is valid.

    :returns: The new certificate, whose issuer is its own subject.
    :rtype: :class:`CertificateRecord`
    """
    subject = _create_name(subject_name)
    private_key = _create_private_key(key_size)
    builder = _create_cert_builder(
        subject=subject,
        issuer_name=subject,
        public_key=private_key.public_key(),
        days=days,
        is_ca=False,
    )
    cert = _sign(builder, private_key)
    logger.debug("Created self-signed certificate for {}".format(subject_name))
    return _to_record(cert, private_key)


def create_intermediate_ca_certificate(
    subject_name, parent, key_size=DEFAULT_KEY_SIZE, days=DEFAULT_VALIDITY_DAYS
):
    """
    Create a CA certificate issued by the parent. Without a parent, the CA certificate is
    self-signed, which is how root and enrollment group signing certificates are created.

    :param str subject_name: The common name of the certificate.
    :param parent: The certificate authority issuing this certificate, or None.
    :type parent: :class:`CertificateRecord`
    :param int key_size: The RSA key size to use. The default is 2048.
    :param int days: The number of days for which the certificate is valid.

    :returns: The new CA certificate.
    :rtype: :class:`CertificateRecord`
    :raises: InvalidParentError if the parent is not able to sign certificates
    """
    subject = _create_name(subject_name)
    if parent is None:
        private_key = _create_private_key(key_size)
        issuer_name, issuer_key = subject, private_key
    else:
        issuer_cert, issuer_key = _load_signing_identity(parent)
        private_key = _create_private_key(key_size)
        issuer_name = issuer_cert.subject
    builder = _create_cert_builder(
        subject=subject,
        issuer_name=issuer_name,
        public_key=private_key.public_key(),
        days=days,
        is_ca=True,
    )
    cert = _sign(builder, issuer_key)
    logger.debug("Created CA certificate for {}".format(subject_name))
    return _to_record(cert, private_key)


def create_leaf_certificate(
    subject_name, parent, key_size=DEFAULT_KEY_SIZE, days=DEFAULT_VALIDITY_DAYS
):
    """
    Create a device (non-CA) certificate issued by the parent.

    :param str subject_name: The common name of the certificate. For device certificates this
     must be the registration id.
    :param parent: The certificate authority issuing this certificate.
    :type parent: :class:`CertificateRecord`
    :param int key_size: The RSA key size to use. The default is 2048.
    :param int days: The number of days for which the certificate is valid.

    :returns: The new device certificate, without any chain.
    :rtype: :class:`CertificateRecord`
    :raises: InvalidParentError if the parent is absent or is not able to sign certificates
    """
    subject = _create_name(subject_name)
    issuer_cert, issuer_key = _load_signing_identity(parent)
    private_key = _create_private_key(key_size)
    builder = _create_cert_builder(
        subject=subject,
        issuer_name=issuer_cert.subject,
        public_key=private_key.public_key(),
        days=days,
        is_ca=False,
    )
    cert = _sign(builder, issuer_key)
    logger.debug(
        "Created device certificate for {} issued by {}".format(
            subject_name, issuer_cert.subject.rfc4514_string()
        )
    )
    return _to_record(cert, private_key)


def build_certificate_chain(leaf, intermediates):
    """
    Assemble the chain a device presents at registration time: the leaf certificate followed by
    each of its intermediates, nearest issuer first. The root is never part of the chain.

    :param leaf: The device certificate.
    :type leaf: :class:`CertificateRecord`
    :param intermediates: The intermediate CA certificates, ordered nearest issuer first.
    :type intermediates: list of :class:`CertificateRecord`

    :returns: The PEM encoded chain
    :rtype: str
    """
    if leaf is None:
        raise InvalidArgumentError("A leaf certificate is required to build a chain")
    return "\n".join([leaf.certificate_pem] + [cert.certificate_pem for cert in intermediates])


def create_leaf_certificate_with_chain(
    subject_name, intermediates, key_size=DEFAULT_KEY_SIZE, days=DEFAULT_VALIDITY_DAYS
):
    """
    Create a device certificate issued by the nearest intermediate, bundled with its chain.

    :param str subject_name: The common name of the device certificate.
    :param intermediates: The intermediate CA certificates, ordered nearest issuer first.
    :type intermediates: list of :class:`CertificateRecord`

    :returns: A record whose certificate is the full chain and whose key is the device key.
    :rtype: :class:`CertificateRecord`
    """
    if not intermediates:
        raise InvalidArgumentError("At least one intermediate certificate is required")
    leaf = create_leaf_certificate(subject_name, intermediates[0], key_size=key_size, days=days)
    return CertificateRecord(
        certificate_pem=build_certificate_chain(leaf, intermediates),
        private_key_pem=leaf.private_key_pem,
    )


def create_all_certificates(registration_id, root, key_size=DEFAULT_KEY_SIZE):
    """
    Create every certificate used by the X509 provisioning scenarios, in dependency order.
    Any failure aborts the whole sequence and is raised unchanged.

    :param str registration_id: The registration id used as the device certificates' subject.
    :param root: The externally provided root CA.
    :type root: :class:`CertificateRecord`

    :rtype: :class:`CertificateFixtures`
    """
    logger.debug("creating self-signed cert")
    self_signed = create_self_signed_certificate(registration_id, key_size=key_size)
    logger.debug("creating cert without chain")
    without_chain = create_leaf_certificate(registration_id, root, key_size=key_size)
    logger.debug("creating intermediate CA cert #1")
    intermediate1 = create_intermediate_ca_certificate(
        INTERMEDIATE_1_COMMON_NAME, root, key_size=key_size
    )
    logger.debug("creating intermediate CA cert #2")
    intermediate2 = create_intermediate_ca_certificate(
        INTERMEDIATE_2_COMMON_NAME, intermediate1, key_size=key_size
    )
    logger.debug("creating cert with chain")
    with_chain = create_leaf_certificate_with_chain(
        registration_id, [intermediate2, intermediate1], key_size=key_size
    )
    return CertificateFixtures(
        self_signed=self_signed,
        without_chain=without_chain,
        intermediate1=intermediate1,
        intermediate2=intermediate2,
        with_chain=with_chain,
    )


def _create_name(common_name):
    if not common_name:
        raise InvalidArgumentError("Subject name must not be empty")
    try:
        return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    except (ValueError, TypeError) as e:
        raise InvalidArgumentError("Invalid subject name: {}".format(common_name)) from e


def _create_private_key(key_size):
    try:
        return rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=key_size)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise KeyGenerationFailedError(
            "Unable to generate a {} bit RSA key".format(key_size)
        ) from e


def _create_cert_builder(subject, issuer_name, public_key, days, is_ca):
    now = datetime.datetime.now(datetime.timezone.utc)
    builder = x509.CertificateBuilder()

    builder = builder.subject_name(subject)
    builder = builder.issuer_name(issuer_name)
    builder = builder.public_key(public_key)
    builder = builder.not_valid_before(now - CLOCK_SKEW_ALLOWANCE)
    builder = builder.not_valid_after(now + datetime.timedelta(days=days))
    builder = builder.serial_number(int(uuid.uuid4()))
    builder = builder.add_extension(
        x509.BasicConstraints(ca=is_ca, path_length=None), critical=True
    )
    return builder


def _sign(builder, issuer_key):
    try:
        return builder.sign(private_key=issuer_key, algorithm=hashes.SHA256())
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise SigningFailedError("Unable to sign certificate") from e


def _load_signing_identity(parent):
    """Return the certificate and private key of an issuer, validating that it can sign"""
    if parent is None:
        raise InvalidParentError("An issuing certificate authority is required")

    try:
        issuer_cert = parent.load_certificates()[0]
        issuer_key = serialization.load_pem_private_key(
            parent.private_key_pem.encode("utf-8"), password=None
        )
    except (AttributeError, IndexError, ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise InvalidParentError("Unable to load the issuing certificate or its key") from e

    if not _is_ca(issuer_cert):
        raise InvalidParentError(
            "{} is not a certificate authority".format(issuer_cert.subject.rfc4514_string())
        )
    if _public_key_bytes(issuer_cert.public_key()) != _public_key_bytes(issuer_key.public_key()):
        raise InvalidParentError("The issuing key does not match the issuing certificate")

    return issuer_cert, issuer_key


def _is_ca(cert):
    try:
        basic_constraints = cert.extensions.get_extension_for_class(x509.BasicConstraints)
    except x509.ExtensionNotFound:
        return False
    return basic_constraints.value.ca


def _public_key_bytes(public_key):
    return public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def _to_record(cert, private_key):
    return CertificateRecord(
        certificate_pem=cert.public_bytes(serialization.Encoding.PEM).decode("utf-8"),
        private_key_pem=private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode("utf-8"),
    )
