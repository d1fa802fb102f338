"""Azure IoT Provisioning E2E X509

This package provides the certificate fixtures used for X509 attestation.
"""

from .certificate_builder import (  # noqa: F401
    CertificateRecord,
    CertificateFixtures,
    create_self_signed_certificate,
    create_intermediate_ca_certificate,
    create_leaf_certificate,
    create_leaf_certificate_with_chain,
    build_certificate_chain,
    create_all_certificates,
)
