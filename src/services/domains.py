"""
Domain lookup backed by the aggregated data store.

A domain is known when the store holds aggregated data for it, i.e. at
least one object exists under ``<prefix><fqdn>/``.
"""

import logging
from typing import List, Optional

from services import s3 as s3_service
from services.config import Config

logger = logging.getLogger(__name__)


class Domain:
    """
    Handle for a single domain.

    The existence check is lazy: the store is queried on the first call to
    exists() and the answer is cached for the lifetime of the handle.
    """

    def __init__(self, fqdn: str, directory: 'DomainDirectory', exists: Optional[bool] = None):
        self._fqdn = fqdn
        self._directory = directory
        self._exists = exists

    def fqdn(self) -> str:
        return self._fqdn

    def exists(self) -> bool:
        if self._exists is None:
            self._exists = self._directory.domain_exists(self._fqdn)
        return self._exists

    def __repr__(self) -> str:
        return f"Domain({self._fqdn!r})"


class DomainDirectory:
    """Lists known domains and checks domain existence."""

    def __init__(self, config: Config):
        self.config = config

    @property
    def bucket(self) -> str:
        return self.config.get('storage/bucket')

    @property
    def prefix(self) -> str:
        prefix = self.config.get('storage/prefix')
        return prefix if prefix.endswith('/') else prefix + '/'

    def domain_prefix(self, fqdn: str) -> str:
        """Key prefix holding the aggregated data of a domain."""
        return f"{self.prefix}{fqdn}/"

    def domain(self, fqdn: str) -> Domain:
        """Create a handle for a domain without checking that it exists."""
        return Domain(fqdn, self)

    def list_domains(self) -> List[Domain]:
        """
        Return handles for all known domains.

        Returns:
            List[Domain]: Handles in store order, already known to exist
        """
        names = s3_service.list_prefixes(self.bucket, self.prefix)
        logger.info(f"Found {len(names)} known domain(s)")
        return [Domain(name, self, exists=True) for name in names]

    def domain_exists(self, fqdn: str) -> bool:
        """Check whether aggregated data exists for a domain."""
        if not fqdn:
            return False
        exists = s3_service.has_objects(self.bucket, self.domain_prefix(fqdn))
        logger.info(f"Domain {fqdn}: exists={exists}")
        return exists
