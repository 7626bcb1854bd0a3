from typing import Iterable, Optional

from partner_iam.domain.entities import Identity


class SuperadminAllowlist:
    """
    Identities granted unconditional superadmin.

    Loaded from deployment configuration (SUPERADMIN_EMAILS,
    SUPERADMIN_IDENTITY_IDS). Emails match case-insensitively.
    """

    def __init__(self, emails: Iterable[str] = (), identity_ids: Iterable[str] = ()):
        self._emails = frozenset(e.strip().lower() for e in emails if e and e.strip())
        self._identity_ids = frozenset(str(i).strip().lower() for i in identity_ids if i)

    @classmethod
    def from_config(cls, config) -> "SuperadminAllowlist":
        return cls(
            emails=getattr(config, "SUPERADMIN_EMAILS", None) or [],
            identity_ids=getattr(config, "SUPERADMIN_IDENTITY_IDS", None) or [],
        )

    def contains(self, identity: Optional[Identity]) -> bool:
        if identity is None:
            return False
        if identity.email and identity.email.strip().lower() in self._emails:
            return True
        return str(identity.id).lower() in self._identity_ids

    def __len__(self) -> int:
        return len(self._emails) + len(self._identity_ids)
