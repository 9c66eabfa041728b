from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from ..common.codec import from_json, to_json
from ..core.constants import IP_WHITELIST_KEY
from ..core.exceptions import UnauthorizedLocationError, ValidationError
from ..storage.store import KeyValueStore

logger = logging.getLogger(__name__)

LOOPBACK_NAMES = {"localhost"}


@dataclass(frozen=True)
class IpWhitelistEntry:
    ip_address: str
    is_active: bool = True
    description: str = ""


def client_ip(headers: Mapping[str, str], remote_addr: Optional[str]) -> str:
    """First X-Forwarded-For hop, then X-Real-IP, then the socket address."""
    forwarded = (headers.get("X-Forwarded-For") or "").split(",")[0].strip()
    if forwarded:
        return forwarded
    real_ip = (headers.get("X-Real-IP") or "").strip()
    if real_ip:
        return real_ip
    return remote_addr or "127.0.0.1"


def is_private_or_loopback(ip: str) -> bool:
    if ip in LOOPBACK_NAMES:
        return True
    try:
        addr = ipaddress.ip_address(ip)
    except ValueError:
        return False
    if addr.is_loopback:
        return True
    if addr.version == 4:
        return addr in ipaddress.ip_network("10.0.0.0/8") or addr in ipaddress.ip_network("192.168.0.0/16")
    return False


class NetworkPolicy:
    """Office network allow-list for attendance actions.

    Static addresses come from settings, the rest from `hrms_ip_whitelist`
    in the store so admins can change them at runtime.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        static_whitelist: Iterable[str] = (),
        allow_private_networks: bool = False,
    ):
        self._store = store
        self._static = {ip.strip() for ip in static_whitelist if ip and ip.strip()}
        self._allow_private = bool(allow_private_networks)

    def entries(self) -> list[IpWhitelistEntry]:
        return [from_json(IpWhitelistEntry, item) for item in self._store.get(IP_WHITELIST_KEY, [])]

    def add(self, ip: str, description: str = "") -> IpWhitelistEntry:
        ip = (ip or "").strip()
        try:
            ipaddress.ip_address(ip)
        except ValueError:
            raise ValidationError("IP address is not valid")

        entries = [e for e in self.entries() if e.ip_address != ip]
        entry = IpWhitelistEntry(ip_address=ip, is_active=True, description=description.strip())
        entries.append(entry)
        self._store.set(IP_WHITELIST_KEY, to_json(entries))
        return entry

    def deactivate(self, ip: str) -> None:
        entries = [IpWhitelistEntry(e.ip_address, False, e.description) if e.ip_address == ip else e for e in self.entries()]
        self._store.set(IP_WHITELIST_KEY, to_json(entries))

    def is_allowed(self, ip: str) -> bool:
        if ip in self._static:
            return True
        if self._allow_private and is_private_or_loopback(ip):
            return True
        return any(e.is_active and e.ip_address == ip for e in self.entries())

    def ensure_allowed(self, ip: str) -> None:
        if not self.is_allowed(ip):
            logger.warning("attendance action refused for %s", ip)
            raise UnauthorizedLocationError(ip)
