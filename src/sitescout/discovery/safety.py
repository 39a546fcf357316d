"""SSRF protection for extraction targets.

Blocks targets that are, or resolve to:
- localhost
- loopback addresses (127.0.0.0/8, ::1)
- link-local unicast and multicast (169.254.0.0/16, fe80::/10, 224.0.0.0/24, ff02::/16)
- RFC 1918 private IPv4 ranges (10.0.0.0/8, 172.16.0.0/12, 192.168.0.0/16)
- IPv6 unique local addresses (fc00::/7)
"""

import asyncio
import ipaddress
import logging
from typing import TypeAlias
from urllib.parse import SplitResult

from sitescout.exceptions import UnsafeTargetError

LOGGER = logging.getLogger(__name__)

IPAddress: TypeAlias = ipaddress.IPv4Address | ipaddress.IPv6Address

PRIVATE_IPV4_NETWORKS = (
    ipaddress.IPv4Network("10.0.0.0/8"),
    ipaddress.IPv4Network("172.16.0.0/12"),
    ipaddress.IPv4Network("192.168.0.0/16"),
)
LINK_LOCAL_MULTICAST_IPV4 = ipaddress.IPv4Network("224.0.0.0/24")
UNIQUE_LOCAL_IPV6 = ipaddress.IPv6Network("fc00::/7")


def is_private_or_local_ip(ip: IPAddress) -> bool:
    """
    Check if an address is loopback, link-local, or in private space.

    Args:
        ip: Address to check.

    Returns:
        True if the address must not be contacted.
    """
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped

    if ip.is_loopback or ip.is_link_local:
        return True

    if isinstance(ip, ipaddress.IPv4Address):
        if ip in LINK_LOCAL_MULTICAST_IPV4:
            return True
        return any(ip in network for network in PRIVATE_IPV4_NETWORKS)

    # ff02::/16 and friends: multicast with link-local scope
    if ip.is_multicast and (ip.packed[1] & 0x0F) == 0x02:
        return True
    return ip in UNIQUE_LOCAL_IPV6


async def resolve_host(host: str) -> list[IPAddress]:
    """
    Resolve a hostname to its addresses.

    IP literals are returned as-is without touching DNS.

    Raises:
        OSError: If resolution fails.
    """
    try:
        return [ipaddress.ip_address(host)]
    except ValueError:
        pass

    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(host, None)
    addresses: list[IPAddress] = []
    for _family, _type, _proto, _canonname, sockaddr in infos:
        # Strip IPv6 scope id ("fe80::1%eth0")
        raw = str(sockaddr[0]).split("%", 1)[0]
        try:
            addresses.append(ipaddress.ip_address(raw))
        except ValueError:
            continue
    return addresses


async def ensure_safe_target(url: SplitResult, correlation_id: str | None = None) -> None:
    """
    Reject targets that point at private or local network space.

    DNS failures are not treated as unsafe: the subsequent HTTP request
    fails on its own if the host does not exist.

    Args:
        url: Normalised target URL.
        correlation_id: Optional correlation ID attached to raised errors.

    Raises:
        UnsafeTargetError: If the host is localhost or resolves to a blocked address.
    """
    host = (url.hostname or "").lower()

    if host == "localhost":
        raise UnsafeTargetError("localhost is not allowed", host=host, correlation_id=correlation_id)

    try:
        addresses = await resolve_host(host)
    except (OSError, UnicodeError) as e:
        LOGGER.debug("Could not resolve %s, deferring to HTTP request: %s", host, e)
        return

    for address in addresses:
        if is_private_or_local_ip(address):
            raise UnsafeTargetError(
                f"Private or local IP addresses are not allowed: {address}",
                host=host,
                address=str(address),
                correlation_id=correlation_id,
            )
