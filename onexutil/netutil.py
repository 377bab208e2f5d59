"""Network address helpers: local IP discovery, client IPs and host:port forms."""

from __future__ import annotations

import ipaddress
import socket
from collections.abc import Mapping

__all__ = [
    "X_FORWARDED_FOR",
    "X_REAL_IP",
    "X_CLIENT_IP",
    "get_local_ip",
    "remote_ip",
    "append_port_if_needed",
]

X_FORWARDED_FOR = "X-Forwarded-For"
X_REAL_IP = "X-Real-IP"
X_CLIENT_IP = "x-client-ip"

_LOOPBACK = "127.0.0.1"

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


def get_local_ip() -> str:
    """Return a non-loopback IPv4 address of this host, or 127.0.0.1."""
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except (OSError, UnicodeError):
        return _LOOPBACK
    for *_, sockaddr in infos:
        try:
            address = ipaddress.IPv4Address(sockaddr[0])
        except ValueError:
            continue
        if not address.is_loopback:
            return str(address)
    return _LOOPBACK


def _split_host_port(addr: str) -> tuple[str, str]:
    """Split ``host:port`` or ``[host]:port``; raise ValueError otherwise."""
    colon = addr.rfind(":")
    if colon < 0:
        raise ValueError(f"missing port in address {addr!r}")
    if addr.startswith("["):
        end = addr.find("]")
        if end < 0:
            raise ValueError(f"missing ']' in address {addr!r}")
        if end + 1 == len(addr):
            raise ValueError(f"missing port in address {addr!r}")
        if end + 1 != colon:
            if addr[end + 1] == ":":
                raise ValueError(f"too many colons in address {addr!r}")
            raise ValueError(f"missing port in address {addr!r}")
        host = addr[1:end]
        if "[" in addr[1:] and addr.find("[", 1) >= 0 or "]" in addr[end + 1 :]:
            raise ValueError(f"unexpected bracket in address {addr!r}")
    else:
        host = addr[:colon]
        if ":" in host:
            raise ValueError(f"too many colons in address {addr!r}")
        if "[" in addr or "]" in addr:
            raise ValueError(f"unexpected bracket in address {addr!r}")
    return host, addr[colon + 1 :]


def _header(headers: Mapping[str, object], name: str) -> str:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            if isinstance(value, (list, tuple)):
                return str(value[0]) if value else ""
            return str(value)
    return ""


def remote_ip(remote_addr: str, headers: Mapping[str, object] | None = None) -> str:
    """Return the client IP of a request.

    The ``x-client-ip``, ``X-Real-IP`` and ``X-Forwarded-For`` headers are
    consulted in that order (names compared without regard to case); failing
    those, the host part of ``remote_addr`` is used. ``::1`` becomes 127.0.0.1.
    """
    headers = headers or {}
    for name in (X_CLIENT_IP, X_REAL_IP, X_FORWARDED_FOR):
        value = _header(headers, name)
        if value:
            result = value
            break
    else:
        try:
            result, _ = _split_host_port(remote_addr)
        except ValueError:
            result = ""
    if result == "::1":
        result = _LOOPBACK
    return result


def _parse_ip_sloppy(text: str) -> IPAddress | None:
    if "%" in text:
        return None
    try:
        return ipaddress.ip_address(text)
    except ValueError:
        pass
    parts = text.split(".")
    if len(parts) == 4 and all(
        part.isascii() and part.isdigit() and int(part) <= 255 for part in parts
    ):
        return ipaddress.IPv4Address(".".join(str(int(part)) for part in parts))
    return None


def append_port_if_needed(addr: str, port: int) -> str:
    """Append ``port`` to an IP address unless it already carries one.

    Addresses that are neither ``host:port`` forms nor IP addresses are
    returned unchanged.
    """
    try:
        _split_host_port(addr)
    except ValueError:
        pass
    else:
        return addr

    ip = _parse_ip_sloppy(addr)
    if ip is None:
        return addr
    is_v4 = isinstance(ip, ipaddress.IPv4Address) or ip.ipv4_mapped is not None
    if is_v4:
        return f"{addr}:{port}"
    return f"[{addr}]:{port}"