"""Tests for SSRF protection."""

import ipaddress
from urllib.parse import urlsplit

import pytest

from sitescout.discovery.safety import ensure_safe_target, is_private_or_local_ip
from sitescout.exceptions import UnsafeTargetError


class TestIsPrivateOrLocalIp:
    """Tests for is_private_or_local_ip."""

    @pytest.mark.parametrize(
        "address",
        [
            "127.0.0.1",
            "127.255.0.1",
            "10.0.0.1",
            "172.16.0.1",
            "172.31.255.255",
            "192.168.1.1",
            "169.254.169.254",
            "224.0.0.1",
            "::1",
            "fe80::1",
            "ff02::1",
            "fc00::1",
            "fd12:3456::1",
            "::ffff:127.0.0.1",
            "::ffff:10.1.2.3",
        ],
    )
    def test_blocked(self, address):
        """Test loopback, private and link-local addresses are blocked."""
        assert is_private_or_local_ip(ipaddress.ip_address(address))

    @pytest.mark.parametrize(
        "address",
        [
            "93.184.216.34",
            "8.8.8.8",
            "172.32.0.1",
            "192.169.0.1",
            "224.0.1.1",
            "2606:2800:220:1:248:1893:25c8:1946",
            "ff0e::1",
        ],
    )
    def test_allowed(self, address):
        """Test public addresses are allowed."""
        assert not is_private_or_local_ip(ipaddress.ip_address(address))


class TestEnsureSafeTarget:
    """Tests for ensure_safe_target."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "url",
        [
            "http://127.0.0.1/x",
            "http://10.0.0.1/x",
            "http://192.168.1.1/x",
            "http://169.254.169.254/x",
            "http://[::1]/x",
        ],
    )
    async def test_rejects_private_ip_literals(self, url):
        """Test private IP literals are rejected."""
        with pytest.raises(UnsafeTargetError) as exc_info:
            await ensure_safe_target(urlsplit(url))
        assert "address" in exc_info.value.context

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["http://localhost/x", "http://LOCALHOST:8080/"])
    async def test_rejects_localhost(self, url):
        """Test localhost is rejected without DNS."""
        with pytest.raises(UnsafeTargetError, match="localhost"):
            await ensure_safe_target(urlsplit(url))

    @pytest.mark.asyncio
    async def test_accepts_public_host(self, fake_dns):
        """Test a host resolving to a public address is accepted."""
        await ensure_safe_target(urlsplit("https://example.com"))

    @pytest.mark.asyncio
    async def test_accepts_public_ip(self):
        """Test a public IP literal is accepted."""
        await ensure_safe_target(urlsplit("https://93.184.216.34/"))

    @pytest.mark.asyncio
    async def test_rejects_host_resolving_to_private_ip(self, fake_dns):
        """Test DNS answers are checked, not just literals."""
        fake_dns["internal.example.net"] = ["93.184.216.34", "10.1.2.3"]
        with pytest.raises(UnsafeTargetError) as exc_info:
            await ensure_safe_target(urlsplit("https://internal.example.net/"))
        assert exc_info.value.context["address"] == "10.1.2.3"
        assert exc_info.value.context["host"] == "internal.example.net"

    @pytest.mark.asyncio
    async def test_rejects_host_resolving_to_unique_local_ipv6(self, fake_dns):
        """Test IPv6 unique-local answers are rejected."""
        fake_dns["v6.example.net"] = ["fd00::1"]
        with pytest.raises(UnsafeTargetError):
            await ensure_safe_target(urlsplit("https://v6.example.net/"))

    @pytest.mark.asyncio
    async def test_dns_failure_is_not_fatal(self, fake_dns):
        """Test resolution failures are left to the HTTP request."""
        await ensure_safe_target(urlsplit("https://does-not-exist.invalid/"))
