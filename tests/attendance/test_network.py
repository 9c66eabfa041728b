import pytest

from hrms.attendance.network import NetworkPolicy, client_ip, is_private_or_loopback
from hrms.core.exceptions import UnauthorizedLocationError, ValidationError
from hrms.storage.store import InMemoryStore


def test_client_ip_prefers_first_forwarded_hop():
    headers = {"X-Forwarded-For": "203.0.113.10, 10.0.0.1", "X-Real-IP": "198.51.100.7"}
    assert client_ip(headers, "127.0.0.1") == "203.0.113.10"


def test_client_ip_falls_back_to_real_ip_then_socket():
    assert client_ip({"X-Real-IP": "198.51.100.7"}, "127.0.0.1") == "198.51.100.7"
    assert client_ip({}, "192.168.1.20") == "192.168.1.20"
    assert client_ip({}, None) == "127.0.0.1"


@pytest.mark.parametrize(
    "ip, expected",
    [
        ("127.0.0.1", True),
        ("localhost", True),
        ("::1", True),
        ("192.168.4.2", True),
        ("10.20.30.40", True),
        ("172.16.0.5", False),
        ("8.8.8.8", False),
        ("not-an-ip", False),
    ],
)
def test_private_or_loopback(ip, expected):
    assert is_private_or_loopback(ip) is expected


def test_static_whitelist_only():
    policy = NetworkPolicy(InMemoryStore(), static_whitelist=["203.0.113.10"])

    assert policy.is_allowed("203.0.113.10")
    assert not policy.is_allowed("192.168.1.5")


def test_private_networks_when_enabled():
    policy = NetworkPolicy(InMemoryStore(), allow_private_networks=True)

    assert policy.is_allowed("192.168.1.5")
    assert not policy.is_allowed("8.8.8.8")


def test_runtime_entries_can_be_added_and_deactivated():
    store = InMemoryStore()
    policy = NetworkPolicy(store)

    policy.add("198.51.100.7", "Branch office")
    assert policy.is_allowed("198.51.100.7")
    # Persisted, so a second policy over the same store agrees.
    assert NetworkPolicy(store).is_allowed("198.51.100.7")

    policy.deactivate("198.51.100.7")
    assert not policy.is_allowed("198.51.100.7")
    assert policy.entries()[0].is_active is False


def test_invalid_address_is_rejected():
    with pytest.raises(ValidationError):
        NetworkPolicy(InMemoryStore()).add("999.1.1.1")


def test_ensure_allowed_reports_the_refused_address():
    policy = NetworkPolicy(InMemoryStore(), static_whitelist=["203.0.113.10"])

    with pytest.raises(UnauthorizedLocationError) as exc:
        policy.ensure_allowed("8.8.8.8")

    assert exc.value.status == 403
    assert exc.value.ip == "8.8.8.8"
