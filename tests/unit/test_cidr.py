import pytest

from site_infra.cidr import (CidrBlock, IpFamily, MalformedAddressError, MalformedCidrError,
                             MissingConfigurationError, is_ipv4, is_ipv6, is_valid_cidr, parse_cidr,
                             resolve_allow_list_entry)


@pytest.mark.parametrize("candidate", ["0.0.0.0", "203.0.113.7", "255.255.255.255", "010.001.0.1"])
def test_is_ipv4_valid(candidate):
    assert is_ipv4(candidate)


@pytest.mark.parametrize("candidate", ["256.1.1.1", "1.2.3", "1.2.3.4.5", "a.b.c.d", "1..2.3", "1.2.3.4 ", "1234.1.1.1",
                                       ""])
def test_is_ipv4_invalid(candidate):
    assert not is_ipv4(candidate)


@pytest.mark.parametrize("candidate", [
    "2001:db8::1",
    "2001:0db8:0000:0000:0000:ff00:0042:8329",
    "::1",
    "fe80::",
    "::",
    "::ffff:192.0.2.1",
    "2001:DB8::ABCD",
])
def test_is_ipv6_valid(candidate):
    assert is_ipv6(candidate)


@pytest.mark.parametrize("candidate", [
    "2001:db8",
    "1:2:3:4:5:6:7:8:9",
    "2001::db8::1",
    "2001:db8::12345",
    "2001:db8::g",
    "::192.0.2.1:1",
    "::ffff:999.0.2.1",
    "203.0.113.7",
])
def test_is_ipv6_invalid(candidate):
    assert not is_ipv6(candidate)


@pytest.mark.parametrize("candidate", ["203.0.113.7/32", "10.0.0.0/8", "0.0.0.0/0", "2001:db8::/32", "::1/128",
                                       "2001:db8::1/0"])
def test_is_valid_cidr(candidate):
    assert is_valid_cidr(candidate)


@pytest.mark.parametrize("candidate", [
    "203.0.113.7",
    "203.0.113.7/",
    "/32",
    "203.0.113.7/33",
    "203.0.113.7/032",
    "256.0.113.7/32",
    "abc.0.113.7/24",
    "203.0.113.7/32/1",
    "2001:db8::1/129",
    "2001:db8::1/1280",
    "2001:db8::1/x",
])
def test_is_valid_cidr_rejects(candidate):
    assert not is_valid_cidr(candidate)


def test_is_valid_cidr_ipv4_only():
    assert is_valid_cidr("203.0.113.0/24", allow_ipv6=False)
    assert not is_valid_cidr("2001:db8::1/128", allow_ipv6=False)


def test_parse_cidr_returns_block():
    block = parse_cidr("2001:db8::/48")
    assert block == CidrBlock("2001:db8::", 48, IpFamily.V6)
    assert block.family.waf_version == "IPV6"
    assert str(block) == "2001:db8::/48"


def test_cidr_block_prefix_range():
    with pytest.raises(ValueError):
        CidrBlock("203.0.113.7", 33, IpFamily.V4)


def test_resolve_bare_ipv4_defaults_to_32():
    block = resolve_allow_list_entry(None, "203.0.113.7")
    assert str(block) == "203.0.113.7/32"
    assert block.family is IpFamily.V4


def test_resolve_bare_ipv6_defaults_to_128():
    block = resolve_allow_list_entry("", "2001:db8::1")
    assert str(block) == "2001:db8::1/128"
    assert block.family is IpFamily.V6


def test_resolve_cidr_input_takes_precedence():
    assert str(resolve_allow_list_entry("203.0.113.0/24", "198.51.100.1")) == "203.0.113.0/24"
    # the bare address is not consulted even when it is invalid
    assert str(resolve_allow_list_entry("203.0.113.0/24", "not-an-ip")) == "203.0.113.0/24"


def test_resolve_trims_inputs():
    assert str(resolve_allow_list_entry("  203.0.113.0/24\n", None)) == "203.0.113.0/24"
    assert str(resolve_allow_list_entry("   ", " 203.0.113.7 ")) == "203.0.113.7/32"


def test_resolve_is_idempotent():
    first = resolve_allow_list_entry(None, "203.0.113.7")
    assert resolve_allow_list_entry(str(first), None) == first


def test_resolve_bare_input_with_prefix():
    assert str(resolve_allow_list_entry(None, "2001:db8::/64")) == "2001:db8::/64"


def test_resolve_malformed_cidr():
    with pytest.raises(MalformedCidrError) as exc_info:
        resolve_allow_list_entry("999.1.1.1/32", None)
    message = str(exc_info.value)
    assert "ALLOWED_IP_CIDR" in message
    assert "999.1.1.1/32" in message
    assert "203.0.113.7/32" in message and "2001:db8::1/128" in message
    assert exc_info.value.value == "999.1.1.1/32"
    assert exc_info.value.input_name == "ALLOWED_IP_CIDR"


def test_resolve_malformed_cidr_in_bare_input():
    with pytest.raises(MalformedCidrError) as exc_info:
        resolve_allow_list_entry(None, "203.0.113.7/40")
    assert "ALLOWED_IP appears to be a CIDR" in str(exc_info.value)
    assert exc_info.value.input_name == "ALLOWED_IP"


def test_resolve_malformed_address():
    with pytest.raises(MalformedAddressError) as exc_info:
        resolve_allow_list_entry(None, "localhost")
    assert "localhost" in str(exc_info.value)


def test_resolve_missing_configuration():
    with pytest.raises(MissingConfigurationError) as exc_info:
        resolve_allow_list_entry("  ", None)
    assert "ALLOWED_IP_CIDR" in str(exc_info.value)
    assert "ALLOWED_IP" in str(exc_info.value)


def test_resolve_ipv4_only_rejects_ipv6():
    with pytest.raises(MalformedAddressError):
        resolve_allow_list_entry(None, "2001:db8::1", allow_ipv6=False)
    with pytest.raises(MalformedCidrError) as exc_info:
        resolve_allow_list_entry("2001:db8::1/128", None, allow_ipv6=False)
    assert "IPv6" not in str(exc_info.value)


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        resolve_allow_list_entry(None, None)
