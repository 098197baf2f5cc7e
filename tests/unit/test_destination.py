import pytest

from static_routes.destination import parse_destination
from static_routes.exceptions import InvalidAddress
from static_routes.routes import AddressFamily


def test_masks_ipv4_host_bits():
    dest = parse_destination("192.168.5.37/24")

    assert dest.family is AddressFamily.IPV4
    assert str(dest) == "192.168.5.0/24"
    assert dest.network_address == bytes([192, 168, 5, 0])


def test_masks_ipv6_host_bits():
    dest = parse_destination("2001:db8::1/32")

    assert dest.family is AddressFamily.IPV6
    assert str(dest) == "2001:db8::/32"


def test_missing_prefix_is_host_route():
    assert parse_destination("10.0.0.1").prefix_length == 32
    assert parse_destination("2001:db8::1").prefix_length == 128


def test_prefix_is_clamped():
    assert str(parse_destination("10.1.2.3/40")) == "10.1.2.3/32"
    assert str(parse_destination("10.1.2.3/-4")) == "0.0.0.0/0"
    assert str(parse_destination("2001:db8::1/200")) == "2001:db8::1/128"


def test_unparsable_prefix_selects_full_width():
    assert str(parse_destination("10.1.2.3/abc")) == "10.1.2.3/32"
    assert str(parse_destination("10.1.2.3/24junk")) == "10.1.2.0/24"


def test_non_byte_aligned_prefix():
    assert str(parse_destination("172.31.255.255/12")) == "172.16.0.0/12"
    assert str(parse_destination("2001:db8:abcd:12ff::1/57")) == "2001:db8:abcd:1280::/57"


def test_equal_after_masking():
    assert parse_destination("192.168.5.37/24") == parse_destination("192.168.5.0/24")


@pytest.mark.parametrize("text", ["", "not-an-address", "300.1.1.1/8", "fe80::1%en0"])
def test_invalid_address(text):
    with pytest.raises(InvalidAddress):
        parse_destination(text)
