"""
Validation and normalization of the single CIDR block allowed through the edge firewall.

The allow-list entry comes from one of two inputs:
* ALLOWED_IP_CIDR, an address with a prefix length (preferred)
* ALLOWED_IP, a bare address normalized to a single host block (fallback)
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from site_infra.logger import get_logger

logger = get_logger(__name__)

CIDR_INPUT_NAME = "ALLOWED_IP_CIDR"
ADDRESS_INPUT_NAME = "ALLOWED_IP"

IPV4_EXAMPLE = "203.0.113.7/32"
IPV6_EXAMPLE = "2001:db8::1/128"

_OCTET = re.compile(r"[0-9]{1,3}")
_HEXTET = re.compile(r"[0-9a-fA-F]{1,4}")


class IpFamily(Enum):
    V4 = ("IPV4", 32, re.compile(r"[0-9]{1,2}"))
    V6 = ("IPV6", 128, re.compile(r"[0-9]{1,3}"))

    def __init__(self, waf_version: str, max_prefix: int, prefix_pattern):
        self.waf_version = waf_version
        self.max_prefix = max_prefix
        self.prefix_pattern = prefix_pattern


@dataclass(frozen=True)
class CidrBlock:
    address: str
    prefix_length: int
    family: IpFamily

    def __post_init__(self):
        if not 0 <= self.prefix_length <= self.family.max_prefix:
            raise ValueError(
                f"prefix length {self.prefix_length} is out of range for {self.family.waf_version}")

    def __str__(self) -> str:
        return f"{self.address}/{self.prefix_length}"


class AllowListError(ValueError):
    """
    raised when the allow-list entry cannot be derived from the inputs
    """

    def __init__(self, message: str, input_name: Optional[str] = None, value: Optional[str] = None):
        super().__init__(message)
        self.input_name = input_name
        self.value = value


class MalformedCidrError(AllowListError):
    pass


class MalformedAddressError(AllowListError):
    pass


class MissingConfigurationError(AllowListError):
    pass


def is_ipv4(candidate: str) -> bool:
    parts = candidate.split(".")
    if len(parts) != 4:
        return False
    return all(_OCTET.fullmatch(part) and int(part) <= 255 for part in parts)


def is_ipv6(candidate: str) -> bool:
    """
    Syntax check for full, compressed (::) and IPv4-suffixed (::ffff:192.0.2.1) forms.
    """
    parts = candidate.split(":")
    if not 3 <= len(parts) <= 8:
        return False

    # more than one empty group is only possible around a single elision
    if parts.count("") > 1 and candidate.count("::") != 1:
        return False

    last = len(parts) - 1
    for index, part in enumerate(parts):
        if part == "":
            continue
        if "." in part:
            if index != last or not is_ipv4(part):
                return False
            continue
        if not _HEXTET.fullmatch(part):
            return False
    return True


def _family_of(address: str, allow_ipv6: bool) -> Optional[IpFamily]:
    if is_ipv4(address):
        return IpFamily.V4
    if allow_ipv6 and is_ipv6(address):
        return IpFamily.V6
    return None


def parse_cidr(candidate: str, allow_ipv6: bool = True) -> Optional[CidrBlock]:
    """
    returns the CidrBlock for an address/prefix string, or None when it is not valid
    """
    pieces = candidate.split("/")
    if len(pieces) != 2:
        return None
    address, prefix = pieces
    if not address or not prefix:
        return None

    family = _family_of(address, allow_ipv6)
    if family is None or not family.prefix_pattern.fullmatch(prefix):
        return None
    prefix_length = int(prefix)
    if prefix_length > family.max_prefix:
        return None
    return CidrBlock(address, prefix_length, family)


def is_valid_cidr(candidate: str, allow_ipv6: bool = True) -> bool:
    return parse_cidr(candidate, allow_ipv6) is not None


def _accepted_forms(allow_ipv6: bool) -> str:
    if allow_ipv6:
        return f'a valid IPv4 CIDR (e.g., "{IPV4_EXAMPLE}") or IPv6 CIDR (e.g., "{IPV6_EXAMPLE}")'
    return f'a valid IPv4 CIDR (e.g., "{IPV4_EXAMPLE}")'


def _require_cidr(value: str, input_name: str, allow_ipv6: bool, message: str) -> CidrBlock:
    block = parse_cidr(value, allow_ipv6)
    if block is None:
        raise MalformedCidrError(f"{message} {_accepted_forms(allow_ipv6)}. Got: {value}",
                                 input_name=input_name, value=value)
    return block


def resolve_allow_list_entry(cidr_input: Optional[str], bare_input: Optional[str],
                             allow_ipv6: bool = True) -> CidrBlock:
    """
    Resolves the single CIDR block for the allow-list.

    The CIDR input wins whenever it is set; the bare address input is only consulted
    when it is not. A bare address is widened to a single host block (/32 or /128).
    Raises a subclass of AllowListError when the chosen input is invalid or both are unset.
    """
    cidr_value = (cidr_input or "").strip()
    bare_value = (bare_input or "").strip()

    if cidr_value:
        block = _require_cidr(cidr_value, CIDR_INPUT_NAME, allow_ipv6,
                              f"{CIDR_INPUT_NAME} must be")
        logger.debug("Allow-list entry %s taken from %s", block, CIDR_INPUT_NAME)
        return block

    if bare_value:
        if "/" in bare_value:
            block = _require_cidr(bare_value, ADDRESS_INPUT_NAME, allow_ipv6,
                                  f"{ADDRESS_INPUT_NAME} appears to be a CIDR but is invalid. Provide")
            logger.debug("Allow-list entry %s taken from %s", block, ADDRESS_INPUT_NAME)
            return block

        family = _family_of(bare_value, allow_ipv6)
        if family is None:
            families = "IPv4 or IPv6" if allow_ipv6 else "IPv4"
            raise MalformedAddressError(
                f"{ADDRESS_INPUT_NAME} must be a valid {families} address. Got: {bare_value}",
                input_name=ADDRESS_INPUT_NAME, value=bare_value)
        block = CidrBlock(bare_value, family.max_prefix, family)
        logger.debug("Allow-list entry %s normalized from bare address in %s", block, ADDRESS_INPUT_NAME)
        return block

    raise MissingConfigurationError(
        f"{CIDR_INPUT_NAME} (or {ADDRESS_INPUT_NAME}) environment variable must be set to deploy the stack.")
