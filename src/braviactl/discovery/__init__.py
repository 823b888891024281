"""Multicast discovery of BRAVIA sets."""

from braviactl.discovery.ssdp import SsdpDiscovery, discover, parse_advertisement

__all__ = ["SsdpDiscovery", "discover", "parse_advertisement"]
