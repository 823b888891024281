"""braviactl -- Local network control for Sony BRAVIA televisions.

This package discovers BRAVIA sets on the local network, reads their
capability tables (input sources, system information, remote-control
codes) and executes ordered batches of commands against them over the
device's HTTP control API.
"""

__version__ = "0.1.0"
