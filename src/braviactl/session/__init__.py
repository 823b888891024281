"""Device sessions for braviactl."""

from braviactl.session.device import BraviaSession

__all__ = ["BraviaSession"]
