from policygate._version import _detect_version

POLICYGATE_VERSION = _detect_version()

__all__ = ["POLICYGATE_VERSION"]
