# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/errors.py
from __future__ import annotations

from typing import Sequence


class ProvisionError(RuntimeError):
    """Base class for every failure that aborts a provisioning run."""


# ---------------------------------------------------------------------
# Input validation (raised before anything is installed or written)
# ---------------------------------------------------------------------
class InputError(ProvisionError, ValueError):
    """Raised for bad operator input."""


class InvalidAddress(InputError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid IPv4 address: {value!r}")


class EvenPeerCount(InputError):
    def __init__(self, count: int):
        self.count = count
        super().__init__(
            f"--masters must list an odd number of hosts to form a quorum, got {count}"
        )


class HostNotInTopology(InputError):
    def __init__(self, ip: str, peers: Sequence[str]):
        self.ip = ip
        self.peers = tuple(peers)
        super().__init__(
            f"This host's IP {ip} is not in the masters list ({', '.join(self.peers)})"
        )


class MissingHostIp(InputError):
    def __init__(self):
        super().__init__("--ip is required when provisioning a master with --masters")


class MissingRole(InputError):
    def __init__(self, detail: str = "at least one role (master, agent) is required"):
        super().__init__(detail)


class UnsupportedDistro(InputError):
    def __init__(self, distro: str):
        self.distro = distro
        super().__init__(f"Unsupported distribution: {distro}")


# ---------------------------------------------------------------------
# Package versions
# ---------------------------------------------------------------------
class MalformedVersion(ProvisionError, ValueError):
    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Malformed version string: {version!r}")


class NoMatchingVersion(ProvisionError):
    def __init__(self, package: str, requested: str, available: Sequence[str]):
        self.package = package
        self.requested = requested
        self.available = tuple(available)
        listing = ", ".join(self.available) if self.available else "<none>"
        super().__init__(
            f"No {package} version matching {requested!r}. Available: {listing}"
        )


# ---------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------
class CommandFailed(ProvisionError):
    """A backend command exited non-zero."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = ""):
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"command failed (rc={returncode}): {' '.join(self.argv)}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)


class ServiceActionFailed(ProvisionError):
    def __init__(self, service: str, state: str, cause: Exception):
        self.service = service
        self.state = state
        self.cause = cause
        super().__init__(f"Service action {state} on {service} failed: {cause}")


class ConfigError(ProvisionError):
    """Invalid settings file."""
