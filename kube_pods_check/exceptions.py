#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""User-defined exceptions of the pod check."""

__all__ = [
    "ClusterConnectionError",
    "ConfigurationError",
    "KubePodsError",
    "PayloadDecodingError",
]


# never used directly in the code. Just some wrapper to make all of our
# exceptions handleable with one call
class KubePodsError(Exception):
    pass


# This is raised before the scan starts. The program should catch this at top
# level and exit with exit code 3, in order to be compatible with monitoring
# plug-in API.
class ConfigurationError(KubePodsError):
    pass


class ClusterConnectionError(KubePodsError):
    """The pod data could not be retrieved from the cluster.

    This aborts the whole scan, no matter how many namespaces are left.
    """


class PayloadDecodingError(ClusterConnectionError):
    """The cluster answered, but with something that is not a pod list."""
