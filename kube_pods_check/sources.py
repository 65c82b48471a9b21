#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""
Retrieval of the raw pod data, either with the local kubectl or from the
Kubernetes API server. Both sources hand out the undecoded JSON payloads.
"""

from __future__ import annotations

import netrc
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol
from urllib.parse import urlparse

import requests
import urllib3

from .exceptions import ClusterConnectionError, ConfigurationError
from .log import logger
from .schemata import decode_namespace_list


class PodSource(Protocol):
    def namespaces(self) -> Sequence[str]:
        ...

    def pods(self, namespace: str) -> str:
        ...


class KubectlSource:
    def __init__(
        self,
        *,
        kubectl: str | None = None,
        kubeconfig: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        executable = shutil.which(kubectl or "kubectl")
        if executable is None:
            raise ConfigurationError(
                "The kubectl utility is required for this check if no API endpoint is specified"
            )
        self._base_cmd = [executable]
        if kubeconfig:
            self._base_cmd += ["--kubeconfig", kubeconfig]
        self._timeout = timeout

    def _run(self, args: Sequence[str]) -> str:
        cmd = [*self._base_cmd, *args]
        logger.debug("Executing: %s", cmd)
        try:
            return subprocess.run(
                cmd,
                capture_output=True,
                encoding="utf8",
                check=True,
                timeout=self._timeout,
            ).stdout
        except subprocess.CalledProcessError as e:
            raise ClusterConnectionError(
                f"kubectl exited with code {e.returncode}: {(e.stderr or '').strip()}"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ClusterConnectionError(f"kubectl timed out after {self._timeout}s") from e

    def namespaces(self) -> Sequence[str]:
        return decode_namespace_list(self._run(["get", "namespaces", "-o", "json"]))

    def pods(self, namespace: str) -> str:
        return self._run(["get", "pods", "--namespace", namespace, "-o", "json"])


def read_credentials(credentials_file: Path, target: str) -> tuple[str, str]:
    """Look up login and password for the target host in a netrc file

    The file contains lines like
        machine yourEndPointOrTarget login yourUserNameHere password YOURPASSWORDHERE
    """
    host = urlparse(target).hostname or target
    try:
        authenticators = netrc.netrc(str(credentials_file)).authenticators(host)
    except (OSError, netrc.NetrcParseError) as e:
        raise ConfigurationError(f"Cannot read credentials file {credentials_file}: {e}") from e
    if authenticators is None:
        raise ConfigurationError(f"No credentials for {host} in {credentials_file}")
    login, _account, password = authenticators
    return login, password or ""


class APIServerSource:
    def __init__(
        self,
        *,
        target: str,
        credentials_file: Path,
        verify_cert: bool = False,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self._endpoint = target.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.auth = read_credentials(credentials_file, target)
        self._session.verify = verify_cert
        if not verify_cert:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def _get(self, path: str) -> str:
        url = f"{self._endpoint}{path}"
        logger.debug("Requesting %s", url)
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            raise ClusterConnectionError(
                f"API server answered {e.response.status_code} at URL {url}"
            ) from e
        except requests.RequestException as e:
            # All TCP Exceptions raised by requests inherit from RequestException
            raise ClusterConnectionError(f"Failed to establish a connection at URL {url}") from e
        return response.text

    def namespaces(self) -> Sequence[str]:
        return decode_namespace_list(self._get("/api/v1/namespaces"))

    def pods(self, namespace: str) -> str:
        return self._get(f"/api/v1/namespaces/{namespace}/pods")
