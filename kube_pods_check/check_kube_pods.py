#!/usr/bin/env python3
# Copyright (C) 2024 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_kube_pods - Monitor the conditions and container restarts of Kubernetes pods"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path

from pydantic import BaseModel, Field, model_validator, ValidationError

from .aggregator import CONNECTION_FAILED_HEADLINE, ResultAggregator, ScanResult
from .evaluators import evaluate_condition, evaluate_restarts, RestartLevels
from .exceptions import ClusterConnectionError, ConfigurationError
from .log import logger, setup_console_logging
from .schemata import decode_pod_list, PodRecord
from .sources import APIServerSource, KubectlSource, PodSource


class Args(BaseModel):
    target: None | str
    credentials_file: None | Path
    namespace: Sequence[str]
    warn: int = Field(ge=0)
    crit: int = Field(ge=0)
    kubeconfig: None | str
    kubectl: None | str
    verify_cert: bool
    timeout: float = Field(gt=0)
    verbose: int
    debug: bool

    @model_validator(mode="after")
    def _credentials_for_target(self) -> Args:
        if self.target and self.credentials_file is None:
            raise ValueError(
                "Required argument -c <CREDENTIALSFILE> missing when specifying -t <TARGET>"
            )
        return self

    @property
    def levels(self) -> RestartLevels:
        return RestartLevels(warn=self.warn, crit=self.crit)


def parse_arguments(sys_args: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="check_kube_pods", description=__doc__)

    parser.add_argument(
        "-t",
        "--target",
        default=None,
        metavar="TARGETSERVER",
        help="The endpoint of the Kubernetes API (otherwise kubectl is used)",
    )
    parser.add_argument(
        "-c",
        "--credentials-file",
        default=None,
        metavar="CREDENTIALSFILE",
        help="Required if a TARGETSERVER is specified. netrc format: "
        "'machine yourEndPointOrTarget login yourUserNameHere password YOURPASSWORDHERE'",
    )
    parser.add_argument(
        "-n",
        "--namespace",
        action="append",
        default=[],
        help="Namespace to check, for example 'kube-system'. Can be given multiple times. "
        "By default all namespaces are checked.",
    )
    # The levels are validated later on, in order to report bad values the
    # same way as every other configuration error.
    parser.add_argument(
        "-w",
        "--warn",
        default="5",
        metavar="WARN_THRESHOLD",
        help="Warning threshold for number of container restarts (Default: 5)",
    )
    parser.add_argument(
        "-C",
        "--crit",
        default="50",
        metavar="CRIT_THRESHOLD",
        help="Critical threshold for number of container restarts (Default: 50)",
    )
    parser.add_argument(
        "-k", "--kubeconfig", default=None, help="Path to kube config file if using kubectl"
    )
    parser.add_argument("--kubectl", default=None, help="Path to the kubectl executable")
    parser.add_argument(
        "--verify-cert", action="store_true", help="Verify the certificate of the API server"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Seconds before a request to the cluster times out (Default: 10)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Verbose mode: also report conditions which are fine "
        "(for log output on stderr use -vv or -vvv)",
    )
    parser.add_argument("--debug", action="store_true", help="Raise python exceptions.")

    return parser.parse_args(sys_args)


def validate_arguments(arguments: argparse.Namespace) -> Args:
    try:
        return Args.model_validate(vars(arguments))
    except ValidationError as e:
        raise ConfigurationError(
            "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'arguments'}: {error['msg']}"
                for error in e.errors()
            )
        ) from e


def make_source(args: Args) -> PodSource:
    if args.target:
        assert args.credentials_file is not None
        return APIServerSource(
            target=args.target,
            credentials_file=args.credentials_file,
            verify_cert=args.verify_cert,
            timeout=args.timeout,
        )
    return KubectlSource(kubectl=args.kubectl, kubeconfig=args.kubeconfig, timeout=args.timeout)


def check_pod(
    aggregator: ResultAggregator, pod: PodRecord, levels: RestartLevels, verbose: bool
) -> None:
    for condition in pod.conditions:
        if finding := evaluate_condition(pod.name, condition.type, condition.status, verbose):
            aggregator.record(finding.state, finding.message)

    for container in pod.containers:
        if finding := evaluate_restarts(
            pod.name, container.name, container.ready_text, container.restart_count, levels
        ):
            aggregator.record(finding.state, finding.message)


def scan(
    source: PodSource,
    namespaces: Iterable[str],
    levels: RestartLevels,
    verbose: bool = False,
) -> ScanResult:
    """Check all pods of the given namespaces

    Raises ClusterConnectionError as soon as one namespace cannot be
    retrieved. The remaining namespaces are not looked at.
    """
    aggregator = ResultAggregator()
    for namespace in namespaces:
        logger.info("Checking pods in namespace %s", namespace)
        pods = decode_pod_list(source.pods(namespace))
        logger.debug("Found %d pods in namespace %s", len(pods), namespace)
        for pod in pods:
            check_pod(aggregator, pod, levels, verbose)
    return aggregator.finalize()


def output_check_result(s: str) -> None:
    sys.stdout.write("%s\n" % s)


def main(argv: Sequence[str] | None = None) -> int:
    arguments = parse_arguments(sys.argv[1:] if argv is None else argv)
    setup_console_logging(arguments.verbose)
    logger.debug("parsed arguments: %s", arguments)

    try:
        args = validate_arguments(arguments)
        source = make_source(args)
        namespaces = args.namespace or source.namespaces()
        result = scan(source, namespaces, args.levels, verbose=args.verbose > 0)
    except ConfigurationError as e:
        if arguments.debug:
            raise
        output_check_result(f"UNKNOWN - {e}")
        return 3
    except ClusterConnectionError as e:
        if arguments.debug:
            raise
        logger.error("%s", e)
        output_check_result(CONNECTION_FAILED_HEADLINE)
        return 3
    except Exception as e:
        if arguments.debug:
            raise
        output_check_result(f"UNKNOWN - {e}")
        return 3

    output_check_result(result.render())
    return int(result.state)


if __name__ == "__main__":
    sys.exit(main())
