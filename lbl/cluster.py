"""Cluster metadata: node names and LoadBalancer IPs via the Kubernetes API."""

import logging
from collections.abc import Iterable
from pathlib import Path

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import HTTPError

logger = logging.getLogger(__name__)

LOADBALANCER = "LoadBalancer"


class ClusterError(Exception):
    """Raised when the cluster cannot be reached or queried."""


def connect(kubeconfig: Path | str) -> client.CoreV1Api:
    """Build a CoreV1 API client from a kubeconfig file.

    Raises:
        ClusterError: If the kubeconfig is missing or invalid.
    """
    path = Path(kubeconfig).expanduser()
    logger.debug("Loading kubeconfig from %s", path)
    try:
        api_client = config.new_client_from_config(config_file=str(path))
    except (ConfigException, OSError) as exc:
        raise ClusterError(f"Error loading kubeconfig {path}: {exc}") from exc
    return client.CoreV1Api(api_client)


def list_nodes(api: client.CoreV1Api) -> list[str]:
    """Return the names of all cluster nodes in API order.

    Raises:
        ClusterError: If the API rejects the request or cannot be reached.
    """
    try:
        node_list = api.list_node()
    except ApiException as exc:
        raise ClusterError(f"Error fetching nodes: {exc.reason}") from exc
    except HTTPError as exc:
        raise ClusterError(f"Error fetching nodes: {exc}") from exc

    nodes = [node.metadata.name for node in node_list.items]
    logger.debug("Cluster has %d node(s)", len(nodes))
    return nodes


def filter_loadbalancer_ips(services: Iterable, prefix: str) -> list[str]:
    """Collect ingress IPs of LoadBalancer services that start with *prefix*.

    Services of other types and ingress entries without an IP (hostname
    only) are skipped.  Order follows the service list.
    """
    ips: list[str] = []
    for service in services:
        if service.spec is None or service.spec.type != LOADBALANCER:
            continue
        lb_status = service.status.load_balancer if service.status else None
        for ingress in (lb_status.ingress if lb_status else None) or []:
            if ingress.ip and ingress.ip.startswith(prefix):
                ips.append(ingress.ip)
    return ips


def list_loadbalancer_ips(api: client.CoreV1Api, prefix: str) -> list[str]:
    """Return LoadBalancer ingress IPs across all namespaces matching *prefix*.

    Raises:
        ClusterError: If the API rejects the request or cannot be reached.
    """
    try:
        service_list = api.list_service_for_all_namespaces()
    except ApiException as exc:
        raise ClusterError(f"Error fetching services: {exc.reason}") from exc
    except HTTPError as exc:
        raise ClusterError(f"Error fetching services: {exc}") from exc

    ips = filter_loadbalancer_ips(service_list.items, prefix)
    logger.debug("Found %d LoadBalancer IP(s) starting with %r", len(ips), prefix)
    return ips


def parse_ip_list(text: str) -> list[str]:
    """Split a comma-separated IP string, dropping blanks and whitespace."""
    return [part.strip() for part in text.split(",") if part.strip()]
