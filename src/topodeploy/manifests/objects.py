"""Default Kubernetes objects for the resource-topology-exporter.

Every builder returns a fresh plain ``dict`` shaped exactly like the YAML
the API server accepts, so objects can be deep-copied, edited in place and
dumped without any client library.
"""

from __future__ import annotations

from typing import Any

import yaml

RTE_COMMAND = "/bin/resource-topology-exporter"
RTE_DEFAULT_ARGS = [
    "--sleep-interval=10s",
    "--sysfs=/host-sys",
    "--kubelet-state-dir=/host-var/lib/kubelet",
    "--podresources-socket=unix:///host-var/lib/kubelet/pod-resources/kubelet.sock",
]
RTE_IMAGE = "quay.io/k8stopologyawareschedwg/resource-topology-exporter:latest"
RTE_CONTAINER_NAME = "resource-topology-exporter"

DEFAULT_NAME = "rte"
DEFAULT_NAMESPACE = "tas-topology-updater"
DAEMONSET_NAME = "resource-topology-exporter-ds"
SCC_NAME = "resource-topology-exporter"
MACHINE_CONFIG_NAME = "51-rte"

CONFIG_MAP_NAME = "rte-config"
CONFIG_DATA_FIELD = "config.yaml"
CONFIG_MOUNT_PATH = "/etc/resource-topology-exporter"

NOTIFY_DIR = "/run/rte"
NOTIFY_FILE = f"{NOTIFY_DIR}/notify"

SELINUX_CONTEXT_TYPE = "rte.process"

Obj = dict[str, Any]


def _meta(name: str, namespace: str | None = None) -> dict[str, Any]:
    meta: dict[str, Any] = {"name": name}
    if namespace:
        meta["namespace"] = namespace
    return meta


def namespace(name: str) -> Obj:
    return {"apiVersion": "v1", "kind": "Namespace", "metadata": _meta(name)}


def service_account(name: str, ns: str) -> Obj:
    return {"apiVersion": "v1", "kind": "ServiceAccount", "metadata": _meta(name, ns)}


def role(name: str, ns: str) -> Obj:
    return {
        "apiVersion": "rbac.authorization.k8s.io/v1",
        "kind": "Role",
        "metadata": _meta(name, ns),
        "rules": [
            {"apiGroups": [""], "resources": ["configmaps"], "verbs": ["get", "list", "watch"]},
        ],
    }


def role_binding(name: str, ns: str) -> Obj:
    return {
        "apiVersion": "rbac.authorization.k8s.io/v1",
        "kind": "RoleBinding",
        "metadata": _meta(name, ns),
        "roleRef": {"apiGroup": "rbac.authorization.k8s.io", "kind": "Role", "name": name},
        "subjects": [{"kind": "ServiceAccount", "name": name, "namespace": ns}],
    }


def cluster_role(name: str) -> Obj:
    return {
        "apiVersion": "rbac.authorization.k8s.io/v1",
        "kind": "ClusterRole",
        "metadata": _meta(name),
        "rules": [
            {"apiGroups": [""], "resources": ["nodes"], "verbs": ["get", "list"]},
            {"apiGroups": [""], "resources": ["pods"], "verbs": ["get", "list"]},
            {
                "apiGroups": ["topology.node.k8s.io"],
                "resources": ["noderesourcetopologies"],
                "verbs": ["create", "update", "get", "list"],
            },
        ],
    }


def cluster_role_binding(name: str, ns: str) -> Obj:
    return {
        "apiVersion": "rbac.authorization.k8s.io/v1",
        "kind": "ClusterRoleBinding",
        "metadata": _meta(name),
        "roleRef": {
            "apiGroup": "rbac.authorization.k8s.io",
            "kind": "ClusterRole",
            "name": name,
        },
        "subjects": [{"kind": "ServiceAccount", "name": name, "namespace": ns}],
    }


def config_map(name: str, ns: str, config_data: str) -> Obj:
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": _meta(name, ns),
        "data": {CONFIG_DATA_FIELD: config_data},
    }


def daemon_set(name: str, ns: str, service_account_name: str) -> Obj:
    labels = {"name": RTE_CONTAINER_NAME}
    return {
        "apiVersion": "apps/v1",
        "kind": "DaemonSet",
        "metadata": _meta(name, ns),
        "spec": {
            "selector": {"matchLabels": dict(labels)},
            "template": {
                "metadata": {"labels": dict(labels)},
                "spec": {
                    "serviceAccountName": service_account_name,
                    "containers": [
                        {
                            "name": RTE_CONTAINER_NAME,
                            "image": RTE_IMAGE,
                            "imagePullPolicy": "Always",
                            "command": [RTE_COMMAND, *RTE_DEFAULT_ARGS],
                            "env": [
                                {
                                    "name": "NODE_NAME",
                                    "valueFrom": {"fieldRef": {"fieldPath": "spec.nodeName"}},
                                },
                            ],
                            "volumeMounts": [
                                {"name": "host-sys", "mountPath": "/host-sys", "readOnly": True},
                                {"name": "host-kubelet-state", "mountPath": "/host-var/lib/kubelet"},
                                {
                                    "name": "host-podresources",
                                    "mountPath": "/host-var/lib/kubelet/pod-resources",
                                },
                            ],
                        }
                    ],
                    "volumes": [
                        {"name": "host-sys", "hostPath": {"path": "/sys"}},
                        {"name": "host-kubelet-state", "hostPath": {"path": "/var/lib/kubelet"}},
                        {
                            "name": "host-podresources",
                            "hostPath": {"path": "/var/lib/kubelet/pod-resources"},
                        },
                    ],
                },
            },
        },
    }


def machine_config(name: str = MACHINE_CONFIG_NAME) -> Obj:
    return {
        "apiVersion": "machineconfiguration.openshift.io/v1",
        "kind": "MachineConfig",
        "metadata": {
            "name": name,
            "labels": {"machineconfiguration.openshift.io/role": "worker"},
        },
        "spec": {"config": {"ignition": {"version": "3.2.0"}}},
    }


def security_context_constraints(name: str = SCC_NAME) -> Obj:
    return {
        "apiVersion": "security.openshift.io/v1",
        "kind": "SecurityContextConstraints",
        "metadata": _meta(name),
        "allowHostDirVolumePlugin": True,
        "allowPrivilegedContainer": False,
        "readOnlyRootFilesystem": False,
        "runAsUser": {"type": "RunAsAny"},
        "seLinuxContext": {
            "type": "MustRunAs",
            "seLinuxOptions": {"type": SELINUX_CONTEXT_TYPE},
        },
        "users": [],
        "volumes": ["configMap", "downwardAPI", "emptyDir", "hostPath", "projected"],
    }


def dump_yaml(objects: list[Obj]) -> str:
    """Render *objects* as a multi-document YAML stream."""
    return yaml.safe_dump_all(objects, sort_keys=False, explicit_start=True)


def object_label(obj: Obj) -> str:
    """Return ``apiVersion/Kind`` for display, e.g. ``apps/v1/DaemonSet``."""
    return f"{obj.get('apiVersion', '')}/{obj.get('kind', '')}"
