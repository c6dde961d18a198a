"""Resource-topology-exporter manifest bundle and its rendering rules.

``get_manifests()`` builds the stock objects for a platform; ``render()``
returns a customised deep copy.  The exporter command line is edited through
:mod:`topodeploy.flagcodec` so that user-visible flag order is stable: stock
flags keep their place and injected flags are appended.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from topodeploy.flagcodec import FlagList, parse_command_line
from topodeploy.manifests import objects
from topodeploy.manifests.objects import Obj
from topodeploy.platform import Platform

_NAMESPACED = ("service_account", "role", "role_binding", "config_map", "daemon_set")
OPENSHIFT_KUBELET_CONFIG = "/host-etc/kubernetes/kubelet.conf"


@dataclass
class DaemonSetOptions:
    """Knobs applied to the exporter DaemonSet."""

    image: str = ""
    pull_if_not_present: bool = False
    pods_fingerprint: bool = False
    notification: bool = False
    update_interval: str = ""
    verbose: int = 0


@dataclass
class RenderOptions:
    daemon_set: DaemonSetOptions = field(default_factory=DaemonSetOptions)
    machine_config_pool_selector: dict[str, str] | None = None
    config_data: str = ""
    namespace: str = ""
    name: str = ""


@dataclass
class Manifests:
    platform: Platform
    namespace: Obj | None = None
    service_account: Obj | None = None
    role: Obj | None = None
    role_binding: Obj | None = None
    cluster_role: Obj | None = None
    cluster_role_binding: Obj | None = None
    config_map: Obj | None = None
    daemon_set: Obj | None = None
    # OpenShift only
    machine_config: Obj | None = None
    security_context_constraint: Obj | None = None

    def clone(self) -> Manifests:
        return copy.deepcopy(self)

    def render(self, options: RenderOptions) -> Manifests:
        """Return a rendered copy; ``self`` is left untouched."""
        ret = self.clone()

        if options.namespace:
            if ret.namespace is not None:
                ret.namespace["metadata"]["name"] = options.namespace
            for attr in _NAMESPACED:
                obj = getattr(ret, attr)
                if obj is not None:
                    obj["metadata"]["namespace"] = options.namespace

        if options.name:
            for attr in (
                "service_account",
                "role",
                "role_binding",
                "cluster_role",
                "cluster_role_binding",
                "daemon_set",
            ):
                getattr(ret, attr)["metadata"]["name"] = options.name
            ret.role_binding["roleRef"]["name"] = options.name
            ret.cluster_role_binding["roleRef"]["name"] = options.name

        sa_name = ret.service_account["metadata"]["name"]
        sa_namespace = ret.service_account["metadata"]["namespace"]
        update_binding_subjects(ret.role_binding, sa_name, sa_namespace)
        update_binding_subjects(ret.cluster_role_binding, sa_name, sa_namespace)
        ret.daemon_set["spec"]["template"]["spec"]["serviceAccountName"] = sa_name

        if options.config_data:
            ret.config_map = create_config_map(
                ret.daemon_set["metadata"]["namespace"],
                objects.CONFIG_MAP_NAME,
                options.config_data,
            )
        config_map_name = ret.config_map["metadata"]["name"] if ret.config_map else ""

        update_daemon_set(ret.daemon_set, self.platform, config_map_name, options.daemon_set)

        if self.platform is Platform.OPENSHIFT:
            set_selinux_context(ret.daemon_set)
            if options.name:
                ret.machine_config["metadata"]["name"] = make_machine_config_name(options.name)
            if options.machine_config_pool_selector is not None:
                ret.machine_config["metadata"]["labels"] = dict(
                    options.machine_config_pool_selector
                )
            bind_scc_to_service_account(ret.security_context_constraint, ret.service_account)

        return ret

    def to_objects(self) -> list[Obj]:
        """Return the objects in creation order, skipping absent ones."""
        ordered = [
            self.namespace,
            self.config_map,
            self.machine_config,
            self.security_context_constraint,
            self.role,
            self.role_binding,
            self.cluster_role,
            self.cluster_role_binding,
            self.daemon_set,
            self.service_account,
        ]
        return [obj for obj in ordered if obj is not None]


def get_manifests(platform: Platform, namespace: str = objects.DEFAULT_NAMESPACE) -> Manifests:
    """Build the stock manifest bundle for *platform*."""
    name = objects.DEFAULT_NAME
    mf = Manifests(platform=platform)
    if platform is Platform.KUBERNETES:
        mf.namespace = objects.namespace(namespace)
    else:
        mf.machine_config = objects.machine_config()
        mf.security_context_constraint = objects.security_context_constraints()
    mf.service_account = objects.service_account(name, namespace)
    mf.role = objects.role(name, namespace)
    mf.role_binding = objects.role_binding(name, namespace)
    mf.cluster_role = objects.cluster_role(name)
    mf.cluster_role_binding = objects.cluster_role_binding(name, namespace)
    mf.daemon_set = objects.daemon_set(objects.DAEMONSET_NAME, namespace, name)
    return mf


def create_config_map(namespace: str, name: str, config_data: str) -> Obj:
    return objects.config_map(name, namespace, config_data)


def make_machine_config_name(name: str) -> str:
    return f"51-{name}"


def update_binding_subjects(binding: Obj, sa_name: str, sa_namespace: str) -> None:
    for subject in binding.get("subjects", []):
        if subject.get("kind") == "ServiceAccount":
            subject["name"] = sa_name
            subject["namespace"] = sa_namespace


def _exporter_container(ds: Obj) -> Obj:
    containers = ds["spec"]["template"]["spec"]["containers"]
    for cnt in containers:
        if cnt.get("name") == objects.RTE_CONTAINER_NAME:
            return cnt
    return containers[0]


def _add_volume(ds: Obj, cnt: Obj, volume: Obj, mount: Obj) -> None:
    pod_spec = ds["spec"]["template"]["spec"]
    volumes = pod_spec.setdefault("volumes", [])
    if all(v["name"] != volume["name"] for v in volumes):
        volumes.append(volume)
    mounts = cnt.setdefault("volumeMounts", [])
    if all(m["name"] != mount["name"] for m in mounts):
        mounts.append(mount)


def _remove_volume(ds: Obj, cnt: Obj, name: str) -> None:
    pod_spec = ds["spec"]["template"]["spec"]
    pod_spec["volumes"] = [v for v in pod_spec.get("volumes", []) if v["name"] != name]
    cnt["volumeMounts"] = [m for m in cnt.get("volumeMounts", []) if m["name"] != name]


def update_daemon_set(
    ds: Obj,
    platform: Platform,
    config_map_name: str,
    opts: DaemonSetOptions,
) -> FlagList:
    """Apply *opts* to the exporter container of *ds* in place.

    Returns the edited command line.
    """
    cnt = _exporter_container(ds)

    if opts.image:
        cnt["image"] = opts.image
    cnt["imagePullPolicy"] = "IfNotPresent" if opts.pull_if_not_present else "Always"

    flags = parse_command_line([*cnt.get("command", []), *cnt.pop("args", [])])
    if opts.verbose:
        flags.set_option("--v", str(opts.verbose))
    if opts.update_interval:
        flags.set_option("--sleep-interval", opts.update_interval)

    if opts.pods_fingerprint:
        flags.set_toggle("--pods-fingerprint")
    else:
        flags.delete("--pods-fingerprint")

    if opts.notification:
        flags.set_option("--notify-file", objects.NOTIFY_FILE)
        _add_volume(
            ds,
            cnt,
            {"name": "host-rte-notification", "hostPath": {"path": objects.NOTIFY_DIR}},
            {"name": "host-rte-notification", "mountPath": objects.NOTIFY_DIR},
        )
    else:
        flags.delete("--notify-file")
        _remove_volume(ds, cnt, "host-rte-notification")

    if config_map_name:
        flags.set_option("--config", f"{objects.CONFIG_MOUNT_PATH}/{objects.CONFIG_DATA_FIELD}")
        _add_volume(
            ds,
            cnt,
            {"name": "rte-config-volume", "configMap": {"name": config_map_name, "optional": True}},
            {"name": "rte-config-volume", "mountPath": objects.CONFIG_MOUNT_PATH},
        )

    if platform is Platform.OPENSHIFT:
        flags.set_option("--kubelet-config-file", OPENSHIFT_KUBELET_CONFIG)
        _add_volume(
            ds,
            cnt,
            {"name": "host-etc-kubernetes", "hostPath": {"path": "/etc/kubernetes"}},
            {"name": "host-etc-kubernetes", "mountPath": "/host-etc/kubernetes", "readOnly": True},
        )

    cnt["command"] = flags.argv()
    return flags


def set_selinux_context(ds: Obj) -> None:
    cnt = _exporter_container(ds)
    security = cnt.setdefault("securityContext", {})
    security["seLinuxOptions"] = {"type": objects.SELINUX_CONTEXT_TYPE}


def bind_scc_to_service_account(scc: Obj, sa: Obj) -> None:
    user = f"system:serviceaccount:{sa['metadata']['namespace']}:{sa['metadata']['name']}"
    scc["users"] = [user]
