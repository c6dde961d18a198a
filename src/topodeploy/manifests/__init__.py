"""manifests - Kubernetes objects for the resource-topology-exporter.

Re-exports the public names so callers can ``from topodeploy.manifests
import get_manifests, RenderOptions``.
"""

from topodeploy.manifests.objects import dump_yaml as dump_yaml
from topodeploy.manifests.objects import object_label as object_label
from topodeploy.manifests.rte import DaemonSetOptions as DaemonSetOptions
from topodeploy.manifests.rte import Manifests as Manifests
from topodeploy.manifests.rte import RenderOptions as RenderOptions
from topodeploy.manifests.rte import create_config_map as create_config_map
from topodeploy.manifests.rte import get_manifests as get_manifests
from topodeploy.manifests.rte import make_machine_config_name as make_machine_config_name
