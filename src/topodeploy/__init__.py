"""topodeploy: deployment helper for the resource-topology-exporter.

Renders the exporter's Kubernetes manifests, creates and removes them on a
cluster, waits for namespace teardown, and edits the exporter command line
through a small argv flag codec.
"""

__version__ = "0.1.0"
