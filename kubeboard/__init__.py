"""Read Kubernetes deployments and render them with their pods, services and ingresses."""

__version__ = "0.1.0"