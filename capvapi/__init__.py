"""vSphere cluster infrastructure API types for the v1alpha3 group, with
cloud-provider INI encoding and manifest conversion."""

__version__ = "0.1.0"