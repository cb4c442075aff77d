"""Round-trip throughput probe for device-to-cloud event pipelines."""

__version__ = "1.0.0"
