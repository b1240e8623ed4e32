"""Application layer: use cases and provisioning tasks."""
