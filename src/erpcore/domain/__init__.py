"""Domain layer: model, ports, reconciliation engine and aggregate use cases."""
