"""DOM-specific directive and node transforms."""
