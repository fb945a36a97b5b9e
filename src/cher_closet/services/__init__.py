"""Service layer: persistence façade and external adapters."""
