"""Service layer: chain access, discovery and marketplace."""
