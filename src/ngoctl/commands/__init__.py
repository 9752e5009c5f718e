"""ngoctl command implementations."""
