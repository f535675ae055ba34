"""Domain services: authorization policy, workflow engine and queries."""
