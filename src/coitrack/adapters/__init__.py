"""Adapters connecting the compliance domain to storage and external inputs."""
