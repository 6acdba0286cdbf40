"""Command line interface for the Hunter System."""
