"""Utilities used by the live MEA scripts."""
