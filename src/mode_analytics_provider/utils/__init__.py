"""Shared utilities for the Mode Analytics provider."""
