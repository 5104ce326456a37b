"""Shared utilities for the payment broker."""
