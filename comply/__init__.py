"""Comply media API."""
