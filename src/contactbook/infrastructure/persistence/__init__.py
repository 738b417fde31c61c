"""Durable repository adapters: JSON file and MongoDB."""
