"""Marketplace entities: products, follows, feedback and market price snapshots."""
