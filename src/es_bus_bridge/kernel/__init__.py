"""Kernel – messages, hook emitter and the error hierarchy."""
