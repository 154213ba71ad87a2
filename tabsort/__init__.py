"""Deterministic tab ordering: dedupe, group and sort browser windows."""
