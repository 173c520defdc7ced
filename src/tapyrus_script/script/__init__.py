"""Tapyrus script handling — opcodes, templates, destinations, policy."""
