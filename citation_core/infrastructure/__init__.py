"""Infraestructura de texto del core (sin IO)."""
