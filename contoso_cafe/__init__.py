"""Contoso Cafe bot: table reservations over a Bot Framework style HTTP endpoint."""

__version__ = "0.1.0"
