"""Compose and submit LoRaWAN downlinks to The Things Stack."""

__version__ = "0.1.0"
