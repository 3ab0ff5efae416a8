"""Repair Beam auto-generated lists service.

Maintains AI-generated brand and model catalogs for the device
categories a repair shop works with.
"""
