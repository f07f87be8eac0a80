"""Manifest normalization: spreadsheet in, canonical line items out."""
