"""Resale inventory tracker backend: receipt OCR extraction and lot storage."""
