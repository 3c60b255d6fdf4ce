"""Parsing of rfc5545 content lines into a generic component tree."""
