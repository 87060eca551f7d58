"""Postcode-to-zone lookup and report table builders."""
