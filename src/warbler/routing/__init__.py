"""Routing — ordered route table with regex pattern matching.

Routes are registered during setup, compiled when added, and scanned in
registration order at request time.
"""
