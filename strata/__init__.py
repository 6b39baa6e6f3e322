"""Strata: weighted generative-art collections.

Allocates a collision-free random identifier to every item at creation,
re-derives each item's trait vector from that identifier and a single
collection seed, and composes the traits into an image document and an
attribute list.
"""

__version__ = "0.1.0"
