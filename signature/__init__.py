"""
Signature feature.

Freehand signature capture into a persistent catalog, visual placement on a
document preview and composition of the signed PDF artifact.
"""
