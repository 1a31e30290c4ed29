"""Export and import pipelines.

This module sequences the codecs into document and image pipelines.
It restores a validated envelope into the destination stores.
"""
