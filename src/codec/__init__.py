"""Binary export codecs.

This module turns envelope text into framed, checksummed pixel data.
It also embeds pixel blocks in PNG containers and reverses every step.
"""
