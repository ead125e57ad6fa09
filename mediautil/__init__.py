"""Byte buffers, AMF codecs, bit readers, RTP reordering and timing helpers for media streaming."""

__version__ = "0.1.0"