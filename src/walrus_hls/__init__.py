"""Convert MP4 video to HLS, store it on Walrus and record it on Sui."""

__version__ = "0.1.0"
