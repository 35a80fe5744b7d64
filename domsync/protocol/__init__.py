from .endpoint import channel_url
from .decoder import decode_frame, parse_stream_item

__all__ = ["channel_url", "decode_frame", "parse_stream_item"]
