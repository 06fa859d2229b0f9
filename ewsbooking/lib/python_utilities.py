def to_wire(text):
    """Bytes for lxml and requests; str is encoded as utf-8"""
    if text is None:
        return None
    if isinstance(text, str):
        text = bytes(text, "utf-8")
    return text

