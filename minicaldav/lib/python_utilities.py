def to_wire(text):
    """
    Encode text for the wire: utf-8 bytes with CRLF line endings, as
    both iCalendar and the HTTP servers we talk to expect.
    """
    if text is None:
        return None
    if isinstance(text, str):
        text = bytes(text, "utf-8")
    text = text.replace(b"\n", b"\r\n")
    text = text.replace(b"\r\r\n", b"\r\n")
    return text


def to_normal_str(text):
    """
    Make sure we return a str with plain newlines, no matter if we
    were given bytes or str.  Used for log output.
    """
    if text is None:
        return text
    if not isinstance(text, str):
        text = text.decode("utf-8")
    return text.replace("\r\n", "\n")


def to_unicode(text):
    if text and isinstance(text, bytes):
        return text.decode("utf-8")
    return text
