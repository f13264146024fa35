"""HTTP header helpers."""

from urllib.parse import quote


def attachment_disposition(filename: str) -> str:
    """``Content-Disposition`` value for a download of *filename*.

    Header values are latin-1 on the wire, so the real name travels in the
    RFC 5987 ``filename*`` parameter and ``filename`` carries an ASCII fallback.
    """
    fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', "'").replace("\\", "_")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"
