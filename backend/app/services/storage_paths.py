from __future__ import annotations


def storage_path_from_public_url(url, bucket: str) -> str | None:
    """
    Extract the bucket-relative key from a public object URL
    (".../object/public/<bucket>/<key>").
    Returns None when the URL does not carry that bucket's public prefix.
    """
    if not url or not isinstance(url, str) or not bucket:
        return None
    prefix = f"/object/public/{bucket}/"
    i = url.find(prefix)
    if i == -1:
        return None
    return url[i + len(prefix):].strip() or None
