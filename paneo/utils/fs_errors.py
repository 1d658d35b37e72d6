"""Classification of platform filesystem errors."""

import errno

# Windows reports a cross-volume rename as ERROR_NOT_SAME_DEVICE
_WINERROR_NOT_SAME_DEVICE = 17


def is_cross_device_error(exc: BaseException) -> bool:
    """True when a rename failed only because source and target are on different devices."""
    if not isinstance(exc, OSError):
        return False
    exdev = getattr(errno, "EXDEV", None)
    if exdev is not None and exc.errno == exdev:
        return True
    return getattr(exc, "winerror", None) == _WINERROR_NOT_SAME_DEVICE


def is_missing_error(exc: BaseException) -> bool:
    return isinstance(exc, FileNotFoundError) or (
        isinstance(exc, OSError) and exc.errno in (errno.ENOENT, errno.ENOTDIR)
    )
