from typing import Optional

WAL_SEGMENT_SUFFIX_READY = ".ready"


def parse_lsn(text: str) -> int:
    """
    Convert a textual LSN such as '0/3000148' into its 64-bit byte offset.
    :param text: LSN in 'XXXXXXXX/XXXXXXXX' hex notation
    :return: absolute byte position in the WAL stream
    :raises ValueError: when the text is not a valid LSN
    """
    if text is None:
        raise ValueError("LSN is None")
    pieces = str(text).strip().split('/')
    if len(pieces) != 2 or not all(pieces):
        raise ValueError(f"invalid LSN: {text!r}")
    high, low = int(pieces[0], 16), int(pieces[1], 16)
    if high > 0xFFFFFFFF or low > 0xFFFFFFFF or high < 0 or low < 0:
        raise ValueError(f"invalid LSN: {text!r}")
    return (high << 32) | low


def lsn_diff(ahead: Optional[str], behind: Optional[str]) -> Optional[int]:
    """
    Byte distance from `behind` up to `ahead`, never negative.
    Returns None when either side is unknown.
    """
    if ahead is None or behind is None:
        return None
    return max(0, parse_lsn(ahead) - parse_lsn(behind))


def strip_ready_suffix(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    if name.endswith(WAL_SEGMENT_SUFFIX_READY):
        return name[:-len(WAL_SEGMENT_SUFFIX_READY)]
    return name
