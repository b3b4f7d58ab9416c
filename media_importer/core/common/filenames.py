from typing import Tuple


def split_extension(name: str) -> Tuple[str, str]:
    """
    Splits a basename at its last dot: "a.tar.gz" -> ("a.tar", ".gz").

    A leading dot counts, so ".jpg" -> ("", ".jpg"). Names without a dot
    get an empty suffix.
    """
    stem, dot, extension = name.rpartition(".")
    if not dot:
        return name, ""
    return stem, f".{extension}"


def file_extension(name: str) -> str:
    """Lower-case extension without the dot, "" when there is none."""
    return split_extension(name)[1].lower().lstrip(".")
