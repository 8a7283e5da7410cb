import os
from pathlib import Path


def get_fall_home_dir() -> Path:
    """
    Return the Fall home directory.

    Taken from the FALL_HOME environment variable, defaulting to ~/.fall.
    """
    home = os.environ.get("FALL_HOME")
    if home:
        return Path(home).expanduser()
    return Path.home() / ".fall"
