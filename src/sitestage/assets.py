"""Discovery of layouts bundled with the sitestage package."""

from importlib.resources import files
from pathlib import Path


def get_layouts_dir() -> Path:
    """Return path to bundled fallback layouts.

    Returns:
        Path to the directory holding layouts every site can use
        (e.g. the redirect layout).

    Raises:
        FileNotFoundError: If the layouts are not bundled.
    """
    layouts = files("sitestage").joinpath("layouts")
    if not layouts.is_dir():
        msg = "Bundled layouts not found. Reinstall the sitestage package."
        raise FileNotFoundError(msg)
    return Path(str(layouts))
