"""Progress bar utilities for nova-pydrive."""

from typing import Union

from tqdm import tqdm


def create_progress_bar(
    total: int,
    desc: str = "",
    unit: str = "B",
    unit_scale: bool = True,
    unit_divisor: int = 1024,
    disable: bool = False,
    leave: bool = False,
    miniters: Union[int, float] = 1,
    dynamic_ncols: bool = True,
) -> tqdm:
    """Create a customized progress bar for file transfers.

    Args:
        total: Total amount of units to process.
        desc: Description to display next to the progress bar.
        unit: String that will be used to define the unit of each iteration.
        unit_scale: Whether to scale the units automatically.
        unit_divisor: Unit divisor for scaling (default: 1024 for bytes).
        disable: Whether to disable the entire progress bar.
        leave: Whether to leave the progress bar after completion.
        miniters: Minimum progress display update interval.
        dynamic_ncols: Whether to adapt to terminal width changes.

    Returns:
        A configured tqdm progress bar instance.
    """
    bar = tqdm(
        total=total,
        unit=unit,
        unit_scale=unit_scale,
        unit_divisor=unit_divisor,
        disable=disable,
        leave=leave,
        miniters=miniters,
        dynamic_ncols=dynamic_ncols,
    )
    bar.set_description_str(desc)
    return bar


def format_size(size_bytes: int) -> str:
    """Format file size in bytes to human readable format.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted string representing the size.
    """
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_bytes < 1024:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.2f} PB"
