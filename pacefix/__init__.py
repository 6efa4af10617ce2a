"""Change the pace of a recorded FIT activity while keeping everything else."""

__version__ = "0.1.0"
