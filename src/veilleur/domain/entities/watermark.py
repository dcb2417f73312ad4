"""
Watermark entity - index tier sync position.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Watermark:
    """
    Latest block fully processed by the index service.

    Expected to be non-decreasing across polls; consumers tolerate
    regressions rather than rejecting them.
    """

    indexed_block: int

    def __post_init__(self):
        """Validate block number."""
        if self.indexed_block < 0:
            raise ValueError("indexed_block must be non-negative")

    def covers(self, block_number: int) -> bool:
        """True once the target block itself has been indexed."""
        return self.indexed_block >= block_number
