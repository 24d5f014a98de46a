class OracleError(Exception):
    """The text-generation call failed, timed out, or returned unusable content."""


class MirrorError(Exception):
    """Writing to the on-disk project mirror failed."""
