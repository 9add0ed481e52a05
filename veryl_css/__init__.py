"""Generate CSS from the intermediate representation of a single hardware module."""

__version__ = "0.1.0"
__all__ = ["codegen", "cssfmt", "ir", "literals"]