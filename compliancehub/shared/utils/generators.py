"""ID generators (CUID2) and deterministic composite ids."""

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def composite_id(prefix: str, *parts: str) -> str:
    """Join a prefix and key parts into a deterministic record id.

    Migration writes use these ids as idempotency keys, e.g.
    composite_id("eas-jt", "Admin", "ent-root") -> "eas-jt-Admin-ent-root".
    """
    return "-".join([prefix, *parts])
