"""Process memory ceiling, applied once at startup."""

from sheet_inspect.models.data_models import MemoryConfig
from sheet_inspect.utils.logger import get_inspection_logger

try:
    import resource
except ImportError:  # Windows
    resource = None

logger = get_inspection_logger(__name__)


def apply_memory_limit(config: MemoryConfig) -> bool:
    """Cap the address space of the current process.

    Every sheet is materialized in memory, so the ceiling bounds how large a
    workbook can be inspected before the process fails fast with
    ``MemoryError``. Non-positive limits are ignored with a warning.

    Args:
        config: Memory configuration

    Returns:
        True if the limit was applied
    """
    if config.limit_mb is None or config.limit_mb <= 0:
        logger.warning("Invalid memory value provided. Skipping memory limit change.")
        return False

    if resource is None:
        logger.warning("Memory limits are not supported on this platform")
        return False

    soft, hard = resource.getrlimit(resource.RLIMIT_AS)
    limit = config.limit_bytes
    if hard != resource.RLIM_INFINITY and limit > hard:
        limit = hard

    try:
        resource.setrlimit(resource.RLIMIT_AS, (limit, hard))
    except (ValueError, OSError) as e:
        logger.warning(f"Cannot set memory limit to {config.limit_mb}MB: {e}")
        return False

    logger.debug(f"Memory limit set to {config.limit_mb}MB")
    return True
