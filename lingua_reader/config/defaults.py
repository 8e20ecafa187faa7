"""Default configuration values for Lingua Reader."""

from .config import LinguaReaderConfig


def create_default_config(**overrides) -> LinguaReaderConfig:
    """Create a default configuration with optional overrides.

    Args:
        **overrides: Keyword arguments to override default values

    Returns:
        LinguaReaderConfig with defaults and overrides applied

    Example:
        config = create_default_config(
            api_base_url="https://reader.example.com/api",
            position_flush_interval=10.0,
        )
    """
    return LinguaReaderConfig(**overrides)
