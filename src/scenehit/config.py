"""Runtime configuration: Taichi backend selection and logging.

Settings come from a RuntimeConfig, usually built from environment variables:

    SCENEHIT_ARCH         Taichi backend: cpu, gpu, cuda, vulkan, metal, opengl
                          (default: cpu)
    SCENEHIT_RANDOM_SEED  Seed for Taichi's random number generator (default: 0)
    SCENEHIT_DEBUG        Enable Taichi debug mode (default: false)
    SCENEHIT_LOG_LEVEL    Logging level for the scenehit loggers (default: WARNING)
    SCENEHIT_LOG_FORMAT   Logging format string

init_runtime() must run before the first query. It always disables Taichi's
fast math, because the intersection kernels depend on NaN comparing false.

Example:
    >>> from scenehit.config import RuntimeConfig, init_runtime
    >>> init_runtime(RuntimeConfig(arch="cpu", log_level="DEBUG"))
"""

import logging
import os
from dataclasses import dataclass

import taichi as ti

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Backend names accepted in RuntimeConfig.arch
SUPPORTED_ARCHS = ("cpu", "gpu", "cuda", "vulkan", "metal", "opengl")


@dataclass
class RuntimeConfig:
    """Settings for Taichi initialization and logging.

    Attributes:
        arch: Taichi backend name, one of SUPPORTED_ARCHS.
        random_seed: Seed for Taichi's random number generator.
        debug: Enable Taichi debug mode (bounds checks, slower).
        log_level: Level name for the "scenehit" logger.
        log_format: Format string for the console handler.
    """

    arch: str = "cpu"
    random_seed: int = 0
    debug: bool = False
    log_level: str = "WARNING"
    log_format: str = DEFAULT_LOG_FORMAT

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Build a configuration from SCENEHIT_* environment variables."""
        return cls(
            arch=os.getenv("SCENEHIT_ARCH", "cpu").lower(),
            random_seed=int(os.getenv("SCENEHIT_RANDOM_SEED", "0")),
            debug=os.getenv("SCENEHIT_DEBUG", "false").lower() == "true",
            log_level=os.getenv("SCENEHIT_LOG_LEVEL", "WARNING"),
            log_format=os.getenv("SCENEHIT_LOG_FORMAT", DEFAULT_LOG_FORMAT),
        )

    def taichi_arch(self):
        """Resolve the configured backend name to a Taichi arch.

        Raises:
            ValueError: If the backend name is not supported.
        """
        if self.arch not in SUPPORTED_ARCHS:
            raise ValueError(
                f"Unknown Taichi arch: {self.arch!r} (expected one of {', '.join(SUPPORTED_ARCHS)})"
            )
        return getattr(ti, self.arch)


def setup_logging(level: str = "WARNING", fmt: str = DEFAULT_LOG_FORMAT) -> logging.Logger:
    """Configure the "scenehit" package logger.

    Adds a single console handler; calling it again only updates the level
    and format.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        fmt: Format string for log records.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("scenehit")
    log_level = getattr(logging, level.upper(), logging.WARNING)
    logger.setLevel(log_level)

    formatter = logging.Formatter(fmt)
    handler = next(
        (h for h in logger.handlers if getattr(h, "_scenehit_console", False)),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler()
        handler._scenehit_console = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    return logger


def init_runtime(config: RuntimeConfig | None = None) -> RuntimeConfig:
    """Configure logging and initialize Taichi.

    Args:
        config: The settings to apply. Defaults to RuntimeConfig.from_env().

    Returns:
        The configuration that was applied.

    Raises:
        ValueError: If the configured arch is not supported.
    """
    if config is None:
        config = RuntimeConfig.from_env()

    arch = config.taichi_arch()
    logger = setup_logging(config.log_level, config.log_format)

    ti.init(
        arch=arch,
        random_seed=config.random_seed,
        debug=config.debug,
        fast_math=False,
    )
    logger.info("Taichi initialized (arch=%s, debug=%s)", config.arch, config.debug)

    return config
